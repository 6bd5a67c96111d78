import pytest

from restmodel import AssociationProxy, Collection, Model, UnknownModelError, belongs_to, has_many, has_one
from restmodel.associations import AssociationDescriptor


class Person(Model):
    notes = has_many()
    articles = has_many('Note', path='/articles')
    badge = has_one()
    team = belongs_to()
    gadgets = has_many()


# Defined after `Person` on purpose; names are resolved on first use.
class Note(Model):
    person = belongs_to()


class Badge(Model):
    pass


class Team(Model):
    pass


def test_class_access_gives_descriptor():
    assert isinstance(Person.notes, AssociationDescriptor)
    assert isinstance(Person().notes, AssociationProxy)


class TestDefaults:

    def test_parent_without_data(self, api, server):
        person = Person()
        notes = person.notes.fetch()
        assert isinstance(notes, Collection)
        assert notes == []
        assert person.badge.fetch() is None
        assert server.requests == []

    def test_default_is_a_fresh_copy(self, api):
        person = Person()
        first = person.notes.fetch()
        first.append('x')
        assert person.notes.fetch() == []
        assert person.notes.fetch() is not first

    def test_parent_with_explicit_empty_value(self, api, server):
        person = Person.instantiate({'id': 1, 'notes': []})
        assert person.notes.fetch() == []
        assert server.requests == []

    def test_unsaved_parent(self, api, server):
        person = Person(name='Tobias')
        assert person.notes.fetch() == []
        assert person.badge.fetch() is None
        assert server.requests == []


class TestHasMany:

    def test_fetch_relative_to_parent(self, api, server):
        server.get('/people/1/notes', [{'id': 1, 'body': 'Hi'}])
        person = Person.instantiate({'id': 1})

        notes = person.notes.fetch()
        assert isinstance(notes[0], Note)
        assert notes[0].body == 'Hi'

        # Memoized, and not written back to the parent
        assert person.notes.fetch() is notes
        assert person.notes.current() is notes
        assert len(server.requests) == 1
        assert 'notes' not in person.attributes

    def test_custom_path(self, api, server):
        server.get('/people/1/articles', [{'id': 4}])
        person = Person.instantiate({'id': 1})
        assert [note.id for note in person.articles] == [4]

    def test_embedded_data(self, api, server):
        person = Person.instantiate({'id': 1, 'notes': [{'id': 5, 'body': 'Embedded'}]})
        assert person.notes[0].body == 'Embedded'
        assert person.notes.current()[0].id == 5
        assert server.requests == []

    def test_current_does_not_fetch(self, api, server):
        person = Person.instantiate({'id': 1})
        assert person.notes.current() == []
        assert server.requests == []

    def test_find(self, api, server):
        server.get('/people/1/notes/3', {'id': 3, 'body': 'Third'})
        person = Person.instantiate({'id': 1})

        assert person.notes.find(3).body == 'Third'
        assert person.notes.find(None) is None
        assert person.notes.find('') is None
        assert len(server.requests) == 1

    def test_find_on_unsaved_parent(self, api, server):
        assert Person().notes.find(3) is None
        assert server.requests == []

    def test_proxy_acts_like_the_collection(self, api, server):
        person = Person.instantiate({'id': 1, 'notes': [{'id': 1}, {'id': 2}]})
        assert len(person.notes) == 2
        assert bool(person.notes)
        assert Note.instantiate({'id': 2}) in person.notes
        assert person.notes == [Note.instantiate({'id': 1}), Note.instantiate({'id': 2})]
        assert not Person().notes

    def test_assign(self, api):
        person = Person.instantiate({'id': 1})
        person.notes = Collection([Note(id=1)])
        assert person.attributes['notes'] == [Note(id=1)]
        assert 'notes' in person.changes


class TestWhere:

    def test_chaining_merges_params(self, api, server):
        server.get('/people/1/notes', [])
        person = Person.instantiate({'id': 1})

        scoped = person.notes.where(approved=1).where({'page': 2})
        assert scoped.params == {'approved': 1, 'page': 2}
        assert person.notes.params == {}

        assert list(scoped) == []
        assert dict(server.last.url.params) == {'approved': '1', 'page': '2'}

    def test_where_leaves_the_receiver_alone(self, api, server):
        server.get('/people/1/notes', [{'id': 1}])
        person = Person.instantiate({'id': 1})

        base = person.notes
        base.where(approved=1)
        assert base.params == {}

    def test_no_params_returns_same_proxy(self, api):
        person = Person.instantiate({'id': 1})
        proxy = person.notes
        assert proxy.where() is proxy
        assert proxy.all() is proxy

    def test_each_chain_fetches_once(self, api, server):
        server.get('/people/1/notes', [{'id': 1}])
        person = Person.instantiate({'id': 1})

        scoped = person.notes.where(page=1)
        scoped.fetch()
        scoped.fetch()
        assert len(server.requests) == 1

        person.notes.where(page=1).fetch()
        assert len(server.requests) == 2

    def test_params_force_a_request_over_embedded_data(self, api, server):
        server.get('/people/1/notes', [{'id': 9}])
        person = Person.instantiate({'id': 1, 'notes': [{'id': 5}]})

        assert person.notes.where(page=2)[0].id == 9
        assert person.notes[0].id == 5
        assert len(server.requests) == 1


class TestHasOne:

    def test_fetch(self, api, server):
        server.get('/people/1/badge', {'id': 2, 'name': 'gold'})
        person = Person.instantiate({'id': 1})

        assert person.badge.name == 'gold'
        assert isinstance(person.badge.fetch(), Badge)
        assert len(server.requests) == 1

    def test_embedded(self, api, server):
        person = Person.instantiate({'id': 1, 'badge': {'id': 2, 'name': 'gold'}})
        assert isinstance(person.attributes['badge'], Badge)
        assert person.badge.name == 'gold'
        assert person.attributes['badge'].changes == frozenset()
        assert server.requests == []


class TestBelongsTo:

    def test_fetch_by_foreign_key(self, api, server):
        server.get('/people/7', {'id': 7, 'name': 'Lindsay'})
        note = Note.instantiate({'id': 1, 'person_id': 7})

        assert note.person.name == 'Lindsay'
        assert server.last.url.path == '/people/7'

    def test_without_foreign_key(self, api, server):
        note = Note.instantiate({'id': 1})
        assert note.person.fetch() is None
        assert server.requests == []

    def test_default_foreign_key(self):
        declaration = Note.resolved_config().association('person')
        assert declaration.foreign_key == 'person_id'
        assert declaration.class_name == 'Person'

    def test_embedded(self, api, server):
        person = Person.instantiate({'id': 1, 'team': {'id': 3, 'name': 'Bluths'}})
        assert isinstance(person.attributes['team'], Team)
        assert person.team.name == 'Bluths'
        assert server.requests == []


class TestNestedAttributes:

    def test_has_one_create_then_merge(self, api):
        person = Person.instantiate({'id': 1})

        person.assign_attributes({'badge_attributes': {'name': 'gold'}})
        badge = person.attributes['badge']
        assert isinstance(badge, Badge)
        assert badge.name == 'gold'

        person.assign_attributes({'badge_attributes': {'level': 2}})
        assert person.attributes['badge'] is badge
        assert badge.name == 'gold'
        assert badge.level == 2
        assert 'level' in badge.changes

    def test_mapping_under_association_name(self, api):
        person = Person.instantiate({'id': 1, 'badge': {'id': 2}})
        badge = person.attributes['badge']

        person.assign_attributes({'badge': {'level': 3}})
        assert person.attributes['badge'] is badge
        assert badge.level == 3

    def test_has_many_from_list(self, api):
        person = Person(notes_attributes=[{'body': 'a'}, {'body': 'b'}])
        assert isinstance(person.attributes['notes'], Collection)
        assert [note.body for note in person.notes] == ['a', 'b']

    def test_has_many_from_mapping(self, api):
        person = Person.instantiate({'id': 1})
        person.assign_attributes({'notes_attributes': {'0': {'body': 'a'}, '1': {'body': 'b'}}})
        assert [note.body for note in person.attributes['notes']] == ['a', 'b']

    def test_through_the_proxy(self, api):
        person = Person.instantiate({'id': 1})
        person.badge.assign_nested_attributes({'name': 'silver'})
        assert person.attributes['badge'].name == 'silver'


def test_unknown_model(api):
    person = Person.instantiate({'id': 1})
    with pytest.raises(UnknownModelError) as exc:
        person.gadgets
    assert 'Gadget' in str(exc.value)
