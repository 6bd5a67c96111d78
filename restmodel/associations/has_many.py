from typing import Any, Dict, Mapping

import inflection

from restmodel.associations.association import Association
from restmodel.associations.declaration import AssociationDescriptor
from restmodel.collection import Collection
from restmodel.registry import nearby_class


class HasManyAssociation(Association):
    """`user.comments` - fetched with `GET /users/:id/comments`."""

    @classmethod
    def default_value(cls):
        return Collection()

    @classmethod
    def default_class_name(cls, name: str) -> str:
        return inflection.camelize(inflection.singularize(name))

    @classmethod
    def parse(cls, declaration, owner, data: Mapping[str, Any], clean: bool = False) -> Dict[str, Any]:
        value = data.get(declaration.data_key)
        if value is None or value is False:
            return {}

        klass = nearby_class(declaration.class_name, owner)
        return {declaration.name: klass.new_collection(value, clean=clean)}

    def fetch_remote(self, path, params):
        return self.klass.get_collection(path, params)

    def assign_nested_attributes(self, attributes):
        """Replaces the collection. Accepts a list of attribute mappings, or
        a mapping of them (as form-style `{"0": {...}, "1": {...}}` params
        come in).
        """
        if isinstance(attributes, Mapping):
            items = list(attributes.values())
        else:
            items = list(attributes)
        self.parent.attributes[self.name] = Collection(
            self.klass.new_from(self.klass.parse(item)) for item in items)


def has_many(class_name=None, **options) -> AssociationDescriptor:
    """
        class User(Model):
            comments = has_many()
            posts = has_many('BlogPost', path='/articles')
    """
    return AssociationDescriptor(HasManyAssociation, class_name, **options)
