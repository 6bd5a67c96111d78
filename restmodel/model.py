"""
The `Model` base class.

A model instance - a resource - is a bag of attributes, as they came from
the API. There is no schema: whatever keys the server sends become
attributes. Each write through `resource.name = value` (or
`assign_attributes`) marks that attribute as changed, which matters when
`send_only_modified_attributes` is on.

    class User(Model):
        comments = has_many()
        organization = belongs_to()

        class Meta:
            include_root_in_json = True
            parse_root_in_json = True

    user = User.find(1)          # GET /users/1
    user.name = 'Lindsay'
    user.save()                  # PUT /users/1 {"user": {...}}
    user.comments.where(approved=1).fetch()

Everything that is configured lives on an immutable `ModelConfig` built
from `Meta` and the association declarations when the class is created.
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from restmodel.api import API, get_default_api, peek_default_api
from restmodel.associations import AssociationDescriptor, AssociationProxy
from restmodel.collection import Collection
from restmodel.config import ModelConfig, ResolvedConfig, build_config
from restmodel.paths import PathResult, expand_path, select_template
from restmodel.registry import register
from restmodel.serializer import encode
from restmodel.shape import collection_metadata, extract, extract_array, is_collection_payload
from restmodel.utils import blank


logger = logging.getLogger(__name__)


ATTRIBUTES_SUFFIX = '_attributes'


class Model:

    _config: ModelConfig

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        parent = next(
            (base.__dict__['_config'] for base in cls.__mro__[1:] if '_config' in base.__dict__),
            None)
        declarations = [
            value.declaration for value in vars(cls).values()
            if isinstance(value, AssociationDescriptor)
        ]
        cls._config = build_config(cls.__name__, vars(cls).get('Meta'), parent, declarations)
        register(cls)

    def __init__(self, **attributes):
        self._setup()
        self.assign_attributes(self.parse_associations(attributes))

    def _setup(self):
        object.__setattr__(self, '_attributes', {})
        object.__setattr__(self, '_changes', set())
        object.__setattr__(self, '_associations', {})

    # Attributes

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        try:
            return self._attributes[name]
        except KeyError:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __setattr__(self, name, value):
        if name.startswith('_') or hasattr(getattr(type(self), name, None), '__set__'):
            object.__setattr__(self, name, value)
        else:
            self.set_attribute(name, value)

    def __eq__(self, other):
        return type(self) is type(other) and self._attributes == other._attributes

    __hash__ = None

    def __repr__(self):
        attributes = ' '.join(f'{k}={v!r}' for k, v in self._attributes.items())
        return f'<{type(self).__name__} {attributes}>' if attributes else f'<{type(self).__name__}>'

    @property
    def attributes(self) -> Dict[str, Any]:
        return self._attributes

    @property
    def changes(self) -> frozenset:
        return frozenset(self._changes)

    def changes_applied(self):
        self._changes.clear()

    def set_attribute(self, name: str, value: Any):
        self._attributes[name] = value
        self._changes.add(name)

    def assign_attributes(self, attributes: Mapping[str, Any]):
        """Set many attributes at once.

        Keys naming an association route to its nested assignment when the
        value is a mapping, as do `<association>_attributes` keys:

            user.assign_attributes({'role_attributes': {'name': 'admin'}})
        """
        config = self.resolved_config()
        for key, value in dict(attributes).items():
            key = str(key)

            declaration = None
            if key.endswith(ATTRIBUTES_SUFFIX):
                declaration = config.association(key[:-len(ATTRIBUTES_SUFFIX)])
            if declaration is None and isinstance(value, Mapping):
                declaration = config.association(key)

            if declaration is not None:
                self.association(declaration.name).assign_nested_attributes(value)
            else:
                self.set_attribute(key, value)

    @property
    def id(self):
        return self._attributes.get(self.resolved_config().primary_key)

    @id.setter
    def id(self, value):
        self.set_attribute(self.resolved_config().primary_key, value)

    def is_new(self) -> bool:
        return blank(self.id)

    def association(self, name: str) -> AssociationProxy:
        proxy = self._associations.get(name)
        if proxy is None:
            declaration = self.resolved_config().association(name)
            if declaration is None:
                raise AttributeError(f'{type(self).__name__} has no association "{name}"')
            proxy = AssociationProxy(declaration.new(self))
            self._associations[name] = proxy
        return proxy

    # Configuration

    @classmethod
    def resolved_config(cls) -> ResolvedConfig:
        return cls._config.resolve()

    @classmethod
    def get_api(cls) -> API:
        return cls.resolved_config().api or get_default_api()

    # Parsing

    @classmethod
    def parse(cls, data: Any) -> Any:
        """The resource data inside a response body, see `shape.extract`."""
        return extract(data, cls.resolved_config())

    @classmethod
    def parse_associations(cls, data: Mapping[str, Any], clean: bool = False) -> Dict[str, Any]:
        data = {str(k): v for k, v in data.items()}
        for declaration in cls.resolved_config().associations:
            parsed = declaration.association_class.parse(declaration, cls, data, clean=clean)
            if parsed:
                if declaration.data_key != declaration.name:
                    data.pop(declaration.data_key, None)
                data.update(parsed)
        return data

    @classmethod
    def new_from(cls, data: Any, clean: bool = False) -> 'Model':
        """Build a resource from already parsed data. A `clean` resource
        starts out with no changes, as is right for server data.
        """
        if isinstance(data, cls):
            return data
        if not isinstance(data, Mapping):
            logger.warning('Expected an object for %s, got %r; building an empty resource',
                           cls.__name__, data)
            data = {}

        resource = cls.__new__(cls)
        resource._setup()
        resource.assign_attributes(cls.parse_associations(data, clean=clean))
        if clean:
            resource.changes_applied()
        return resource

    @classmethod
    def instantiate(cls, data: Any, clean: bool = True) -> Optional['Model']:
        if isinstance(data, cls):
            return data
        data = cls.parse(data)
        if data is None:
            return None
        return cls.new_from(data, clean=clean)

    @classmethod
    def new_collection(cls, data: Any, clean: bool = True) -> Collection:
        config = cls.resolved_config()
        return Collection(
            (cls.instantiate(item, clean=clean) for item in extract_array(data, config)),
            metadata=collection_metadata(data, config))

    # Serialization

    @classmethod
    def params_for(cls, attributes: Mapping[str, Any], changes: Iterable[str] = ()) -> Mapping[str, Any]:
        config = cls.resolved_config()
        return encode(attributes, changes, config, api=config.api or peek_default_api())

    def to_params(self) -> Mapping[str, Any]:
        return type(self).params_for(self._attributes, self._changes)

    # Paths

    @classmethod
    def request_path_for(cls, params: Mapping[str, Any], member: bool = False,
                         path: Optional[str] = None) -> PathResult:
        config = cls.resolved_config()
        if member and blank(params.get(config.primary_key)):
            return PathResult.unavailable(config.primary_key, config.resource_path)
        template = path or select_template(config, params, member=member)
        return expand_path(template, params)

    @classmethod
    def build_request_path(cls, params: Optional[Mapping[str, Any]] = None,
                           path: Optional[str] = None) -> str:
        return cls.request_path_for(params or {}, path=path).unwrap()

    def request_path_result(self, params: Optional[Mapping[str, Any]] = None,
                            member: bool = False) -> PathResult:
        return type(self).request_path_for({**(params or {}), **self._attributes}, member=member)

    def request_path(self, params: Optional[Mapping[str, Any]] = None) -> str:
        return self.request_path_result(params).unwrap()

    # Fetching

    @classmethod
    def absolute_path(cls, path: str) -> str:
        if path.startswith('/'):
            return path
        return f'{cls.resolved_config().collection_path.rstrip("/")}/{path}'

    @classmethod
    def get_raw(cls, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return cls.get_api().fetch(cls.absolute_path(path), params)

    @classmethod
    def get(cls, path: str, params: Optional[Mapping[str, Any]] = None):
        """GET `path` and build a `Collection` or a single resource,
        depending on what came back.
        """
        data = cls.get_raw(path, params)
        if is_collection_payload(data, cls.resolved_config()):
            return cls.new_collection(data)
        return cls.instantiate(data)

    @classmethod
    def get_collection(cls, path: str, params: Optional[Mapping[str, Any]] = None) -> Collection:
        return cls.new_collection(cls.get_raw(path, params))

    @classmethod
    def get_resource(cls, path: str, params: Optional[Mapping[str, Any]] = None) -> Optional['Model']:
        return cls.instantiate(cls.get_raw(path, params))

    @classmethod
    def find(cls, id, **params) -> Optional['Model']:
        if blank(id):
            return None
        primary_key = cls.resolved_config().primary_key
        path = cls.build_request_path({**params, primary_key: id})
        return cls.get_resource(path, params)

    @classmethod
    def all(cls, **params) -> Collection:
        return cls.get_collection(cls.build_request_path(params), params)

    @classmethod
    def build(cls, **attributes) -> 'Model':
        """A new, unsaved resource. With `request_new_object_on_build`, the
        server provides its initial attributes via `GET /<collection>/new`.
        """
        config = cls.resolved_config()
        if not config.request_new_object_on_build:
            return cls(**attributes)

        path = cls.request_path_for({**attributes, config.primary_key: 'new'}).unwrap()
        data = cls.get_api().fetch(path, attributes)
        return cls.new_from(cls.parse(data) or {})

    @classmethod
    def create(cls, **attributes) -> 'Model':
        return cls(**attributes).save()

    # Persistence

    def _merge_response(self, data: Any):
        data = self.parse(data)
        if isinstance(data, Mapping):
            self.assign_attributes(self.parse_associations(data, clean=True))
        self.changes_applied()

    def save(self) -> 'Model':
        """POST a new resource to the collection path, or PUT an existing
        one to its resource path. The response is merged back in.
        """
        params = self.to_params()
        if self.is_new():
            method, path = 'POST', self.request_path()
        else:
            method, path = 'PUT', self.request_path_result(member=True).unwrap()

        self._merge_response(self.get_api().request(method, path, params))
        return self

    def destroy(self) -> 'Model':
        path = self.request_path_result(member=True).unwrap()
        self._merge_response(self.get_api().request('DELETE', path))
        return self


Model._config = build_config('Model')
