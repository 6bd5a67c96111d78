"""
Per-model configuration.

Every `Model` subclass gets exactly one `ModelConfig`, built from its
`Meta` class when the class is created, and never changed afterwards.
A `ModelConfig` only records what that particular class declared; any
field left as `None` is looked up on the parent class' config. So:

    class Base(Model):
        class Meta:
            include_root_in_json = True

    class User(Base):
        pass

will wrap a user as `{"user": {...}}`, because `User` inherits the flag
but computes its own root element.

`resolve_config()` flattens the chain into a `ResolvedConfig`. It is
memoized, and since configs are immutable, the result is safe to share
between threads.
"""

import enum
import functools
from collections import OrderedDict
from typing import Any, Optional, Tuple, Union

import attr
import inflection
from marshmallow import RAISE, Schema, fields

from restmodel.api import API
from restmodel.marshal import EnumField, InstanceOf, RootOption, class_options


class RootFormat(enum.Enum):
    active_model_serializers = 'active_model_serializers'


RootSetting = Union[bool, str]


# Fields which a subclass inherits from its parent if it does not set them.
# `root_element` and the paths are derived from the class itself instead.
INHERITED_FIELDS = (
    'include_root_in_json',
    'parse_root_in_json',
    'parse_root_format',
    'send_only_modified_attributes',
    'send_up_child_params',
    'request_new_object_on_build',
    'primary_key',
    'api',
)

DEFAULTS = {
    'include_root_in_json': False,
    'parse_root_in_json': False,
    'send_up_child_params': False,
    'request_new_object_on_build': False,
    'primary_key': 'id',
}


@attr.s(auto_attribs=True, frozen=True, eq=False)
class ModelConfig:
    name: str
    parent: Optional['ModelConfig'] = None
    include_root_in_json: Optional[RootSetting] = None
    parse_root_in_json: Optional[RootSetting] = None
    parse_root_format: Optional[RootFormat] = None
    root_element: Optional[str] = None
    send_only_modified_attributes: Optional[bool] = None
    send_up_child_params: Optional[bool] = None
    request_new_object_on_build: Optional[bool] = None
    collection_path: Optional[str] = None
    resource_path: Optional[str] = None
    primary_key: Optional[str] = None
    api: Optional[API] = None
    # Only the declarations made on this class.
    associations: Tuple[Any, ...] = ()

    def resolve(self) -> 'ResolvedConfig':
        return resolve_config(self)


@attr.s(auto_attribs=True, frozen=True)
class ResolvedConfig:
    include_root_in_json: RootSetting
    parse_root_in_json: RootSetting
    parse_root_format: Optional[RootFormat]
    root_element: str
    send_only_modified_attributes: Optional[bool]
    send_up_child_params: bool
    request_new_object_on_build: bool
    collection_path: str
    resource_path: str
    primary_key: str
    api: Optional[API]
    associations: Tuple[Any, ...]

    @property
    def included_root_element(self) -> Optional[str]:
        """The key to wrap outgoing params in, or None to send them bare."""
        if self.include_root_in_json is True:
            return self.root_element
        return self.include_root_in_json or None

    @property
    def parsed_root_element(self) -> Optional[str]:
        """The key to look for in incoming data, or None to use it as is."""
        if self.parse_root_in_json is True:
            return self.root_element
        return self.parse_root_in_json or None

    @property
    def pluralized_parsed_root_element(self) -> Optional[str]:
        root = self.parsed_root_element
        return inflection.pluralize(root) if root else None

    @property
    def active_model_serializers_format(self) -> bool:
        return self.parse_root_format is RootFormat.active_model_serializers

    def association(self, name):
        for declaration in self.associations:
            if declaration.name == name:
                return declaration
        return None


def _absolute(path: str) -> str:
    return path if path.startswith('/') else f'/{path}'


@functools.lru_cache(maxsize=None)
def resolve_config(config: ModelConfig) -> ResolvedConfig:
    chain = []
    node = config
    while node is not None:
        chain.append(node)
        node = node.parent

    values = {}
    for name in INHERITED_FIELDS:
        values[name] = next(
            (getattr(n, name) for n in chain if getattr(n, name) is not None),
            DEFAULTS.get(name))

    root_element = config.root_element or inflection.underscore(config.name)
    collection_path = _absolute(config.collection_path or inflection.pluralize(root_element))
    resource_path = _absolute(config.resource_path or f'{collection_path.rstrip("/")}/:id')

    # Parents first, so that a subclass may redeclare an association.
    associations = OrderedDict()
    for node in reversed(chain):
        for declaration in node.associations:
            associations[declaration.name] = declaration

    return ResolvedConfig(
        root_element=root_element,
        collection_path=collection_path,
        resource_path=resource_path,
        associations=tuple(associations.values()),
        **values
    )


class MetaSchema(Schema):
    """Loads the options a model declares in its `Meta` class."""

    class Meta:
        unknown = RAISE

    include_root_in_json = RootOption(allow_none=True)
    parse_root_in_json = RootOption(allow_none=True)
    parse_root_format = EnumField(RootFormat, allow_none=True)
    root_element = fields.String()
    send_only_modified_attributes = fields.Boolean(allow_none=True)
    send_up_child_params = fields.Boolean(allow_none=True)
    request_new_object_on_build = fields.Boolean(allow_none=True)
    collection_path = fields.String()
    resource_path = fields.String()
    primary_key = fields.String()
    api = InstanceOf(API, allow_none=True)


def build_config(name: str, meta=None, parent: Optional[ModelConfig] = None,
                 associations=()) -> ModelConfig:
    options = MetaSchema().load(class_options(meta))
    return ModelConfig(name=name, parent=parent, associations=tuple(associations), **options)
