from typing import Any, Optional, Type

import attr
from marshmallow import RAISE, Schema, ValidationError, fields, post_load


@attr.s(auto_attribs=True, frozen=True)
class AssociationDeclaration:
    """What a model says about one of its associations. Immutable; the
    live, per-resource state is kept by an `Association`.
    """

    association_class: Type
    name: str
    # A class, or a (possibly dotted) name resolved on first use.
    class_name: Any
    data_key: str
    path: str
    default: Any = None
    include_in_parse: bool = False
    foreign_key: Optional[str] = None

    def new(self, parent):
        return self.association_class(parent, self)


def _class_or_name(value):
    if not isinstance(value, (str, type)):
        raise ValidationError(f'Must be a model class or its name, got: {value!r}')


class AssociationOptionsSchema(Schema):

    class Meta:
        unknown = RAISE

    association_class = fields.Raw(required=True)
    name = fields.String(required=True)
    class_name = fields.Raw(required=True, validate=_class_or_name)
    data_key = fields.String(load_default=None)
    path = fields.String(load_default=None)
    default = fields.Raw(allow_none=True)
    include_in_parse = fields.Boolean(load_default=False)
    foreign_key = fields.String(load_default=None)

    @post_load
    def make_declaration(self, data, **kwargs):
        association_class = data['association_class']
        name = data['name']
        if data['data_key'] is None:
            data['data_key'] = name
        if data['path'] is None:
            data['path'] = f'/{name}'
        if 'default' not in data:
            data['default'] = association_class.default_value()
        if data['foreign_key'] is None:
            data['foreign_key'] = association_class.default_foreign_key(name)
        return AssociationDeclaration(**data)


class AssociationDescriptor:
    """
    The class attribute `has_many()` and friends return. Python tells us
    the attribute name via `__set_name__`, which is when the declaration
    is built. `Model` collects them into its config right after.

    On an instance, it gives access to the association proxy, and
    assigning to it sets the underlying attribute.
    """

    def __init__(self, association_class, class_name=None, **options):
        self.association_class = association_class
        self.class_name = class_name
        self.options = options
        self.declaration = None

    def __set_name__(self, owner, name):
        self.declaration = AssociationOptionsSchema().load({
            'association_class': self.association_class,
            'name': name,
            'class_name': self.class_name or self.association_class.default_class_name(name),
            **self.options
        })

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return instance.association(self.declaration.name)

    def __set__(self, instance, value):
        instance.set_attribute(self.declaration.name, value)

    def __repr__(self):
        return f'<{self.association_class.__name__} declaration {self.declaration}>'
