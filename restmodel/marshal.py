"""
Marshmallow helpers shared by the declarative parts of the library.

Model `Meta` classes, association options and environment settings are
all unstructured user input. We load each of them through a marshmallow
schema so that typos and wrong types fail loudly, at the point where the
model is defined, rather than silently changing wire behaviour later.
"""

from typing import Any, Dict

from marshmallow import ValidationError, fields


def class_options(klass) -> Dict[str, Any]:
    """Return the public attributes of a plain options class (such as a
    nested `Meta`) as a dict, ignoring dunder entries.
    """
    if klass is None:
        return {}
    return {k: v for k, v in vars(klass).items() if not k.startswith('__')}


class RootOption(fields.Field):
    """
    The root-in-json options accept either a flag or the name of the root
    key to use:

        include_root_in_json = True
        include_root_in_json = 'person'

    Anything else is rejected. `False` and `True` come back as booleans,
    a name comes back as a string.
    """

    default_error_messages = {
        'invalid': 'Must be a boolean or a non-empty root name.',
    }

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value:
            return value
        raise self.make_error('invalid')

    def _serialize(self, value, attr, obj, **kwargs):
        return value


class EnumField(fields.Field):
    """
    Adapted from: https://github.com/justanr/marshmallow_enum/blob/master/marshmallow_enum/__init__.py

    Only loads by value, which is all the option classes need.
    """

    default_error_messages = {
        'by_value': 'Invalid enum value {input}, expected one of: {values}',
    }

    def __init__(self, enum, **kwargs):
        self.enum = enum
        super().__init__(**kwargs)

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return value.value

    def _deserialize(self, value, attr, data, **kwargs):
        if value is None:
            return None
        if isinstance(value, self.enum):
            return value
        try:
            return self.enum(value)
        except ValueError:
            values = ', '.join(str(member.value) for member in self.enum)
            raise self.make_error('by_value', input=value, values=values)


class InstanceOf(fields.Field):
    """Passes a value through unchanged, provided it is an instance of
    `klass`. Used for options that hold live objects, such as an `API`.
    """

    def __init__(self, klass, **kwargs):
        self.klass = klass
        super().__init__(**kwargs)

    def _deserialize(self, value, attr, data, **kwargs):
        if value is not None and not isinstance(value, self.klass):
            raise ValidationError(f'Expected an instance of {self.klass.__name__}, got: {value!r}')
        return value

    def _serialize(self, value, attr, obj, **kwargs):
        return value
