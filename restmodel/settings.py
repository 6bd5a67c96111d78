"""
Process-wide settings, read from the environment.

A `.env` file in the working directory is honoured, the same way our
development server picks up its credentials:

    RESTMODEL_API_URL=https://api.example.com
    RESTMODEL_TIMEOUT=5
    RESTMODEL_SEND_ONLY_MODIFIED_ATTRIBUTES=true
"""

import os
from typing import Mapping, Optional

import attr
import dotenv
from marshmallow import Schema, fields, post_load


ENV_PREFIX = 'RESTMODEL_'

# Settings field -> environment variable, without the prefix.
ENV_NAMES = {
    'url': 'API_URL',
    'timeout': 'TIMEOUT',
    'send_only_modified_attributes': 'SEND_ONLY_MODIFIED_ATTRIBUTES',
}


@attr.s(auto_attribs=True, frozen=True)
class APISettings:
    url: Optional[str] = None
    timeout: float = 10.0
    send_only_modified_attributes: bool = False


class APISettingsSchema(Schema):
    url = fields.Url(load_default=None, require_tld=False)
    timeout = fields.Float(load_default=10.0)
    send_only_modified_attributes = fields.Boolean(load_default=False)

    @post_load
    def make_settings(self, data, **kwargs):
        return APISettings(**data)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> APISettings:
    """Build `APISettings` from `environ`, or from `os.environ` after
    loading a `.env` file if none is given.

    Invalid values raise a marshmallow `ValidationError`.
    """
    if environ is None:
        dotenv.load_dotenv()
        environ = os.environ

    raw = {}
    for name, env_name in ENV_NAMES.items():
        value = environ.get(ENV_PREFIX + env_name)
        if value not in (None, ''):
            raw[name] = value
    return APISettingsSchema().load(raw)
