"""
The HTTP side of things.

Models never talk to httpx directly; they go through an `API`, which
knows the base url, sends params as a query string or JSON body, and
hands back the decoded JSON. Anything that goes wrong on the wire
(connection errors, 4xx/5xx) is raised by httpx and passed on to the
caller untouched - we do not retry.
"""

import logging
import threading
from typing import Any, Dict, Optional

import httpx

from restmodel.errors import ConfigurationError
from restmodel.settings import APISettings, load_settings


logger = logging.getLogger(__name__)


BODY_METHODS = {'POST', 'PUT', 'PATCH'}


class API:

    def __init__(self, url: str, *, send_only_modified_attributes: bool = False,
                 timeout: float = 10.0, client: Optional[httpx.Client] = None):
        self.url = url.rstrip('/')
        self.options = {
            'send_only_modified_attributes': send_only_modified_attributes,
        }
        self.client = client if client is not None else httpx.Client(timeout=timeout)

    def __repr__(self):
        return f'<API {self.url}>'

    @classmethod
    def from_settings(cls, settings: APISettings, **kwargs) -> 'API':
        if not settings.url:
            raise ConfigurationError(
                'No API url configured; call restmodel.setup(url) or set RESTMODEL_API_URL')
        options = {
            'send_only_modified_attributes': settings.send_only_modified_attributes,
            'timeout': settings.timeout,
        }
        options.update(kwargs)
        return cls(settings.url, **options)

    @classmethod
    def from_env(cls, environ=None, **kwargs) -> 'API':
        return cls.from_settings(load_settings(environ), **kwargs)

    @property
    def send_only_modified_attributes(self) -> bool:
        return bool(self.options.get('send_only_modified_attributes'))

    def fetch(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET `path` and return the decoded JSON body."""
        return self.request('GET', path, params)

    def request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        method = method.upper()
        url = f'{self.url}{path}'
        params = dict(params or {})

        logger.debug('%s %s params=%r', method, url, params)
        if method in BODY_METHODS:
            response = self.client.request(method, url, json=params)
        else:
            response = self.client.request(method, url, params=params)
        response.raise_for_status()

        if not response.content:
            return None
        return response.json()

    def close(self):
        self.client.close()


_lock = threading.Lock()
_default_api: Optional[API] = None


def setup(url: Optional[str] = None, **options) -> API:
    """Install the API used by every model which does not name its own
    in `Meta.api`. Without a url, the settings are read from the environment.
    """
    global _default_api
    if url is None:
        api = API.from_settings(load_settings(), **options)
    else:
        api = API(url, **options)
    with _lock:
        _default_api = api
    return api


def get_default_api() -> API:
    global _default_api
    with _lock:
        if _default_api is None:
            _default_api = API.from_settings(load_settings())
        return _default_api


def peek_default_api() -> Optional[API]:
    """The default API if one was set up, without creating one."""
    return _default_api


def reset_default_api():
    global _default_api
    with _lock:
        _default_api = None
