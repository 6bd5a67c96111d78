"""
Resolves model names used in association declarations to classes.

Declarations may name a class which is defined further down in the
module (or in a module imported later), so nothing is resolved at
declaration time. The lookup happens when an association is first used.
"""

import threading
from typing import Dict, List

from restmodel.errors import UnknownModelError


_lock = threading.Lock()
_by_path: Dict[str, type] = {}
_by_name: Dict[str, List[type]] = {}


def register(cls):
    path = f'{cls.__module__}.{cls.__qualname__}'
    with _lock:
        _by_path[path] = cls
        _by_name.setdefault(cls.__name__, []).append(cls)
    return cls


def nearby_class(name, nearby=None):
    """Find the model class called `name`, as seen from the class `nearby`.

    The search order is:

    1. `name` is already a class.
    2. `name` is a full dotted path (`myapp.models.User`).
    3. `name` lives in the same namespace as `nearby`, or any enclosing
       one: for `nearby = myapp.models.Foo.User`, the name `Post` finds
       `myapp.models.Foo.Post`, then `myapp.models.Post`.
    4. The most recently defined model whose class name is the last
       segment of `name`.
    """
    if isinstance(name, type):
        return name

    if name in _by_path:
        return _by_path[name]

    if nearby is not None:
        scope = nearby.__qualname__.split('.')[:-1]
        while True:
            candidate = '.'.join([nearby.__module__] + scope + [name])
            if candidate in _by_path:
                return _by_path[candidate]
            if not scope:
                break
            scope.pop()

    candidates = _by_name.get(name.rsplit('.', 1)[-1])
    if candidates:
        return candidates[-1]

    raise UnknownModelError(name, nearby)
