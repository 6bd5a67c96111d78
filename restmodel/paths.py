"""
Request path templates.

Paths are declared as templates such as `/users/:id` or
`/organizations/:organization_id/users`. Placeholders are filled from a
params mapping (`:key` or `:_key`), and values are url-escaped.

A template which cannot be filled is not an error as such: an unsaved
resource simply has no path yet. We thus return a `PathResult` rather
than raising, and only the public `Model.build_request_path()` turns an
unavailable result into a `PathError`.
"""

import logging
import re
from typing import Any, Callable, Mapping, Optional, Union
from urllib.parse import quote

import attr

from restmodel.errors import PathError


logger = logging.getLogger(__name__)


PLACEHOLDER = re.compile(r':(\w+)')
ID_PLACEHOLDER = re.compile(r':id\b')


@attr.s(auto_attribs=True, frozen=True)
class PathResult:
    path: Optional[str] = None
    missing: Optional[str] = None
    template: Optional[str] = None

    @classmethod
    def ok(cls, path: str) -> 'PathResult':
        return cls(path=path)

    @classmethod
    def unavailable(cls, missing: Optional[str], template: Optional[str] = None) -> 'PathResult':
        return cls(missing=missing, template=template)

    @property
    def available(self) -> bool:
        return self.path is not None

    def map(self, func: Callable[[str], str]) -> 'PathResult':
        if not self.available:
            return self
        return PathResult.ok(func(self.path))

    def unwrap(self) -> str:
        if not self.available:
            raise PathError(
                f'Missing :_{self.missing} parameter to build the request path. '
                f'Path is `{self.template}`.', self.missing)
        return self.path


def _blank(value) -> bool:
    return value is None or value == ''


def expand_path(template: str, params: Mapping[str, Any]) -> PathResult:
    missing = []

    def replace(match):
        key = match.group(1)
        value = params.get(key)
        if _blank(value):
            value = params.get(f'_{key}')
        if _blank(value):
            missing.append(key)
            return match.group(0)
        return quote(str(value), safe='')

    path = PLACEHOLDER.sub(replace, template)
    if missing:
        return PathResult.unavailable(missing[0], template)
    return PathResult.ok(path)


def select_template(config, params: Mapping[str, Any], member: bool = False) -> str:
    """Pick the resource path when the params carry a primary key (or
    `member` is set), otherwise the collection path. `:id` in the resource
    path stands for whatever the primary key is called.
    """
    key = config.primary_key
    value = params.get(key)
    if member or (not _blank(value) and not isinstance(value, (list, tuple))):
        return ID_PLACEHOLDER.sub(f':{key}', config.resource_path)
    return config.collection_path


class PathBuilder:
    """Builds request paths in the context of an owning resource.

    The expression given to `build` may return a `PathResult`, a plain
    string, or raise `PathError` (user code overriding `request_path`
    tends to do the latter). Either way, the caller gets a `PathResult`
    and must treat an unavailable one as "this cannot be resolved yet".
    """

    def __init__(self, owner):
        self.owner = owner

    def build(self, expression: Callable[[], Union[PathResult, str]]) -> PathResult:
        try:
            result = expression()
        except PathError as exc:
            result = PathResult.unavailable(exc.missing)

        if not isinstance(result, PathResult):
            result = PathResult.ok(result)
        if not result.available:
            logger.debug('No request path for %r yet (missing :%s)', self.owner, result.missing)
        return result

    def member(self, suffix: str = '', params: Optional[Mapping[str, Any]] = None) -> PathResult:
        """`<owner resource path><suffix>`; unavailable while the owner
        has no primary key.
        """
        return self.build(
            lambda: self.owner.request_path_result(params, member=True).map(lambda p: f'{p}{suffix}'))
