"""
The runtime side of associations.

An `Association` belongs to one parent resource and one declaration. It
is created the first time `resource.<name>` is accessed, and lives as
long as the resource does. It works like this:

- While the parent has no data at all, or has an explicitly empty value
  for the association, it returns a copy of the declared default.

- If the parent already holds data for the association (because it was
  included in the parent's own payload), that data is returned.

- Otherwise, it builds a path relative to the parent, e.g.
  `/users/1/comments`, and asks the target model to fetch it. The result
  is memoized on the association; it is not written back to the parent.

`where()` never modifies the association it is called on. It returns a
copy with the merged query params, which starts out unresolved:

    user.comments.where(approved=1).where(page=2)
    # GET /users/1/comments?approved=1&page=2
"""

import copy
import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import inflection

from restmodel.paths import PathBuilder, PathResult
from restmodel.registry import nearby_class
from restmodel.utils import blank


logger = logging.getLogger(__name__)


NOT_FETCHED = object()


class Association:

    def __init__(self, parent, declaration):
        self.parent = parent
        self.declaration = declaration
        self.name = declaration.name
        self.params: Dict[str, Any] = {}
        self.klass = nearby_class(declaration.class_name, type(parent))
        self.paths = PathBuilder(parent)
        self._fetched = NOT_FETCHED

    def __repr__(self):
        return f'<{self.__class__.__name__} {type(self.parent).__name__}.{self.name} params={self.params!r}>'

    # Declaration defaults, overridden per kind.

    @classmethod
    def default_value(cls):
        return None

    @classmethod
    def default_class_name(cls, name: str) -> str:
        return inflection.camelize(name)

    @classmethod
    def default_foreign_key(cls, name: str) -> Optional[str]:
        return None

    @classmethod
    def parse(cls, declaration, owner, data: Mapping[str, Any], clean: bool = False) -> Dict[str, Any]:
        """Turn nested data for this association, as found in a parent's
        incoming attributes, into a target resource.
        """
        value = data.get(declaration.data_key)
        if value is None or value is False:
            return {}

        klass = nearby_class(declaration.class_name, owner)
        if isinstance(value, klass):
            return {declaration.name: value}
        return {declaration.name: klass.new_from(value, clean=clean)}

    # Runtime

    def default(self):
        return copy.copy(self.declaration.default)

    def current(self):
        """What we have without going to the server: the parent's data,
        a previously fetched result, or the default.
        """
        value = self.parent.attributes.get(self.name)
        if not blank(value):
            return value
        if self._fetched is not NOT_FETCHED:
            return self._fetched
        return self.default()

    def path(self, params: Mapping[str, Any]) -> PathResult:
        return self.paths.member(self.declaration.path, params)

    def fetch_remote(self, path: str, params: Mapping[str, Any]):
        return self.klass.get_resource(path, params)

    def fetch(self, extra_params: Optional[Mapping[str, Any]] = None):
        params = {**self.params, **(extra_params or {})}
        attributes = self.parent.attributes

        if not attributes or (self.name in attributes and blank(attributes[self.name]) and not params):
            return self.default()

        if blank(attributes.get(self.name)) or params:
            if not extra_params and self._fetched is not NOT_FETCHED:
                return self._fetched

            result = self.path(params)
            if not result.available:
                return self.default()

            value = self.fetch_remote(result.path, params)
            if not extra_params:
                self._fetched = value
            return value

        return attributes[self.name]

    def where(self, params: Optional[Mapping[str, Any]] = None, **kwargs) -> 'Association':
        """Add query params to the request which fetches the association.

        Returns a new association; this one is left as it is.
        """
        params = {**(params or {}), **kwargs}
        if not params and blank(self.parent.attributes.get(self.name)):
            return self

        clone = copy.copy(self)
        clone.params = {**self.params, **params}
        clone._fetched = NOT_FETCHED
        return clone

    all = where

    def find(self, id):
        """Fetch a single item of the association by its id, e.g.
        `user.comments.find(3)` is `GET /users/1/comments/3`.
        """
        if blank(id):
            logger.debug('%r: find() without an id, not sending a request', self)
            return None

        suffix = f'{self.declaration.path}/{quote(str(id), safe="")}'
        result = self.paths.member(suffix, self.params)
        if not result.available:
            return None
        return self.klass.get_resource(result.path, self.params)

    def assign_nested_attributes(self, attributes: Mapping[str, Any]):
        """Create the nested resource if the parent does not have one yet,
        otherwise update the existing one in place.
        """
        existing = self.parent.attributes.get(self.name)
        if blank(existing):
            self.parent.attributes[self.name] = self.klass.new_from(self.klass.parse(attributes))
        else:
            existing.assign_attributes(attributes)


class AssociationProxy:
    """
    What `resource.<association>` gives you.

    Use `current()` to look at what is there without a request, or
    `fetch()` to resolve it. Beyond that, the proxy acts like the
    resolved value (iterate it, index it, read attributes from it), and
    each of those goes through the memoized `fetch()`.
    """

    def __init__(self, association: Association):
        self.association = association

    def __repr__(self):
        return f'<AssociationProxy {self.association!r}>'

    @property
    def params(self):
        return self.association.params

    def current(self):
        return self.association.current()

    def fetch(self):
        return self.association.fetch()

    def where(self, params=None, **kwargs) -> 'AssociationProxy':
        association = self.association.where(params, **kwargs)
        if association is self.association:
            return self
        return AssociationProxy(association)

    all = where

    def find(self, id):
        return self.association.find(id)

    def assign_nested_attributes(self, attributes):
        return self.association.assign_nested_attributes(attributes)

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        return getattr(self.fetch(), name)

    def __iter__(self):
        return iter(self.fetch())

    def __len__(self):
        return len(self.fetch())

    def __getitem__(self, item):
        return self.fetch()[item]

    def __contains__(self, item):
        return item in self.fetch()

    def __bool__(self):
        return bool(self.fetch())

    def __eq__(self, other):
        if isinstance(other, AssociationProxy):
            other = other.fetch()
        return self.fetch() == other

    __hash__ = None
