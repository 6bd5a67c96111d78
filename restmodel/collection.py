from typing import Any, Dict, Iterable, Optional


class Collection(list):
    """A list of resources which came back from (or stands in for) a
    collection request.

    It is a plain list in every way, but being a `Collection` tells the
    serializer that this is plural resource data, rather than an ordinary
    list attribute such as `tags`.
    """

    def __init__(self, items: Iterable[Any] = (), metadata: Optional[Dict[str, Any]] = None):
        super().__init__(items)
        self.metadata = metadata if metadata is not None else {}

    def __repr__(self):
        return f'{self.__class__.__name__}({list.__repr__(self)})'

    def __copy__(self):
        return self.__class__(self, metadata=dict(self.metadata))
