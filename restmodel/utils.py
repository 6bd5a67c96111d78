from typing import Any


def blank(value: Any) -> bool:
    """
    None, False, and empty strings or containers are blank. Resources
    themselves never are, even if they have no attributes.
    """
    if value is None or value is False:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False
