"""
Where in a JSON body does the resource live?

APIs differ in how they wrap resources. Given a `User` model, a server
might send any of these:

    {"id": 1, "name": "Tobias"}                  # bare
    {"user": {"id": 1, "name": "Tobias"}}        # parse_root_in_json = True
    {"person": {"id": 1, "name": "Tobias"}}      # parse_root_in_json = 'person'
    {"users": [{"id": 1, "name": "Tobias"}]}     # active_model_serializers format

`extract` and `extract_array` find the payload, and `wrap` does the
opposite for outgoing params, based on `include_root_in_json`.

We are permissive here: if the expected root key is not there, the body
is used as it is. Only the transport raises.
"""

import logging
from typing import Any, List, Mapping

from restmodel.config import ResolvedConfig


logger = logging.getLogger(__name__)


def extract(data: Any, config: ResolvedConfig) -> Any:
    root = config.parsed_root_element
    if root is None:
        return data

    if isinstance(data, Mapping) and root in data:
        return data[root]

    logger.debug('Root key %r not in payload, using the payload as is', root)
    return data


def extract_array(data: Any, config: ResolvedConfig) -> List[Any]:
    """Returns the list of item payloads in a collection response. Items
    may still be wrapped in their root element; `extract` deals with them
    one by one.
    """
    if config.active_model_serializers_format and not isinstance(data, list):
        key = config.pluralized_parsed_root_element
        if isinstance(data, Mapping) and key in data:
            data = data[key]
        else:
            logger.debug('Collection key %r not in payload, using the payload as is', key)

    if data is None:
        return []
    if isinstance(data, list):
        return data
    # A single object where we expected a list: treat it as a collection of one.
    return [data]


def is_collection_payload(data: Any, config: ResolvedConfig) -> bool:
    if isinstance(data, list):
        return True
    if config.active_model_serializers_format and isinstance(data, Mapping):
        return isinstance(data.get(config.pluralized_parsed_root_element), list)
    return False


def collection_metadata(data: Any, config: ResolvedConfig) -> Mapping[str, Any]:
    """active_model_serializers sends pagination and such next to the
    collection, as `{"users": [...], "meta": {...}}`.
    """
    if config.active_model_serializers_format and isinstance(data, Mapping):
        meta = data.get('meta')
        if isinstance(meta, Mapping):
            return dict(meta)
    return {}


def wrap(attributes: Mapping[str, Any], config: ResolvedConfig) -> Mapping[str, Any]:
    root = config.included_root_element
    if root is None:
        return attributes
    return {root: attributes}
