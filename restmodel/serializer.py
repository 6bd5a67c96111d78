"""
Turns a resource's attributes into request params.

    1. Keys become strings.
    2. Association data is dropped, unless the association was declared
       with `include_in_parse=True`.
    3. With `send_only_modified_attributes`, only changed keys remain.
    4. With `send_up_child_params`, nested resources and collections are
       serialized through their own model's rules.
    5. The result is wrapped in the root element, if so configured.
"""

from typing import Any, Dict, Iterable, Mapping

from restmodel.collection import Collection
from restmodel.config import ResolvedConfig
from restmodel.shape import wrap


def send_only_modified(config: ResolvedConfig, api=None) -> bool:
    if config.send_only_modified_attributes is not None:
        return config.send_only_modified_attributes
    return api is not None and api.send_only_modified_attributes


def encode(attributes: Mapping[str, Any], changes: Iterable[str], config: ResolvedConfig,
           api=None) -> Mapping[str, Any]:
    from restmodel.model import Model

    filtered: Dict[str, Any] = {str(key): value for key, value in attributes.items()}

    # Parsed association data is stored under the association name, which
    # may differ from the data key it came in under.
    excluded = set()
    for declaration in config.associations:
        if not declaration.include_in_parse:
            excluded.update((declaration.data_key, declaration.name))
    filtered = {key: value for key, value in filtered.items() if key not in excluded}

    if send_only_modified(config, api):
        changed = {str(key) for key in changes}
        filtered = {key: value for key, value in filtered.items() if key in changed}

    if config.send_up_child_params:
        for key, value in filtered.items():
            if isinstance(value, Collection):
                filtered[key] = [item.to_params() if isinstance(item, Model) else item for item in value]
            elif isinstance(value, Model):
                filtered[key] = value.to_params()

    return wrap(filtered, config)
