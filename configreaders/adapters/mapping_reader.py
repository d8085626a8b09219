from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Optional

from configreaders.errors.errors import ConfigurationError
from configreaders.ports.config_reader import ConfigReader

_LOGGER = logging.getLogger(__name__)


class MappingConfigReader(ConfigReader):
    """
    Serve configuration values from a fixed key/value mapping.

    The mapping is copied at construction, so later changes to the caller's dict
    are not visible. Handy as a test double and as the terminal reader of a chain.
    """

    def __init__(self, values: Mapping[str, str]) -> None:
        for key, value in values.items():
            if not isinstance(key, str):
                raise ConfigurationError(
                    "Mapping keys must be strings", field="values", value=key
                )
            if not isinstance(value, str):
                raise ConfigurationError(
                    f"Value for '{key}' must be a string", field=key, value=type(value).__name__
                )
        self._values: Mapping[str, str] = MappingProxyType(dict(values))

    def get(self, name: str) -> Optional[str]:
        value = self._values.get(name)
        _LOGGER.debug(
            "config_lookup",
            extra={
                "event": "config_lookup",
                "key": name,
                "source": "mapping",
                "found": value is not None,
            },
        )
        return value

    def __repr__(self) -> str:
        return f"MappingConfigReader(keys={sorted(self._values)!r})"
