from __future__ import annotations

import logging
from typing import Optional

from configreaders.config.settings import LayeredSettings
from configreaders.ports.config_reader import ConfigReader

_LOGGER = logging.getLogger(__name__)


class SettingsConfigReader(ConfigReader):
    """
    Read values from a layered settings store.

    Lookups go straight to the store's merged view; reloading is the store's
    business and only shows up here as a different value on the next lookup.
    """

    def __init__(self, settings: LayeredSettings) -> None:
        self._settings = settings

    def get(self, name: str) -> Optional[str]:
        value = self._settings.get(name)
        _LOGGER.debug(
            "config_lookup",
            extra={
                "event": "config_lookup",
                "key": name,
                "source": "settings",
                "found": value is not None,
            },
        )
        return value

    def __repr__(self) -> str:
        return f"SettingsConfigReader(layers={len(self._settings.layers)})"
