from __future__ import annotations

import sys
from typing import TextIO

from configreaders.ports.config_reader import ConfigReader
from configreaders.ports.consumer import Consumer

GREETING_KEY = "Name"


class ConfigConsumer(Consumer):
    """Greets whoever the configured ``Name`` value names."""

    def __init__(self, config: ConfigReader, out: TextIO | None = None) -> None:
        self._config = config
        self._out = out or sys.stdout

    def consume(self) -> None:
        name = self._config[GREETING_KEY]
        self._out.write(f"Hello, {name or ''}!\n")
