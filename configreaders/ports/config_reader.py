"""ConfigReader Port Interface.

Contract: Read a named configuration value from one backing source.

Absent keys come back as ``None`` (never ``""``, never an exception). A backing
source that cannot be read raises ``SourceUnavailableError``. Readers only
read; they never write to the source they wrap.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Protocol

from configreaders.errors.errors import ConfigKeyNotFoundError


class ConfigReader(Protocol):
    def get(self, name: str) -> Optional[str]: ...

    """
    Return the value stored under ``name``, or ``None`` when the source has no
    such key. Raises SourceUnavailableError when the source itself is broken.
    """

    def __getitem__(self, name: str) -> Optional[str]:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    async def get_async(self, name: str) -> Optional[str]:
        """
        Same contract as ``get``. Sources without a native async client run the
        blocking lookup on a worker thread; callers should treat it as blocking I/O
        that happens off the event loop.
        """
        return await asyncio.to_thread(self.get, name)

    def require(self, name: str) -> str:
        """Like ``get`` but raise ConfigKeyNotFoundError when the key is absent."""
        value = self.get(name)
        if value is None:
            raise ConfigKeyNotFoundError(name, component=type(self).__name__)
        return value
