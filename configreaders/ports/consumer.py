"""Consumer Port Interface.

Contract: Application code that is handed a ConfigReader and acts on it once.
"""

from __future__ import annotations

from typing import Protocol


class Consumer(Protocol):
    def consume(self) -> None: ...
