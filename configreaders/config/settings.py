"""
Layered settings store backing the settings reader.

Layers are stacked in registration order (later layers override earlier ones,
nested sections are deep-merged) and resolved into a single read-only view.
Keys are ``:``-delimited paths (``"Vault:Url"``, ``"Hosts:0"``) matched
case-insensitively.

Usage:
    settings = (
        SettingsBuilder()
        .set_base_path(Path.cwd())
        .add_json_file("appsettings.json", optional=True, reload_on_change=True)
        .build()
    )
    settings.get("Name")
"""

from __future__ import annotations

import json
import logging
import threading
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Mapping, Optional, Sequence, Union

from configreaders.core.utility import deep_merge, expand_paths, fold_keys, render_scalar
from configreaders.errors.errors import ConfigurationError, SourceUnavailableError

_LOGGER = logging.getLogger(__name__)

KEY_DELIMITER = ":"

FileFormat = Literal["json", "toml"]
# (mtime_ns, size); None when the file does not exist
FileStamp = Optional[tuple[int, int]]


@dataclass(frozen=True)
class FileLayer:
    path: Path
    fmt: FileFormat
    optional: bool = False
    reload_on_change: bool = False

    def stamp(self) -> FileStamp:
        try:
            st = self.path.stat()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise self._unavailable("Cannot stat settings file") from exc
        return (st.st_mtime_ns, st.st_size)

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            if self.optional:
                return {}
            raise SourceUnavailableError(
                f"Settings file not found: {self.path}",
                source=str(self.path),
                component="SettingsBuilder",
            )

        try:
            with self.path.open("rb") as f:
                if self.fmt == "toml":
                    document = tomllib.load(f)
                else:
                    document = json.load(f)
        except OSError as exc:
            raise self._unavailable("Cannot read settings file") from exc
        except ValueError as exc:
            # json.JSONDecodeError, tomllib.TOMLDecodeError, UnicodeDecodeError
            raise self._unavailable("Malformed settings file") from exc

        if not isinstance(document, dict):
            raise self._unavailable("Settings document must be an object at the top level")
        return document

    def _unavailable(self, message: str) -> SourceUnavailableError:
        return SourceUnavailableError(
            f"{message}: {self.path}", source=str(self.path), component="SettingsBuilder"
        )


@dataclass(frozen=True)
class MappingLayer:
    values: Mapping[str, Any]

    def load(self) -> dict[str, Any]:
        try:
            return expand_paths(fold_keys(self.values), KEY_DELIMITER)
        except ValueError as exc:
            raise ConfigurationError(str(exc), field="values", component="SettingsBuilder") from exc


Layer = Union[FileLayer, MappingLayer]


class LayeredSettings:
    """Merged, read-only view over a stack of settings layers."""

    def __init__(self, layers: Sequence[Layer]) -> None:
        self._layers: tuple[Layer, ...] = tuple(layers)
        self._watched: tuple[FileLayer, ...] = tuple(
            layer for layer in self._layers if isinstance(layer, FileLayer) and layer.reload_on_change
        )
        self._lock = threading.Lock()
        self._view: dict[str, Any] = {}
        self._stamps: dict[Path, FileStamp] = {}
        self.reload()

    @property
    def layers(self) -> tuple[Layer, ...]:
        return self._layers

    def reload(self) -> None:
        """Rebuild the merged view from every layer."""
        with self._lock:
            self._rebuild()

    def get(self, path: str) -> Optional[str]:
        """Resolve a ``:``-delimited path to a string value, or None when absent."""
        self._refresh_if_changed()
        node: Any = self._view
        for segment in path.split(KEY_DELIMITER):
            if isinstance(node, dict):
                node = node.get(segment.casefold())
            elif isinstance(node, list) and segment.isdecimal() and int(segment) < len(node):
                node = node[int(segment)]
            else:
                return None
            if node is None:
                return None
        return render_scalar(node)

    def as_dict(self) -> dict[str, Any]:
        self._refresh_if_changed()
        return dict(self._view)

    # --- internals ------------------------------------------

    def _rebuild(self) -> None:
        stamps = {layer.path: layer.stamp() for layer in self._watched}
        merged: dict[str, Any] = {}
        for layer in self._layers:
            merged = deep_merge(merged, fold_keys(layer.load()))
        self._view = merged
        self._stamps = stamps
        _LOGGER.debug(
            "settings_loaded",
            extra={
                "event": "settings_loaded",
                "layers": len(self._layers),
                "watched": [str(layer.path) for layer in self._watched],
            },
        )

    def _refresh_if_changed(self) -> None:
        if not self._watched:
            return
        if all(self._stamps.get(layer.path) == layer.stamp() for layer in self._watched):
            return
        with self._lock:
            # another thread may have rebuilt while we waited
            if all(self._stamps.get(layer.path) == layer.stamp() for layer in self._watched):
                return
            _LOGGER.debug(
                "settings_reload",
                extra={"event": "settings_reload", "reason": "file_changed"},
            )
            self._rebuild()


@dataclass
class SettingsBuilder:
    """Fluent builder that stacks settings layers in registration order."""

    base_path: Path = field(default_factory=Path.cwd)
    _layers: list[Layer] = field(default_factory=list, init=False, repr=False)

    def set_base_path(self, base_path: str | Path) -> SettingsBuilder:
        self.base_path = Path(base_path)
        return self

    def add_json_file(
        self, path: str | Path, *, optional: bool = False, reload_on_change: bool = False
    ) -> SettingsBuilder:
        return self._add_file(path, "json", optional, reload_on_change)

    def add_toml_file(
        self, path: str | Path, *, optional: bool = False, reload_on_change: bool = False
    ) -> SettingsBuilder:
        return self._add_file(path, "toml", optional, reload_on_change)

    def add_file(
        self, path: str | Path, *, optional: bool = False, reload_on_change: bool = False
    ) -> SettingsBuilder:
        """Register a settings file, picking the format from its suffix."""
        suffix = Path(path).suffix.lower()
        if suffix == ".json":
            return self.add_json_file(path, optional=optional, reload_on_change=reload_on_change)
        if suffix == ".toml":
            return self.add_toml_file(path, optional=optional, reload_on_change=reload_on_change)
        raise ConfigurationError(
            f"Unsupported settings file type: {suffix or path}", field="path", value=path
        )

    def add_mapping(self, values: Mapping[str, Any]) -> SettingsBuilder:
        self._layers.append(MappingLayer(values=dict(values)))
        return self

    def build(self) -> LayeredSettings:
        return LayeredSettings(self._layers)

    def _add_file(
        self, path: str | Path, fmt: FileFormat, optional: bool, reload_on_change: bool
    ) -> SettingsBuilder:
        resolved = Path(path)
        if not resolved.is_absolute():
            resolved = self.base_path / resolved
        self._layers.append(
            FileLayer(path=resolved, fmt=fmt, optional=optional, reload_on_change=reload_on_change)
        )
        return self
