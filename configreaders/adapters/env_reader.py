from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values

from configreaders.errors.errors import ConfigurationError, SourceUnavailableError
from configreaders.ports.config_reader import ConfigReader

_LOGGER = logging.getLogger(__name__)

# Windows keeps user/machine variables in the registry
_WIN_USER_KEY = r"Environment"
_WIN_MACHINE_KEY = r"SYSTEM\CurrentControlSet\Control\Session Manager\Environment"

# POSIX equivalents: systemd user environment.d and the pam_env machine file
DEFAULT_USER_ENV_DIR = Path("~/.config/environment.d")
DEFAULT_MACHINE_ENV_FILE = Path("/etc/environment")


class EnvironmentScope(str, Enum):
    """Where an environment variable lives."""

    PROCESS = "process"
    USER = "user"
    MACHINE = "machine"


class EnvVarsConfigReader(ConfigReader):
    def __init__(
        self,
        scope: EnvironmentScope | str,
        *,
        user_env_dir: str | Path | None = None,
        machine_env_file: str | Path | None = None,
    ) -> None:
        """
        Read variables from exactly one environment scope, without falling back to
        the others. Every lookup reads the scope afresh.

        On POSIX the user and machine scopes are ``KEY=VALUE`` files: every
        ``*.conf`` in ``user_env_dir`` (later files win) and ``machine_env_file``.
        """
        if not isinstance(scope, EnvironmentScope):
            scope = str(scope).lower()
        try:
            self._scope = EnvironmentScope(scope)
        except ValueError as exc:
            raise ConfigurationError(
                f"Unknown environment scope: {scope!r}", field="scope", value=scope
            ) from exc

        self._user_env_dir = Path(user_env_dir or DEFAULT_USER_ENV_DIR).expanduser()
        self._machine_env_file = Path(machine_env_file or DEFAULT_MACHINE_ENV_FILE).expanduser()

    @property
    def scope(self) -> EnvironmentScope:
        return self._scope

    def get(self, name: str) -> Optional[str]:
        if self._scope is EnvironmentScope.PROCESS:
            value = os.environ.get(name)
        elif sys.platform == "win32":
            value = self._read_registry(name)
        elif self._scope is EnvironmentScope.USER:
            value = self._read_user_files().get(name)
        else:
            value = self._read_env_file(self._machine_env_file).get(name)

        _LOGGER.debug(
            "config_lookup",
            extra={
                "event": "config_lookup",
                "key": name,
                "source": f"env:{self._scope.value}",
                "found": value is not None,
            },
        )
        return value

    # --- POSIX scopes ---------------------------------------

    def _read_user_files(self) -> dict[str, str]:
        merged: dict[str, str] = {}
        if not self._user_env_dir.is_dir():
            return merged
        for path in sorted(self._user_env_dir.glob("*.conf")):
            merged.update(self._read_env_file(path))
        return merged

    def _read_env_file(self, path: Path) -> Mapping[str, str]:
        if not path.is_file():
            return {}
        try:
            with path.open("r", encoding="utf-8") as handle:
                parsed = dotenv_values(stream=handle, interpolate=False)
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnavailableError(
                f"Cannot read environment file {path}",
                source=f"env:{self._scope.value}",
                component=type(self).__name__,
            ) from exc
        # bare "KEY" lines carry no value
        return {key: value for key, value in parsed.items() if value is not None}

    # --- Windows scopes -------------------------------------

    def _read_registry(self, name: str) -> Optional[str]:
        import winreg

        if self._scope is EnvironmentScope.USER:
            hive, sub_key = winreg.HKEY_CURRENT_USER, _WIN_USER_KEY
        else:
            hive, sub_key = winreg.HKEY_LOCAL_MACHINE, _WIN_MACHINE_KEY

        try:
            with winreg.OpenKey(hive, sub_key) as key:
                value, _ = winreg.QueryValueEx(key, name)
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise SourceUnavailableError(
                f"Cannot read {self._scope.value} environment from the registry",
                source=f"env:{self._scope.value}",
                key=name,
                component=type(self).__name__,
            ) from exc
        return str(value)

    def __repr__(self) -> str:
        return f"EnvVarsConfigReader(scope={self._scope.value!r})"
