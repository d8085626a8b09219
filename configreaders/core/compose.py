"""
Composition root.

Builds one reader chain from a CompositionConfig and hands it to the consumer by
plain constructor injection. Which chain is active is decided here only; the
consumer never changes.

    terminal (settings | environment | mapping)
        -> optional vault reader using the terminal as its credential source
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, TextIO

from configreaders.adapters.env_reader import EnvVarsConfigReader
from configreaders.adapters.mapping_reader import MappingConfigReader
from configreaders.adapters.settings_reader import SettingsConfigReader
from configreaders.adapters.vault_reader import (
    CredentialsKeyVaultConfigReader,
    KeyVaultConfigReader,
)
from configreaders.config.configs import CompositionConfig
from configreaders.config.settings import SettingsBuilder
from configreaders.core.consumer import ConfigConsumer
from configreaders.ports.config_reader import ConfigReader
from configreaders.ports.consumer import Consumer

_LOGGER = logging.getLogger(__name__)


def build_terminal_reader(config: CompositionConfig) -> ConfigReader:
    if config.source == "environment":
        return EnvVarsConfigReader(config.scope)
    if config.source == "mapping":
        return MappingConfigReader(config.values)

    settings = (
        SettingsBuilder()
        .set_base_path(config.base_path or Path.cwd())
        .add_file(config.settings_file, optional=True, reload_on_change=True)
        .build()
    )
    return SettingsConfigReader(settings)


def build_reader(config: CompositionConfig) -> ConfigReader:
    """Return the reader chain described by ``config`` (depth <= 2)."""
    reader: ConfigReader
    if config.vault == "ambient":
        # no terminal: ambient credentials need no bootstrap source
        reader = KeyVaultConfigReader(str(config.vault_url), options=config.vault_options)
    elif config.vault == "credentials":
        reader = CredentialsKeyVaultConfigReader(
            build_terminal_reader(config),
            vault_url=config.vault_url,
            tenant_id=config.tenant_id,
            keys=config.credential_keys,
            options=config.vault_options,
        )
    else:
        reader = build_terminal_reader(config)

    _LOGGER.debug(
        "reader_composed",
        extra={
            "event": "reader_composed",
            "source": config.source,
            "vault": config.vault,
            "reader": repr(reader),
        },
    )
    return reader


def build_consumer(reader: ConfigReader, out: Optional[TextIO] = None) -> Consumer:
    return ConfigConsumer(reader, out=out)
