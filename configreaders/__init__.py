"""
Source-agnostic configuration readers.

One read contract (ConfigReader) with interchangeable adapters:
- SettingsConfigReader: layered JSON/TOML settings files and mappings
- EnvVarsConfigReader: one environment scope (process, user or machine)
- MappingConfigReader: a fixed key/value mapping
- KeyVaultConfigReader / CredentialsKeyVaultConfigReader: Azure Key Vault secrets

Usage:
    from configreaders import CredentialsKeyVaultConfigReader, EnvVarsConfigReader

    env = EnvVarsConfigReader("machine")
    secrets = CredentialsKeyVaultConfigReader(env, vault_url="https://demo.vault.azure.net")
    secrets["Name"]
"""

from configreaders.adapters import (
    CredentialsKeyVaultConfigReader,
    EnvironmentScope,
    EnvVarsConfigReader,
    KeyVaultConfigReader,
    MappingConfigReader,
    SettingsConfigReader,
)
from configreaders.config.configs import CompositionConfig, CredentialKeys, VaultOptions
from configreaders.config.settings import LayeredSettings, SettingsBuilder
from configreaders.errors.errors import (
    ConfigKeyNotFoundError,
    ConfigReaderError,
    ConfigurationError,
    SourceUnavailableError,
)
from configreaders.ports.config_reader import ConfigReader

__all__ = [
    # Contract
    "ConfigReader",
    # Readers
    "SettingsConfigReader",
    "EnvVarsConfigReader",
    "EnvironmentScope",
    "MappingConfigReader",
    "KeyVaultConfigReader",
    "CredentialsKeyVaultConfigReader",
    # Settings store
    "SettingsBuilder",
    "LayeredSettings",
    # Configs
    "CompositionConfig",
    "CredentialKeys",
    "VaultOptions",
    # Errors
    "ConfigReaderError",
    "ConfigKeyNotFoundError",
    "SourceUnavailableError",
    "ConfigurationError",
]
