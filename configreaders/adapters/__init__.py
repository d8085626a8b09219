from configreaders.adapters.env_reader import EnvironmentScope, EnvVarsConfigReader
from configreaders.adapters.mapping_reader import MappingConfigReader
from configreaders.adapters.settings_reader import SettingsConfigReader
from configreaders.adapters.vault_reader import (
    CredentialsKeyVaultConfigReader,
    KeyVaultConfigReader,
)

__all__ = [
    "EnvironmentScope",
    "EnvVarsConfigReader",
    "MappingConfigReader",
    "SettingsConfigReader",
    "KeyVaultConfigReader",
    "CredentialsKeyVaultConfigReader",
]
