"""
Here, we collect the configs used to build reader chains
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from configreaders.adapters.env_reader import EnvironmentScope
from configreaders.core.utility import validation_error_parser
from configreaders.errors.errors import ConfigurationError

ENV_PREFIX = "CONFIGREADERS_"


# --- Vault ---


class VaultOptions(BaseModel):
    """Transport settings handed to the Key Vault client pipeline."""

    model_config = ConfigDict(extra="forbid", frozen=True)
    retry_total: int = Field(default=3, ge=0, description="max retries per request")
    retry_backoff_factor: float = Field(default=0.8, ge=0, description="exponential backoff base (s)")
    connection_timeout: float = Field(default=10.0, gt=0, description="socket connect timeout (s)")
    read_timeout: float = Field(default=30.0, gt=0, description="socket read timeout (s)")
    token_scope: str = Field(
        default="https://vault.azure.net/.default",
        description="scope requested when authenticating against the vault",
    )

    def client_kwargs(self) -> dict[str, Any]:
        return {
            "retry_total": self.retry_total,
            "retry_backoff_factor": self.retry_backoff_factor,
            "connection_timeout": self.connection_timeout,
            "read_timeout": self.read_timeout,
        }


class CredentialKeys(BaseModel):
    """Key names under which the inner reader holds the vault's bootstrap values."""

    model_config = ConfigDict(extra="forbid", frozen=True)
    client_id: str = Field(default="ClientId", min_length=1)
    client_secret: str = Field(default="ClientSecret", min_length=1)
    tenant_id: str = Field(default="TenantId", min_length=1)
    vault_url: str = Field(default="KeyVaultUrl", min_length=1)


# --- Composition ---


class CompositionConfig(BaseModel):
    """
    Describes one reader chain: a terminal source, optionally wrapped by a vault
    reader that uses the terminal as its credential source.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
    source: Literal["settings", "environment", "mapping"] = Field(
        default="settings", description="terminal reader"
    )
    scope: EnvironmentScope = Field(
        default=EnvironmentScope.PROCESS, description="environment scope (source=environment)"
    )
    settings_file: Path = Field(
        default=Path("appsettings.json"), description="settings document (source=settings)"
    )
    base_path: Optional[Path] = Field(
        default=None, description="directory relative settings paths resolve against (cwd)"
    )
    values: dict[str, str] = Field(default_factory=dict, description="values (source=mapping)")
    vault: Literal["none", "ambient", "credentials"] = Field(
        default="none", description="vault reader wrapping the terminal"
    )
    vault_url: Optional[str] = Field(default=None, description="https://<name>.vault.azure.net")
    tenant_id: Optional[str] = Field(default=None, description="Azure AD tenant (credentials)")
    vault_options: VaultOptions = Field(default_factory=VaultOptions)
    credential_keys: CredentialKeys = Field(default_factory=CredentialKeys)

    @model_validator(mode="after")
    def check_vault(self) -> CompositionConfig:
        if self.vault == "ambient" and not self.vault_url:
            raise ValueError("vault='ambient' requires vault_url")
        if self.vault_url is not None and not self.vault_url.startswith("https://"):
            raise ValueError("vault_url must be an https:// URL")
        return self

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, prefix: str = ENV_PREFIX
    ) -> CompositionConfig:
        """
        Build the config from ``<prefix>SOURCE``, ``SCOPE``, ``SETTINGS_FILE``,
        ``BASE_PATH``, ``VAULT``, ``VAULT_URL`` and ``TENANT_ID``. Unset
        variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        raw: dict[str, Any] = {}
        for name in ("source", "scope", "settings_file", "base_path", "vault", "vault_url", "tenant_id"):
            value = env.get(f"{prefix}{name.upper()}")
            if value:
                raw[name] = value.strip().lower() if name in ("source", "scope", "vault") else value
        return cls.build(raw)

    @classmethod
    def build(cls, raw: Mapping[str, Any]) -> CompositionConfig:
        try:
            return cls(**raw)
        except ValidationError as exc:
            parsed = validation_error_parser(exc)
            paths = ", ".join(sorted({err["path"] or "<root>" for err in parsed}))
            raise ConfigurationError(
                f"Invalid composition config ({paths})",
                component="CompositionConfig",
                details={"errors": parsed},
            ) from exc
