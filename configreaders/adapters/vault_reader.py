"""
Azure Key Vault readers.

Two credential strategies share one lookup path:
- KeyVaultConfigReader: ambient credentials (DefaultAzureCredential).
- CredentialsKeyVaultConfigReader: a service principal whose client id and
  secret are read from another ConfigReader, so any reader can bootstrap the vault.

The authenticated SecretClient is built lazily on the first lookup, at most once
per reader even when several threads race on that first lookup. Only the client
is kept; bootstrap secret values are dropped once the credential is built.
"""

from __future__ import annotations

import logging
import re
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError, ClientAuthenticationError, ResourceNotFoundError
from azure.identity import ClientSecretCredential, DefaultAzureCredential
from azure.keyvault.secrets import SecretClient

from configreaders.config.configs import CredentialKeys, VaultOptions
from configreaders.errors.errors import ConfigurationError, SourceUnavailableError
from configreaders.ports.config_reader import ConfigReader

_LOGGER = logging.getLogger(__name__)

# Key Vault object names: alphanumerics and dashes, 1-127 chars
SECRET_NAME_PATTERN = re.compile(r"^[0-9a-zA-Z-]{1,127}$")

ClientFactory = Callable[..., SecretClient]
CredentialFactory = Callable[..., TokenCredential]


class _KeyVaultReader(ConfigReader, ABC):
    def __init__(
        self,
        *,
        options: Optional[VaultOptions] = None,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self._options = options or VaultOptions()
        self._client_factory: ClientFactory = client_factory or SecretClient
        self._client: Optional[SecretClient] = None
        self._lock = threading.Lock()

    def get(self, name: str) -> Optional[str]:
        if not SECRET_NAME_PATTERN.fullmatch(name):
            # cannot exist in a vault
            _LOGGER.debug(
                "config_lookup",
                extra={"event": "config_lookup", "key": name, "source": "keyvault", "found": False},
            )
            return None

        client = self._get_client()
        try:
            secret = client.get_secret(name)
        except ResourceNotFoundError:
            value = None
        except ClientAuthenticationError as exc:
            raise self._unavailable("Key Vault rejected the credential", key=name) from exc
        except AzureError as exc:
            raise self._unavailable("Key Vault request failed", key=name) from exc
        else:
            value = secret.value

        _LOGGER.debug(
            "config_lookup",
            extra={
                "event": "config_lookup",
                "key": name,
                "source": "keyvault",
                "found": value is not None,
            },
        )
        return value

    @property
    def is_authenticated(self) -> bool:
        return self._client is not None

    # --- client lifecycle -----------------------------------

    def _get_client(self) -> SecretClient:
        client = self._client
        if client is not None:
            return client
        with self._lock:
            if self._client is None:
                self._client = self._authenticate()
            return self._client

    @abstractmethod
    def _authenticate(self) -> SecretClient:
        """Build the credential and return a client bound to it."""

    def _connect(self, vault_url: str, credential: TokenCredential) -> SecretClient:
        """Acquire a token once to prove the credential works, then build the client."""
        try:
            credential.get_token(self._options.token_scope)
        except ClientAuthenticationError as exc:
            raise self._unavailable("Key Vault authentication failed") from exc
        except AzureError as exc:
            raise self._unavailable("Identity endpoint unreachable") from exc

        client = self._client_factory(
            vault_url=vault_url, credential=credential, **self._options.client_kwargs()
        )
        _LOGGER.debug(
            "keyvault_authenticated",
            extra={
                "event": "keyvault_authenticated",
                "vault_url": vault_url,
                "credential": type(credential).__name__,
            },
        )
        return client

    def _unavailable(self, message: str, *, key: Optional[str] = None) -> SourceUnavailableError:
        return SourceUnavailableError(
            message, source="keyvault", key=key, component=type(self).__name__
        )


class KeyVaultConfigReader(_KeyVaultReader):
    """Key Vault reader that authenticates with the platform's ambient credentials."""

    def __init__(
        self,
        vault_url: str,
        *,
        options: Optional[VaultOptions] = None,
        client_factory: Optional[ClientFactory] = None,
        credential_factory: Optional[CredentialFactory] = None,
    ) -> None:
        if not vault_url:
            raise ConfigurationError("vault_url must be a non-empty string", field="vault_url")
        super().__init__(options=options, client_factory=client_factory)
        self._vault_url = vault_url
        self._credential_factory: CredentialFactory = credential_factory or DefaultAzureCredential

    def _authenticate(self) -> SecretClient:
        try:
            credential = self._credential_factory()
        except (AzureError, ValueError) as exc:
            raise self._unavailable("Cannot build ambient credential") from exc
        return self._connect(self._vault_url, credential)

    def __repr__(self) -> str:
        return f"KeyVaultConfigReader(vault_url={self._vault_url!r})"


class CredentialsKeyVaultConfigReader(_KeyVaultReader):
    def __init__(
        self,
        inner: ConfigReader,
        *,
        vault_url: Optional[str] = None,
        tenant_id: Optional[str] = None,
        keys: Optional[CredentialKeys] = None,
        options: Optional[VaultOptions] = None,
        client_factory: Optional[ClientFactory] = None,
        credential_factory: Optional[CredentialFactory] = None,
    ) -> None:
        """
        Key Vault reader authenticating as a service principal.

        Client id and secret always come from ``inner``. Tenant id and vault URL
        come from the arguments when given, otherwise from ``inner`` too. Nothing
        is read from ``inner`` until the first lookup.
        """
        super().__init__(options=options, client_factory=client_factory)
        self._inner = inner
        self._vault_url = vault_url
        self._tenant_id = tenant_id
        self._keys = keys or CredentialKeys()
        self._credential_factory: CredentialFactory = (
            credential_factory or ClientSecretCredential
        )

    @property
    def inner(self) -> ConfigReader:
        return self._inner

    def _authenticate(self) -> SecretClient:
        vault_url = self._vault_url or self._bootstrap_value(self._keys.vault_url)
        tenant_id = self._tenant_id or self._bootstrap_value(self._keys.tenant_id)
        client_id = self._bootstrap_value(self._keys.client_id)
        client_secret = self._bootstrap_value(self._keys.client_secret)

        try:
            credential = self._credential_factory(
                tenant_id=tenant_id, client_id=client_id, client_secret=client_secret
            )
        except (AzureError, ValueError) as exc:
            # ClientSecretCredential validates tenant id format eagerly
            raise self._unavailable("Malformed service principal credentials") from exc
        return self._connect(vault_url, credential)

    def _bootstrap_value(self, key: str) -> str:
        value = self._inner.get(key)
        if not value:
            raise SourceUnavailableError(
                f"Inner reader has no value for '{key}'; cannot authenticate to Key Vault",
                source="keyvault",
                key=key,
                component=type(self).__name__,
                details={"inner": type(self._inner).__name__},
            )
        return value

    def __repr__(self) -> str:
        return f"CredentialsKeyVaultConfigReader(inner={self._inner!r})"
