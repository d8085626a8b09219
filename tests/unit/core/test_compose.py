import io
import json

import pytest

from configreaders.adapters.env_reader import EnvVarsConfigReader
from configreaders.adapters.mapping_reader import MappingConfigReader
from configreaders.adapters.settings_reader import SettingsConfigReader
from configreaders.adapters.vault_reader import (
    CredentialsKeyVaultConfigReader,
    KeyVaultConfigReader,
)
from configreaders.config.configs import CompositionConfig
from configreaders.core.compose import build_consumer, build_reader
from configreaders.core.consumer import ConfigConsumer


def test_settings_terminal(tmp_path):
    (tmp_path / "appsettings.json").write_text(json.dumps({"Name": "Lois"}), encoding="utf-8")
    reader = build_reader(CompositionConfig(base_path=tmp_path))

    assert isinstance(reader, SettingsConfigReader)
    assert reader["Name"] == "Lois"


def test_settings_terminal_tolerates_missing_file(tmp_path):
    reader = build_reader(CompositionConfig(base_path=tmp_path))

    assert reader["Name"] is None


def test_environment_terminal():
    reader = build_reader(CompositionConfig(source="environment", scope="machine"))

    assert isinstance(reader, EnvVarsConfigReader)
    assert reader.scope.value == "machine"


def test_mapping_terminal():
    reader = build_reader(CompositionConfig(source="mapping", values={"Name": "Meg"}))

    assert isinstance(reader, MappingConfigReader)
    assert reader["Name"] == "Meg"


def test_credentials_vault_wraps_terminal():
    cfg = CompositionConfig(
        source="mapping",
        values={"ClientId": "abc", "ClientSecret": "xyz"},
        vault="credentials",
        vault_url="https://demo.vault.azure.net",
        tenant_id="contoso",
    )
    reader = build_reader(cfg)

    assert isinstance(reader, CredentialsKeyVaultConfigReader)
    assert isinstance(reader.inner, MappingConfigReader)
    # nothing contacted until first lookup
    assert not reader.is_authenticated


def test_ambient_vault():
    reader = build_reader(
        CompositionConfig(vault="ambient", vault_url="https://demo.vault.azure.net")
    )

    assert isinstance(reader, KeyVaultConfigReader)
    assert not reader.is_authenticated


@pytest.mark.parametrize(
    "reader",
    [
        MappingConfigReader({"Name": "Stewie Griffin"}),
        MappingConfigReader({"Name": "Brian"}),
    ],
)
def test_consumer_is_reader_agnostic(reader):
    out = io.StringIO()
    consumer = build_consumer(reader, out=out)

    consumer.consume()

    assert isinstance(consumer, ConfigConsumer)
    assert out.getvalue() == f"Hello, {reader['Name']}!\n"


def test_ambient_vault_does_not_touch_settings_file(tmp_path):
    (tmp_path / "appsettings.json").write_text("{not json", encoding="utf-8")
    reader = build_reader(
        CompositionConfig(
            base_path=tmp_path, vault="ambient", vault_url="https://demo.vault.azure.net"
        )
    )

    assert isinstance(reader, KeyVaultConfigReader)
