import json

import pytest

from configreaders.adapters.settings_reader import SettingsConfigReader
from configreaders.config.settings import SettingsBuilder


@pytest.fixture
def reader(tmp_path) -> SettingsConfigReader:
    (tmp_path / "appsettings.json").write_text(
        json.dumps({"Name": "Stewie Griffin", "Vault": {"Url": "https://demo.vault.azure.net"}}),
        encoding="utf-8",
    )
    settings = (
        SettingsBuilder()
        .set_base_path(tmp_path)
        .add_json_file("appsettings.json", optional=True, reload_on_change=True)
        .build()
    )
    return SettingsConfigReader(settings)


def test_lookup_and_missing(reader):
    assert reader["Name"] == "Stewie Griffin"
    assert reader.get("Vault:Url") == "https://demo.vault.azure.net"
    assert reader["Missing"] is None
    assert "Missing" not in reader


def test_sees_store_reload(reader, tmp_path):
    (tmp_path / "appsettings.json").write_text(json.dumps({"Name": "Brian"}), encoding="utf-8")

    assert reader["Name"] == "Brian"


@pytest.mark.asyncio
async def test_get_async(reader):
    assert await reader.get_async("Name") == "Stewie Griffin"
    assert await reader.get_async("Missing") is None


def test_unusual_index_segment_reads_as_absent():
    settings = SettingsBuilder().add_mapping({"Hosts": ["a", "b"]}).build()
    reader = SettingsConfigReader(settings)

    assert reader.get("Hosts:\N{SUPERSCRIPT TWO}") is None
    assert reader.get("Hosts:1") == "b"
