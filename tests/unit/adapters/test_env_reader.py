import sys
from pathlib import Path

import pytest

from configreaders.adapters.env_reader import EnvironmentScope, EnvVarsConfigReader
from configreaders.errors.errors import ConfigurationError

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="file-backed scopes are POSIX only")


@pytest.fixture
def env_files(tmp_path: Path) -> dict[str, Path]:
    user_dir = tmp_path / "environment.d"
    user_dir.mkdir()
    machine_file = tmp_path / "environment"
    return {"user_env_dir": user_dir, "machine_env_file": machine_file}


def test_process_scope_reflects_live_environment(monkeypatch):
    monkeypatch.delenv("Name", raising=False)
    reader = EnvVarsConfigReader(EnvironmentScope.PROCESS)

    assert reader["Name"] is None

    monkeypatch.setenv("Name", "Brian")

    assert reader["Name"] == "Brian"


def test_scope_accepts_case_insensitive_string():
    assert EnvVarsConfigReader("Machine").scope is EnvironmentScope.MACHINE


def test_unknown_scope_rejected():
    with pytest.raises(ConfigurationError):
        EnvVarsConfigReader("galaxy")


@posix_only
@pytest.mark.parametrize("scope", [EnvironmentScope.USER, EnvironmentScope.MACHINE])
def test_process_value_invisible_at_other_scopes(monkeypatch, env_files, scope):
    monkeypatch.setenv("Name", "Brian")
    reader = EnvVarsConfigReader(scope, **env_files)

    assert reader.get("Name") is None


@posix_only
def test_machine_scope_reads_environment_file(env_files):
    env_files["machine_env_file"].write_text('Name="Peter Griffin"\nexport Dog=Brian\nBARE\n')
    reader = EnvVarsConfigReader(EnvironmentScope.MACHINE, **env_files)

    assert reader["Name"] == "Peter Griffin"
    assert reader["Dog"] == "Brian"
    assert reader["BARE"] is None


@posix_only
def test_user_scope_later_files_win(env_files):
    user_dir = env_files["user_env_dir"]
    (user_dir / "10-base.conf").write_text("Name=Lois\nCity=Quahog\n")
    (user_dir / "20-override.conf").write_text("Name=Meg\n")
    (user_dir / "ignored.txt").write_text("City=Nowhere\n")
    reader = EnvVarsConfigReader(EnvironmentScope.USER, **env_files)

    assert reader["Name"] == "Meg"
    assert reader["City"] == "Quahog"


@posix_only
def test_user_scope_does_not_see_machine_file(env_files):
    env_files["machine_env_file"].write_text("Name=Peter\n")
    reader = EnvVarsConfigReader(EnvironmentScope.USER, **env_files)

    assert reader["Name"] is None


@posix_only
def test_file_scopes_are_read_live(env_files):
    reader = EnvVarsConfigReader(EnvironmentScope.MACHINE, **env_files)
    assert reader["Name"] is None

    env_files["machine_env_file"].write_text("Name=Stewie\n")

    assert reader["Name"] == "Stewie"


@pytest.mark.asyncio
async def test_get_async(monkeypatch):
    monkeypatch.setenv("Name", "Chris")
    reader = EnvVarsConfigReader(EnvironmentScope.PROCESS)

    assert await reader.get_async("Name") == "Chris"
