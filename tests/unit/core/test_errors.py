import pytest

from configreaders.errors.errors import (
    ConfigKeyNotFoundError,
    ConfigReaderError,
    ConfigurationError,
    SourceUnavailableError,
)


def test_not_found_and_unavailable_are_distinct():
    assert not issubclass(SourceUnavailableError, KeyError)
    assert not issubclass(ConfigKeyNotFoundError, SourceUnavailableError)
    assert issubclass(ConfigKeyNotFoundError, ConfigReaderError)
    assert issubclass(SourceUnavailableError, ConfigReaderError)


def test_source_unavailable_carries_context():
    err = SourceUnavailableError(
        "Key Vault request failed", source="keyvault", key="Name", component="Reader"
    )

    assert err.source == "keyvault"
    assert err.key == "Name"
    assert str(err) == (
        "Key Vault request failed [component=Reader] "
        "[details={'source': 'keyvault', 'key': 'Name'}]"
    )


def test_key_not_found_str_is_readable():
    err = ConfigKeyNotFoundError("Name")

    assert str(err) == "Configuration key 'Name' not found [details={'key': 'Name'}]"
    with pytest.raises(KeyError):
        raise err


def test_configuration_error_is_value_error():
    err = ConfigurationError("bad scope", field="scope", value="galaxy")

    assert isinstance(err, ValueError)
    assert err.details == {"field": "scope", "value": "galaxy"}
