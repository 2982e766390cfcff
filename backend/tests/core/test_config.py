"""Settings — verifies defaults, env loading and address validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from shaker.config import Settings


def test_defaults():
    settings = Settings(db=Path("shaker.db"), token=None)
    assert settings.api == "127.0.0.1:9001"
    assert settings.api_host == "127.0.0.1"
    assert settings.api_port == 9001
    assert settings.legacy_import is None
    assert settings.database_url == "sqlite+aiosqlite:///shaker.db"


def test_env_vars_are_read_with_prefix(monkeypatch):
    monkeypatch.setenv("SHAKER_DB", "/var/lib/shaker/shaker.db")
    monkeypatch.setenv("SHAKER_API", "0.0.0.0:8080")
    monkeypatch.setenv("SHAKER_TOKEN", "s3cret")
    monkeypatch.setenv("SHAKER_IMPORT", "names.txt")
    settings = Settings()
    assert settings.db == Path("/var/lib/shaker/shaker.db")
    assert settings.api_port == 8080
    assert settings.token.get_secret_value() == "s3cret"
    assert settings.legacy_import == Path("names.txt")


def test_token_is_hidden_in_repr(monkeypatch):
    monkeypatch.setenv("SHAKER_TOKEN", "s3cret")
    assert "s3cret" not in repr(Settings())


def test_empty_token_means_no_token(monkeypatch):
    monkeypatch.setenv("SHAKER_TOKEN", "")
    assert Settings().token is None


def test_init_kwargs_override_env(monkeypatch):
    monkeypatch.setenv("SHAKER_API", "0.0.0.0:8080")
    assert Settings(api="127.0.0.1:9100").api_port == 9100


def test_ipv6_host_is_unbracketed():
    settings = Settings(api="[::1]:9001")
    assert settings.api_host == "::1"
    assert settings.api_port == 9001


@pytest.mark.parametrize("address", ["localhost", ":9001", "host:port", "host:70000"])
def test_invalid_api_address_rejected(address):
    with pytest.raises(ValidationError):
        Settings(api=address)
