"""
Tests for environment configuration and the client factory.
"""

import pytest
from aanbieders import create_client, get_client
from aanbieders.config import Config
from aanbieders.errors import ConfigError
from aanbieders.models import OutputMode


@pytest.fixture
def configured(monkeypatch):
    """Valid configuration values."""
    monkeypatch.setattr(Config, "AANBIEDERS_KEY", "public-key")
    monkeypatch.setattr(Config, "AANBIEDERS_SECRET", "s3cret")
    monkeypatch.setattr(Config, "AANBIEDERS_HOST", "https://api.test")
    monkeypatch.setattr(Config, "AANBIEDERS_OUTPUT_MODE", "object")
    monkeypatch.setattr(Config, "API_TIMEOUT", 3)


def test_validate_reports_missing_variables(monkeypatch):
    monkeypatch.setattr(Config, "AANBIEDERS_KEY", "")
    monkeypatch.setattr(Config, "AANBIEDERS_SECRET", "")

    with pytest.raises(ConfigError) as exc_info:
        Config.validate()

    assert "AANBIEDERS_KEY" in str(exc_info.value)
    assert "AANBIEDERS_SECRET" in str(exc_info.value)


def test_validate_rejects_unknown_output_mode(configured, monkeypatch):
    monkeypatch.setattr(Config, "AANBIEDERS_OUTPUT_MODE", "yaml")

    with pytest.raises(ConfigError):
        Config.validate()


def test_client_config(configured):
    config = Config.client_config()

    assert config.credentials.key == "public-key"
    assert config.base_host == "https://api.test"
    assert config.output_mode is OutputMode.OBJECT
    assert config.timeout == 3


def test_create_client_registers_global(configured, make_transport):
    client = create_client(transport=make_transport())

    assert get_client() is client
    assert client.output_mode is OutputMode.OBJECT
    assert client.tracking_id == ""


def test_create_client_without_registering(configured, make_transport):
    registered = create_client(transport=make_transport())
    unregistered = create_client(transport=make_transport(), register=False)

    assert get_client() is registered
    assert unregistered is not registered


@pytest.mark.parametrize("value,expected", [
    ("json", OutputMode.RAW),
    ("raw", OutputMode.RAW),
    ("OBJECT", OutputMode.OBJECT),
    ("array", OutputMode.ARRAY),
    (OutputMode.ARRAY, OutputMode.ARRAY),
])
def test_output_mode_parse(value, expected):
    assert OutputMode.parse(value) is expected


@pytest.mark.parametrize("value", ["xml", "", None, 1])
def test_output_mode_parse_rejects(value):
    with pytest.raises(ConfigError):
        OutputMode.parse(value)
