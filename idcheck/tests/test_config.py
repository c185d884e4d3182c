import pytest

from idcheck import DocumentsClient
from idcheck.config import DEFAULT_ENDPOINT, ClientConfig, log_level_from_env
from idcheck.errors import ConfigurationError


def test_config_from_env(monkeypatch) -> None:
    monkeypatch.setenv("IDCHECK_API_TOKEN", "tok")
    monkeypatch.setenv("IDCHECK_ENDPOINT", "https://sandbox.example.test/v3")
    monkeypatch.setenv("IDCHECK_TIMEOUT_SEC", "7.5")
    monkeypatch.setenv("IDCHECK_MAX_UPLOAD_BYTES", "1024")

    cfg = ClientConfig.from_env()

    assert cfg.token == "tok"
    assert cfg.endpoint == "https://sandbox.example.test/v3"
    assert cfg.timeout_sec == 7.5
    assert cfg.max_upload_bytes == 1024


def test_config_defaults_and_bad_numbers(monkeypatch) -> None:
    monkeypatch.setenv("IDCHECK_API_TOKEN", "tok")
    monkeypatch.delenv("IDCHECK_ENDPOINT", raising=False)
    monkeypatch.setenv("IDCHECK_TIMEOUT_SEC", "soon")
    monkeypatch.setenv("IDCHECK_MAX_UPLOAD_BYTES", "lots")

    cfg = ClientConfig.from_env()

    assert cfg.endpoint == DEFAULT_ENDPOINT
    assert cfg.timeout_sec == 30.0
    assert cfg.max_upload_bytes == 25 * 1024 * 1024


def test_explicit_arguments_override_env(monkeypatch) -> None:
    monkeypatch.setenv("IDCHECK_API_TOKEN", "env-tok")
    monkeypatch.setenv("IDCHECK_ENDPOINT", "https://env.example.test")

    cfg = ClientConfig.from_env(token="arg-tok", endpoint="http://127.0.0.1:9", timeout_sec=2)

    assert cfg.token == "arg-tok"
    assert cfg.endpoint == "http://127.0.0.1:9"
    assert cfg.timeout_sec == 2.0


def test_missing_token_is_a_configuration_error(monkeypatch) -> None:
    monkeypatch.delenv("IDCHECK_API_TOKEN", raising=False)

    with pytest.raises(ConfigurationError):
        ClientConfig.from_env()
    with pytest.raises(ConfigurationError):
        DocumentsClient("")


def test_invalid_numbers_are_rejected() -> None:
    with pytest.raises(ConfigurationError):
        ClientConfig(token="t", timeout_sec=0)
    with pytest.raises(ConfigurationError):
        ClientConfig(token="t", max_upload_bytes=-1)


def test_repr_hides_token() -> None:
    assert "s3cret" not in repr(ClientConfig(token="s3cret"))


def test_client_from_env_uses_endpoint(monkeypatch) -> None:
    monkeypatch.setenv("IDCHECK_API_TOKEN", "tok")
    monkeypatch.setenv("IDCHECK_ENDPOINT", "https://sandbox.example.test/v3/")

    client = DocumentsClient.from_env()

    assert client.endpoint == "https://sandbox.example.test/v3"


def test_log_level_from_env(monkeypatch) -> None:
    monkeypatch.setenv("IDCHECK_LOG_LEVEL", "debug")
    assert log_level_from_env() == "DEBUG"
    monkeypatch.delenv("IDCHECK_LOG_LEVEL")
    assert log_level_from_env() == "WARNING"
