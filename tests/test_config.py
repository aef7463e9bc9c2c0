"""Tests for shared configuration helpers."""

from shared import config


def test_app_env_defaults_to_dev(monkeypatch) -> None:
    monkeypatch.delenv("APP_ENV", raising=False)

    assert config.app_env() == "dev"


def test_service_host_and_port_defaults(monkeypatch) -> None:
    monkeypatch.delenv("TRANSACTION_SERVICE_HOST", raising=False)
    monkeypatch.delenv("TRANSACTION_SERVICE_PORT", raising=False)

    assert config.service_host() == "127.0.0.1"
    assert config.service_port() == 8089


def test_service_port_parses_env(monkeypatch) -> None:
    monkeypatch.setenv("TRANSACTION_SERVICE_PORT", " 9090 ")

    assert config.service_port() == 9090


def test_service_port_invalid_falls_back_to_default(monkeypatch) -> None:
    monkeypatch.setenv("TRANSACTION_SERVICE_PORT", "not-a-port")

    assert config.service_port() == 8089


def test_service_port_out_of_range_falls_back_to_default(monkeypatch) -> None:
    monkeypatch.setenv("TRANSACTION_SERVICE_PORT", "70000")

    assert config.service_port() == 8089


def test_log_level_normalizes_case(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert config.log_level() == "DEBUG"


def test_log_level_unknown_value_uses_default(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    assert config.log_level() == "INFO"


def test_cors_allow_origins_defaults_in_dev(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)

    assert config.cors_allow_origins() == ["http://localhost:5173", "http://127.0.0.1:5173"]


def test_cors_allow_origins_parses_comma_separated_list(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.com, https://b.com")

    assert config.cors_allow_origins() == ["https://a.com", "https://b.com"]


def test_cors_allow_origins_empty_in_prod_without_env(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)

    assert config.cors_allow_origins() == []
