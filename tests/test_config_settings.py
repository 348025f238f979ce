"""Regression tests for startup settings loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from iso_bridge.bootstrap import bootstrap_create_pipeline, bootstrap_create_validator
from iso_bridge.config import AppSettings, SettingsLoadError, config_load_settings

_SETTINGS_ENVIRONMENT = (
    "LOG_LEVEL",
    "DEFAULT_CURRENCY",
    "DEFAULT_MESSAGE_TYPE",
    "TOKEN_CURRENCY_CODE",
    "TOKEN_ISSUER",
    "EXTERNAL_VALIDATOR_URL",
    "EXTERNAL_VALIDATOR_TIMEOUT_SECONDS",
    "INSTRUCTING_AGENT_BIC",
    "PIPELINE_MAX_WORKERS",
    "AMOUNT_FRACTION_DIGITS",
)


@pytest.fixture
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    """Run settings loading outside the repository `.env` with a clean environment.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        tmp_path: Pytest temporary directory fixture.

    Returns:
        pytest.MonkeyPatch: Monkeypatch fixture for further environment overrides.

    Raises:
        RuntimeError: Fixture setup does not raise runtime errors.
    """

    monkeypatch.chdir(tmp_path)
    for variable_name in _SETTINGS_ENVIRONMENT:
        monkeypatch.delenv(variable_name, raising=False)
    return monkeypatch


def test_config_defaults_load_without_environment(isolated_environment: pytest.MonkeyPatch) -> None:
    """Load documented defaults when no environment variables are set.

    Args:
        isolated_environment: Clean-environment monkeypatch fixture.

    Returns:
        None: Assertions validate default values.

    Raises:
        AssertionError: Raised when defaults differ.
    """

    _ = isolated_environment
    settings = config_load_settings()

    assert settings.log_level == "INFO"
    assert settings.default_currency == "HCT"
    assert settings.default_message_type == "pacs.008"
    assert settings.strict_amount_shapes is True
    assert settings.external_validator_url is None
    assert settings.pipeline_max_workers == 4


def test_config_normalizes_environment_values(isolated_environment: pytest.MonkeyPatch) -> None:
    isolated_environment.setenv("LOG_LEVEL", " debug ")
    isolated_environment.setenv("DEFAULT_MESSAGE_TYPE", "CREDIT_TRANSFER_INITIATION")
    isolated_environment.setenv("EXTERNAL_VALIDATOR_URL", "   ")
    isolated_environment.setenv("INSTRUCTING_AGENT_BIC", " HCTBUS33 ")

    settings = config_load_settings()

    assert settings.log_level == "DEBUG"
    assert settings.default_message_type == "pain.001"
    assert settings.external_validator_url is None
    assert settings.instructing_agent_bic == "HCTBUS33"


def test_config_invalid_values_raise_settings_load_error(isolated_environment: pytest.MonkeyPatch) -> None:
    """Wrap validation failures into `SettingsLoadError`.

    Args:
        isolated_environment: Clean-environment monkeypatch fixture.

    Returns:
        None: Assertions validate startup failure behavior.

    Raises:
        AssertionError: Raised when invalid settings are accepted.
    """

    isolated_environment.setenv("DEFAULT_MESSAGE_TYPE", "camt.053")
    with pytest.raises(SettingsLoadError, match="Startup configuration validation failed"):
        config_load_settings()

    isolated_environment.delenv("DEFAULT_MESSAGE_TYPE")
    isolated_environment.setenv("EXTERNAL_VALIDATOR_TIMEOUT_SECONDS", "0")
    with pytest.raises(SettingsLoadError):
        config_load_settings()


def test_config_token_filter_requires_both_values(isolated_environment: pytest.MonkeyPatch) -> None:
    isolated_environment.setenv("TOKEN_ISSUER", "rISSUER")

    with pytest.raises(SettingsLoadError, match="set together"):
        config_load_settings()

    isolated_environment.setenv("TOKEN_CURRENCY_CODE", "HCT")
    assert config_load_settings().token_currency_code == "HCT"


def test_config_reads_dotenv_file(isolated_environment: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _ = isolated_environment
    (tmp_path / ".env").write_text("DEFAULT_CURRENCY=XYZ\nPIPELINE_MAX_WORKERS=2\n", encoding="utf-8")

    settings = config_load_settings()

    assert settings.default_currency == "XYZ"
    assert settings.pipeline_max_workers == 2


def test_bootstrap_wires_external_checker_only_when_configured() -> None:
    """Attach the HTTP conformance checker only when a URL is configured.

    Returns:
        None: Assertions validate bootstrap wiring.

    Raises:
        AssertionError: Raised when wiring ignores settings.
    """

    plain_settings = AppSettings(_env_file=None)
    checked_settings = AppSettings(_env_file=None, external_validator_url="https://checker.test")

    assert bootstrap_create_validator(plain_settings)._conformance_client is None
    assert bootstrap_create_validator(checked_settings)._conformance_client is not None

    pipeline = bootstrap_create_pipeline(
        AppSettings(_env_file=None, token_currency_code="HCT", token_issuer="rISSUER", pipeline_max_workers=2)
    )
    assert pipeline._config.token_filter_enabled is True
    assert pipeline._config.max_workers == 2


def test_config_amount_fraction_digits_reaches_mapping_service(isolated_environment: pytest.MonkeyPatch) -> None:
    isolated_environment.setenv("AMOUNT_FRACTION_DIGITS", "2")

    pipeline = bootstrap_create_pipeline(config_load_settings())

    assert pipeline._mapping_service.mapping_extract_amount("1234567") == "1.23"

    isolated_environment.setenv("AMOUNT_FRACTION_DIGITS", "6")
    with pytest.raises(SettingsLoadError):
        config_load_settings()
