"""Unit tests for the configuration loader."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from configuration import AppConfig, LogicError
from models.config import FailurePolicy


@pytest.fixture(name="config_file")
def config_file_fixture(tmp_path: Path) -> Path:
    """Create a configuration file with all sections."""
    token_file = tmp_path / "token"
    token_file.write_text("dt0c01.from-file")
    config_file = tmp_path / "dynatrace-reporter.yaml"
    config_file.write_text(
        f"""
name: nightly-build
dynatrace:
  url: https://abc12345.live.dynatrace.com
  token_path: {token_file}
  timeout: 30
  verify_ssl: false
delivery:
  failure_policy: aggregate
  send_events: false
""",
        encoding="utf-8",
    )
    return config_file


def test_default_configuration() -> None:
    """Test accessing configuration before it is loaded."""
    cfg = AppConfig()
    cfg._configuration = None  # pylint: disable=protected-access
    for attribute in ("configuration", "dynatrace_configuration", "delivery_configuration"):
        with pytest.raises(LogicError, match="configuration is not loaded"):
            getattr(cfg, attribute)


def test_app_config_is_singleton() -> None:
    """Test AppConfig always returns the same instance."""
    assert AppConfig() is AppConfig()


def test_init_from_dict(minimal_config: AppConfig) -> None:
    """Test initialization from a dictionary."""
    assert minimal_config.configuration.name == "dynatrace-ci-reporter"
    assert (
        minimal_config.dynatrace_configuration.base_url
        == "https://abc12345.live.dynatrace.com"
    )
    assert minimal_config.dynatrace_configuration.api_token == "dt0c01.test-token"
    assert minimal_config.delivery_configuration.failure_policy is FailurePolicy.LOG


def test_load_configuration(config_file: Path) -> None:
    """Test loading of configuration from YAML file."""
    cfg = AppConfig()
    cfg.load_configuration(str(config_file))

    assert cfg.configuration.name == "nightly-build"
    dynatrace = cfg.dynatrace_configuration
    assert dynatrace.api_token == "dt0c01.from-file"
    assert dynatrace.timeout == 30
    assert dynatrace.verify_ssl is False
    delivery = cfg.delivery_configuration
    assert delivery.failure_policy is FailurePolicy.AGGREGATE
    assert delivery.send_metrics is True
    assert delivery.send_events is False


def test_load_missing_configuration_file(tmp_path: Path) -> None:
    """Test loading of configuration from nonexistent file."""
    with pytest.raises(FileNotFoundError):
        AppConfig().load_configuration(str(tmp_path / "missing.yaml"))


def test_load_empty_configuration_file(tmp_path: Path) -> None:
    """Test empty configuration file lacks the Dynatrace section."""
    config_file = tmp_path / "empty.yaml"
    config_file.write_text("")
    with pytest.raises(ValidationError, match="dynatrace"):
        AppConfig().load_configuration(str(config_file))


def test_unknown_configuration_section(minimal_config: AppConfig) -> None:
    """Test unknown sections are rejected."""
    with pytest.raises(ValidationError):
        minimal_config.init_from_dict(
            {"dynatrace": {"url": "https://dt.example.com", "token": "t"}, "foo": 1}
        )
