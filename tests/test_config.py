"""Tests for settings and orchestrator options."""

import pytest
from pydantic import ValidationError

from retouch.config import Settings
from retouch.orchestrator import OrchestratorConfig


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.port == 3000
    assert settings.poll_interval == 1.0
    assert settings.poll_max_attempts == 20
    assert settings.replicate_api_url == "https://api.replicate.com/v1"
    assert settings.static_path is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("REPLICATE_API_TOKEN", "r8_env")
    monkeypatch.setenv("POLL_MAX_ATTEMPTS", "7")
    settings = Settings(_env_file=None)
    assert settings.replicate_api_token == "r8_env"
    assert settings.poll_max_attempts == 7


def test_cors_origin_list():
    settings = Settings(_env_file=None, cors_origins="http://a.test, http://b.test,")
    assert settings.cors_origin_list == ["http://a.test", "http://b.test"]


def test_orchestrator_config_from_settings():
    settings = Settings(_env_file=None, poll_interval=0.5, poll_max_attempts=3, inpaint_outputs=4)
    config = OrchestratorConfig.from_settings(settings, debug=True)
    assert config.poll_interval == 0.5
    assert config.max_attempts == 3
    assert config.output_count == 4
    assert config.debug


@pytest.mark.parametrize("field,value", [("poll_interval", 0), ("max_attempts", 0), ("output_count", 0)])
def test_orchestrator_config_rejects_invalid(field, value):
    with pytest.raises(ValidationError):
        OrchestratorConfig(**{field: value})
