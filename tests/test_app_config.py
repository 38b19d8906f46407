"""
Tests for environment-driven configuration.
"""

from pathlib import Path

import pytest

from utils.app_config import BASE_DIR, AppConfig

ENV_VARS = (
    "PORT",
    "PUBLIC_BASE_URL",
    "TEMP_DIR",
    "IMAGE_MAX_AGE_SECONDS",
    "SWEEP_INTERVAL_SECONDS",
    "MAX_BODY_BYTES",
    "VISION_API_KEY",
    "TOGETHER_API_KEY",
    "VISION_BASE_URL",
    "VISION_MODEL",
    "RECOGNITION_IMAGE_MODE",
    "OPENAI_API_KEY",
    "SOLVER_MODEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestFromEnv:
    def test_defaults(self, clean_env):
        config = AppConfig.from_env()

        assert config.port == 5001
        assert config.public_base_url == "http://localhost:5001"
        assert config.temp_dir == BASE_DIR / "temp"
        assert config.image_max_age_seconds == 3_600
        assert config.sweep_interval_seconds == 3_600
        assert config.max_body_bytes == 50 * 1024 * 1024
        assert config.recognition_image_mode == "inline"
        assert config.vision_api_key is None
        assert config.openai_api_key is None
        assert config.solver_model == "gpt-4o-mini"

    def test_public_url_follows_port(self, clean_env):
        clean_env.setenv("PORT", "8080")
        config = AppConfig.from_env()
        assert config.port == 8080
        assert config.public_base_url == "http://localhost:8080"

    def test_public_url_override_trailing_slash_removed(self, clean_env):
        clean_env.setenv("PUBLIC_BASE_URL", "https://math.example.com/")
        assert AppConfig.from_env().public_base_url == "https://math.example.com"

    def test_together_key_fallback(self, clean_env):
        clean_env.setenv("TOGETHER_API_KEY", "together-key")
        assert AppConfig.from_env().vision_api_key == "together-key"

    def test_vision_key_preferred(self, clean_env):
        clean_env.setenv("TOGETHER_API_KEY", "together-key")
        clean_env.setenv("VISION_API_KEY", "vision-key")
        assert AppConfig.from_env().vision_api_key == "vision-key"

    def test_image_mode_normalized(self, clean_env):
        clean_env.setenv("RECOGNITION_IMAGE_MODE", " URL ")
        assert AppConfig.from_env().recognition_image_mode == "url"

    def test_temp_dir_from_env(self, clean_env, tmp_path):
        clean_env.setenv("TEMP_DIR", str(tmp_path))
        assert AppConfig.from_env().temp_dir == Path(tmp_path)

    def test_invalid_image_mode(self, clean_env):
        clean_env.setenv("RECOGNITION_IMAGE_MODE", "ftp")
        with pytest.raises(RuntimeError, match="RECOGNITION_IMAGE_MODE"):
            AppConfig.from_env()

    def test_non_integer_port(self, clean_env):
        clean_env.setenv("PORT", "abc")
        with pytest.raises(RuntimeError, match="PORT"):
            AppConfig.from_env()

    def test_blank_integer_uses_default(self, clean_env):
        clean_env.setenv("SWEEP_INTERVAL_SECONDS", "  ")
        assert AppConfig.from_env().sweep_interval_seconds == 3_600
