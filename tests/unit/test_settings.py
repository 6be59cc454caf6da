"""
Tests for environment-driven settings.

The conftest fixture clears every configuration variable first, so each
test states exactly the environment it depends on.
"""

import pytest

from upload_proxy.config.settings import ConfigError, get_settings, load_settings
from upload_proxy.core.cache_control import CacheControlRules, Rule


@pytest.fixture
def required_env(monkeypatch):
    monkeypatch.setenv("BUCKET_NAME", "uploads")
    monkeypatch.setenv("S3_REGION", "us-east-1")


def load():
    return load_settings(_env_file=None)


class TestDefaults:

    def test_defaults(self, required_env):
        settings = load()

        assert settings.bucket_name == "uploads"
        assert settings.s3_region == "us-east-1"
        assert settings.s3_is_implicit_auth is True
        assert settings.uses_custom_endpoint is False
        assert settings.upload_driver == "s3"
        assert settings.healthcheck_path == "/healthcheck"
        assert settings.http_port == 80
        assert settings.log_level == "debug"
        assert len(settings.cache_control_rules) == 0

    def test_get_settings_is_cached(self, required_env, monkeypatch):
        monkeypatch.chdir("/")
        assert get_settings() is get_settings()


class TestRequiredFields:

    def test_missing_bucket_name(self, monkeypatch):
        monkeypatch.setenv("S3_REGION", "us-east-1")
        with pytest.raises(ConfigError, match="BUCKET_NAME"):
            load()

    def test_missing_region(self, monkeypatch):
        monkeypatch.setenv("BUCKET_NAME", "uploads")
        with pytest.raises(ConfigError, match="S3_REGION"):
            load()


class TestOverrides:

    def test_explicit_auth(self, required_env, monkeypatch):
        monkeypatch.setenv("S3_IS_IMPLICIT_AUTH", "false")
        monkeypatch.setenv("S3_ENDPOINT", "http://localhost:8000")
        monkeypatch.setenv("S3_ACCESS_KEY_ID", "S3RVER")
        monkeypatch.setenv("S3_SECRET_ACCESS_KEY", "S3RVER")

        settings = load()

        assert settings.uses_custom_endpoint is True
        assert settings.s3_endpoint == "http://localhost:8000"
        assert settings.s3_access_key_id == "S3RVER"

    def test_http_settings(self, required_env, monkeypatch):
        monkeypatch.setenv("HTTP_PORT", "8080")
        monkeypatch.setenv("HEALTHCHECK_PATH", "/ping")

        settings = load()

        assert settings.http_port == 8080
        assert settings.healthcheck_path == "/ping"

    def test_mediastore_driver(self, required_env, monkeypatch):
        monkeypatch.setenv("UPLOAD_DRIVER", "mediastore")
        assert load().upload_driver == "mediastore"

    def test_invalid_driver(self, required_env, monkeypatch):
        monkeypatch.setenv("UPLOAD_DRIVER", "gcs")
        with pytest.raises(ConfigError, match="UPLOAD_DRIVER"):
            load()

    def test_invalid_port(self, required_env, monkeypatch):
        monkeypatch.setenv("HTTP_PORT", "eighty")
        with pytest.raises(ConfigError, match="HTTP_PORT"):
            load()


class TestCacheControlRules:

    def test_rules_loaded_from_env(self, required_env, monkeypatch):
        monkeypatch.setenv(
            "CACHE_CONTROL_RULES",
            '[{"ext":".mp4","maxAge":123456},{"ext":".html","maxAge":60}]',
        )

        settings = load()

        assert settings.cache_control_rules == CacheControlRules([
            Rule(extension=".mp4", max_age=123456),
            Rule(extension=".html", max_age=60),
        ])

    def test_invalid_json_fails_loading(self, required_env, monkeypatch):
        monkeypatch.setenv(
            "CACHE_CONTROL_RULES",
            '[{"ext":".mp4","maxAge":123456},{"ext":".html",',
        )
        with pytest.raises(ConfigError, match="CACHE_CONTROL_RULES"):
            load()

    def test_wrong_shape_fails_loading(self, required_env, monkeypatch):
        monkeypatch.setenv("CACHE_CONTROL_RULES", '[{"ext":".mp4"}]')
        with pytest.raises(ConfigError, match="maxAge"):
            load()

    def test_empty_variable_means_no_rules(self, required_env, monkeypatch):
        monkeypatch.setenv("CACHE_CONTROL_RULES", "")
        assert len(load().cache_control_rules) == 0

    def test_rules_accepted_as_init_argument(self, required_env):
        settings = load_settings(
            _env_file=None,
            cache_control_rules=[{"ext": ".css", "maxAge": 600}],
        )
        assert settings.cache_control_rules.header_value("site.css") == "max-age=600"
