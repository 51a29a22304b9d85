"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds environment variables through its
aliases and that the grouped configuration models are derived correctly.
"""

import pytest

from ytgify_share.server.core.config import (
    AuthConfig,
    CORSConfig,
    JobsConfig,
    RateLimitConfig,
    Settings,
    UploadConfig,
)


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_server_host_binding(self, monkeypatch):
        monkeypatch.setenv("YTGIFY_SERVER_HOST", "127.0.0.1")

        settings = Settings()
        assert settings.server_host == "127.0.0.1"

    def test_server_port_binding(self, monkeypatch):
        monkeypatch.setenv("YTGIFY_SERVER_PORT", "9001")

        settings = Settings()
        assert settings.server_port == 9001

    def test_log_settings_binding(self, monkeypatch):
        monkeypatch.setenv("YTGIFY_LOG_LEVEL", "debug")
        monkeypatch.setenv("YTGIFY_LOG_FORMAT", "json")
        monkeypatch.setenv("YTGIFY_LOG_FILE_ENABLED", "false")

        settings = Settings()
        assert settings.log_level.upper() == "DEBUG"
        assert settings.log_format == "json"
        assert settings.log_file_enabled is False

    def test_database_url_binding(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./ytgify.db")

        settings = Settings()
        assert settings.database_url == "sqlite+aiosqlite:///./ytgify.db"

    def test_field_names_are_accepted(self):
        """populate_by_name allows constructing settings in code."""
        settings = Settings(server_port=7000, public_base_url="https://example.test")
        assert settings.server_port == 7000
        assert settings.public_base_url == "https://example.test"


class TestAuthConfigBinding:
    def test_auth_group_reflects_flat_variables(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET_KEY", "s3cret")
        monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30")
        monkeypatch.setenv("REFRESH_TOKEN_EXPIRE_DAYS", "14")

        auth = Settings().auth
        assert isinstance(auth, AuthConfig)
        assert auth.secret_key == "s3cret"
        assert auth.algorithm == "HS256"
        assert auth.access_token_expire_minutes == 30
        assert auth.refresh_token_expire_days == 14

    def test_auth_config_by_alias(self):
        auth = AuthConfig.model_validate({"JWT_ALGORITHM": "HS512"})
        assert auth.algorithm == "HS512"
        assert auth.access_token_expire_minutes == 15


class TestUploadConfigBinding:
    def test_upload_defaults(self):
        uploads = UploadConfig()
        assert uploads.media_url == "/media"
        assert uploads.max_upload_bytes == 50 * 1024 * 1024
        assert uploads.thumbnail_size == 200

    def test_upload_group_reflects_flat_variables(self, monkeypatch, tmp_path):
        monkeypatch.setenv("YTGIFY_MEDIA_ROOT", str(tmp_path))
        monkeypatch.setenv("YTGIFY_MAX_UPLOAD_BYTES", "1024")

        uploads = Settings().uploads
        assert uploads.media_root == str(tmp_path)
        assert uploads.max_upload_bytes == 1024


class TestCORSConfigBinding:
    def test_cors_defaults_allow_extensions(self):
        cors = Settings().cors
        assert isinstance(cors, CORSConfig)
        assert cors.origins == ["*"]
        assert cors.origin_regex == r"^chrome-extension://.*$"
        assert cors.allow_credentials is True

    def test_cors_origins_from_json_list(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", '["https://ytgify.com", "https://www.youtube.com"]')

        assert Settings().cors.origins == ["https://ytgify.com", "https://www.youtube.com"]


class TestJobsConfigBinding:
    def test_jobs_group(self, monkeypatch):
        monkeypatch.setenv("YTGIFY_JOBS_ENABLED", "true")
        monkeypatch.setenv("YTGIFY_TRENDING_INTERVAL", "60")

        jobs = Settings().jobs
        assert isinstance(jobs, JobsConfig)
        assert jobs.enabled is True
        assert jobs.trending_interval_seconds == 60
        assert jobs.view_cleanup_interval_seconds == 60 * 60
        assert jobs.engagement_interval_seconds == 6 * 60 * 60

    @pytest.mark.parametrize("value", ["not-a-number", "1.5"])
    def test_invalid_interval_rejected(self, monkeypatch, value):
        monkeypatch.setenv("YTGIFY_TRENDING_INTERVAL", value)

        with pytest.raises(ValueError):
            Settings()


class TestRateLimitConfigBinding:
    def test_rate_limit_can_be_disabled(self, monkeypatch):
        monkeypatch.setenv("YTGIFY_RATE_LIMIT_ENABLED", "false")

        rate_limit = Settings().rate_limit
        assert isinstance(rate_limit, RateLimitConfig)
        assert rate_limit.enabled is False

    def test_rate_limit_enabled_by_default(self, monkeypatch):
        monkeypatch.delenv("YTGIFY_RATE_LIMIT_ENABLED", raising=False)

        assert Settings(_env_file=None).rate_limit.enabled is True
