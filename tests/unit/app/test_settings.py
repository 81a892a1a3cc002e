import pytest

from school_cms.app.settings import AppSettings, Env, normalize_env
from school_cms.db.settings import DBSettings


class TestEnv:
    @pytest.mark.parametrize(
        "raw, env",
        [
            ("production", Env.PROD),
            ("PROD", Env.PROD),
            ("development", Env.DEV),
            ("staging", Env.TEST),
            (None, Env.LOCAL),
            (Env.TEST, Env.TEST),
        ],
    )
    def test_normalize(self, raw, env):
        assert normalize_env(raw) is env

    def test_unknown_env_warns(self):
        with pytest.warns(RuntimeWarning):
            assert normalize_env("moon") is Env.LOCAL

    def test_app_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("APP_MAX_REQUEST_BYTES", "2048")

        settings = AppSettings()
        assert settings.is_prod
        assert settings.max_request_bytes == 2048


class TestDBSettings:
    @pytest.mark.parametrize(
        "raw, resolved",
        [
            ("postgres://u:p@db:5432/school", "postgresql+asyncpg://u:p@db:5432/school"),
            ("postgresql://u:p@db:5432/school", "postgresql+asyncpg://u:p@db:5432/school"),
            ("sqlite+aiosqlite:///./cms.db", "sqlite+aiosqlite:///./cms.db"),
        ],
    )
    def test_url_normalization(self, raw, resolved):
        assert DBSettings(database_url=raw).resolved_database_url == resolved

    def test_database_url_fallback(self, monkeypatch):
        monkeypatch.delenv("DB_DATABASE_URL", raising=False)
        monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db/school")

        assert DBSettings().resolved_database_url == "postgresql+asyncpg://u:p@db/school"

    def test_missing_url(self, monkeypatch):
        monkeypatch.delenv("DB_DATABASE_URL", raising=False)
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(ValueError, match="DATABASE_URL"):
            DBSettings(_env_file=None).resolved_database_url
