"""Tests for settings loading."""

from latitude_mcp.config import Settings


class TestSettings:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("LATITUDE_API_KEY", "key-1")
        monkeypatch.setenv("LATITUDE_PROJECT_ID", "28196")
        monkeypatch.setenv("CACHE_TTL_SECONDS", "5")
        settings = Settings(_env_file=None)
        assert settings.latitude_api_key == "key-1"
        assert settings.latitude_project_id == "28196"
        assert settings.cache_ttl_seconds == 5

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LATITUDE_API_KEY", raising=False)
        settings = Settings(_env_file=None)
        assert settings.latitude_base_url == "https://gateway.latitude.so/api/v3"
        assert settings.prompts_dir == "prompts"
        assert settings.prompt_extension == ".promptl"
        assert settings.cache_ttl_seconds == 60
