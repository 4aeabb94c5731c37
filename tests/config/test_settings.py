"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from calibr.config.ranking_params import DEFAULT_RANKING_PARAMS
from calibr.config.settings import RankingSettings, load_settings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Run from an empty directory so no stray .env is picked up."""
    monkeypatch.chdir(tmp_path)
    for name in ("CALIBR_PARAMS_FILE", "CALIBR_LOG_LEVEL", "CALIBR_LOG_DIR", "CALIBR_EVENTS_RETENTION_BYTES"):
        monkeypatch.delenv(name, raising=False)


class TestRankingSettings:
    """Tests for RankingSettings."""

    def test_defaults(self):
        settings = RankingSettings()
        assert settings.params_file is None
        assert settings.log_level == "INFO"
        assert settings.log_dir is None
        assert settings.ranking_params() is DEFAULT_RANKING_PARAMS

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("CALIBR_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("CALIBR_LOG_DIR", "/tmp/calibr-logs")
        settings = RankingSettings()
        assert settings.log_level == "DEBUG"
        assert settings.log_dir == Path("/tmp/calibr-logs")

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("CALIBR_LOG_LEVEL=WARNING\n")
        assert RankingSettings().log_level == "WARNING"

    def test_params_file(self, monkeypatch, tmp_path):
        path = tmp_path / "params.yaml"
        path.write_text("volume:\n  cap: 250\n")
        monkeypatch.setenv("CALIBR_PARAMS_FILE", str(path))
        assert RankingSettings().ranking_params().volume.cap == 250

    def test_overrides(self):
        assert load_settings(log_level="ERROR").log_level == "ERROR"

    def test_retention_lower_bound(self):
        with pytest.raises(ValidationError):
            load_settings(events_retention_bytes=10)
