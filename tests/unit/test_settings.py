"""
Unit tests for settings loading and validation.
"""

import pytest

from config import settings_loader
from config.settings_loader import get_config_path, get_setting, load_settings
from config.settings_schema import SRESSettings, load_validated_settings, validate_settings
from core.exceptions import InvalidConfigurationError


@pytest.fixture(autouse=True)
def reset_settings_cache(monkeypatch):
    monkeypatch.setattr(settings_loader, "_settings_cache", None)
    monkeypatch.delenv("SRES_CONFIG_PATH", raising=False)


class TestSettingsLoader:

    def test_default_path(self):
        path = get_config_path()
        assert path.name == "base.yaml"
        assert path.exists()

    def test_env_override(self, tmp_path, monkeypatch):
        custom = tmp_path / "custom.yaml"
        custom.write_text("sres:\n  mu: 7\n", encoding="utf-8")
        monkeypatch.setenv("SRES_CONFIG_PATH", str(custom))

        assert get_config_path() == custom
        assert get_setting("sres.mu") == 7

    def test_get_setting_defaults(self):
        assert get_setting("sres.lambda") == 200
        assert get_setting("sres.ranking_penalization_factor") == 0.45
        assert get_setting("sres.missing.key", "fallback") == "fallback"

    def test_missing_file(self, tmp_path):
        assert load_settings(path=tmp_path / "absent.yaml") == {}

    def test_cache(self, tmp_path, monkeypatch):
        custom = tmp_path / "custom.yaml"
        custom.write_text("sres:\n  mu: 7\n", encoding="utf-8")
        monkeypatch.setenv("SRES_CONFIG_PATH", str(custom))
        first = load_settings()

        custom.write_text("sres:\n  mu: 9\n", encoding="utf-8")
        assert load_settings() is first
        assert load_settings(force_reload=True)["sres"]["mu"] == 9


class TestSettingsSchema:

    def test_base_yaml_is_valid(self):
        settings = load_validated_settings()

        assert settings.sres.lambda_ == 200
        assert settings.sres.mu == 30
        assert settings.sres.parent_cycling == "strict"
        assert settings.evaluation.executor == "thread"
        assert settings.logging.interval == 100

    def test_defaults_without_file(self, tmp_path):
        settings = load_validated_settings(tmp_path / "absent.yaml")
        assert settings == SRESSettings()

    @pytest.mark.parametrize("raw", [
        {"sres": {"lambda": 10, "mu": 10}},
        {"sres": {"ranking_penalization_factor": 2}},
        {"sres": {"parent_cycling": "random"}},
        {"sres": {"unknown": 1}},
        {"evaluation": {"executor": "gpu"}},
        {"logging": {"interval": 0}},
    ])
    def test_invalid_settings(self, raw):
        with pytest.raises(InvalidConfigurationError):
            validate_settings(raw)
