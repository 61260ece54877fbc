"""
Unit tests for the YAML settings loader and schema.
"""

import pytest

from config import settings_loader
from config.settings_loader import (
    get_config_path,
    get_setting,
    load_settings,
)
from config.settings_schema import Settings, load_validated_settings, validate_settings
from core.exceptions import SettingsValidationError


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Write a YAML config and point GENSEARCH_CONFIG_PATH at it."""
    def write(text):
        path = tmp_path / "search.yaml"
        path.write_text(text, encoding="utf-8")
        monkeypatch.setenv("GENSEARCH_CONFIG_PATH", str(path))
        settings_loader._settings_cache = None
        return path
    return write


class TestSettingsLoader:
    """Tests for settings_loader."""

    def test_default_path(self, monkeypatch):
        monkeypatch.delenv("GENSEARCH_CONFIG_PATH", raising=False)
        assert get_config_path().name == "base.yaml"

    def test_base_yaml_defaults(self, monkeypatch):
        monkeypatch.delenv("GENSEARCH_CONFIG_PATH", raising=False)
        assert get_setting("search.generation_size") == 20
        assert get_setting("search.refine_count") == 10
        assert get_setting("search.max_workers") == 1
        assert get_setting("search.seed", "unset") is None
        assert get_setting("model.refine_sigma") == pytest.approx(0.1)

    def test_env_override(self, config_file):
        config_file("search:\n  generation_size: 4\n  seed: 9\n")
        assert get_setting("search.generation_size") == 4
        assert get_setting("search.seed") == 9
        # Keys missing from the override file fall back to the caller's default
        assert get_setting("search.refine_count", 10) == 10

    def test_dot_path_default(self, config_file):
        config_file("search: {}\n")
        assert get_setting("search.nope.deeper", "fallback") == "fallback"

    def test_missing_file_gives_empty(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GENSEARCH_CONFIG_PATH", str(tmp_path / "absent.yaml"))
        assert load_settings(force_reload=True) == {}

    def test_cached_until_forced(self, config_file):
        path = config_file("search:\n  generation_size: 4\n")
        assert get_setting("search.generation_size") == 4
        path.write_text("search:\n  generation_size: 7\n", encoding="utf-8")
        assert get_setting("search.generation_size") == 4
        load_settings(force_reload=True)
        assert get_setting("search.generation_size") == 7


class TestSettingsSchema:
    """Tests for pydantic validation."""

    def test_defaults(self):
        settings = Settings()
        assert settings.search.generation_size == 20
        assert settings.model.refine_sigma == pytest.approx(0.1)

    def test_load_validated(self, config_file):
        config_file("search:\n  generation_size: 6\n  refine_count: 6\n  max_workers: 3\n")
        settings = load_validated_settings()
        assert settings.search.refine_count == 6
        assert settings.search.max_workers == 3

    def test_refine_count_above_generation_size(self):
        with pytest.raises(SettingsValidationError) as exc_info:
            validate_settings({"search": {"generation_size": 2, "refine_count": 5}})
        assert exc_info.value.context["errors"]

    @pytest.mark.parametrize("section,values", [
        ("search", {"generation_size": -1, "refine_count": 0}),
        ("search", {"max_workers": 0}),
        ("model", {"refine_sigma": 0}),
    ])
    def test_out_of_range(self, section, values):
        with pytest.raises(SettingsValidationError):
            validate_settings({section: values})

    def test_invalid_file(self, config_file):
        config_file("search:\n  generation_size: 1\n  refine_count: 3\n")
        with pytest.raises(SettingsValidationError):
            load_validated_settings()
