"""Tests for modforge_common.settings."""

from __future__ import annotations

import pytest

from modforge_common.errors import SettingsError
from modforge_common.settings import ModforgeSettings, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ModforgeSettings.model_fields:
        monkeypatch.delenv(f"MODFORGE_{name.upper()}", raising=False)


class TestDefaults:
    """Defaults without any environment."""

    def test_defaults(self) -> None:
        """Angular naming conventions are the defaults."""
        settings = load_settings()
        assert settings.workspace_files == ("angular.json", ".angular.json")
        assert settings.module_ext == ".module.ts"
        assert settings.routing_module_ext == "-routing.module.ts"
        assert settings.style_ext == "css"
        assert settings.lint_command == ("npx", "eslint", "--fix")
        assert settings.log_level == "WARNING"


class TestEnvironment:
    """Values read from ``MODFORGE_*`` variables."""

    def test_scalar_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Plain variables override defaults."""
        monkeypatch.setenv("MODFORGE_STYLE_EXT", "scss")
        monkeypatch.setenv("MODFORGE_LOG_LEVEL", "debug")
        settings = load_settings()
        assert settings.style_ext == "scss"
        assert settings.log_level == "DEBUG"

    def test_tuple_from_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Sequence fields are parsed as JSON arrays."""
        monkeypatch.setenv("MODFORGE_LINT_COMMAND", '["pnpm", "lint", "--fix"]')
        assert load_settings().lint_command == ("pnpm", "lint", "--fix")

    def test_keyword_beats_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Explicit overrides win over the environment."""
        monkeypatch.setenv("MODFORGE_LOG_LEVEL", "ERROR")
        assert load_settings(log_level="DEBUG").log_level == "DEBUG"


class TestValidation:
    """Invalid values fail fast as SettingsError."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"log_level": "LOUD"},
            {"module_ext": ".module.js"},
            {"lint_timeout": 0},
            {"unknown": 1},
        ],
    )
    def test_invalid(self, overrides: dict[str, object]) -> None:
        """Each bad value raises with the validation error attached."""
        with pytest.raises(SettingsError, match="Configuration validation failed") as exc_info:
            load_settings(**overrides)
        assert "validation_error" in exc_info.value.context

    def test_frozen(self) -> None:
        """Settings cannot be mutated after loading."""
        settings = load_settings()
        with pytest.raises(ValueError, match="frozen"):
            settings.style_ext = "less"  # type: ignore[misc]
