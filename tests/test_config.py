import pytest
from pydantic import ValidationError

from rest_parser.config import Settings, get_settings
from rest_parser.errors import TemplateRecursionExceeded
from rest_parser.template import parse_template
from rest_parser.variables import VariableEnvironment


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("MAX_RENDER_DEPTH", "DEFAULT_FLAVOR", "ENCODING", "LOG_LEVEL"):
            monkeypatch.delenv(f"REST_PARSER_{name}", raising=False)
        settings = Settings()
        assert settings.max_render_depth == 16
        assert settings.default_flavor == "vscode"
        assert settings.encoding == "utf-8"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("REST_PARSER_MAX_RENDER_DEPTH", "3")
        monkeypatch.setenv("rest_parser_default_flavor", "jetbrains")
        settings = Settings()
        assert settings.max_render_depth == 3
        assert settings.default_flavor == "jetbrains"

    def test_invalid_values(self, monkeypatch):
        monkeypatch.setenv("REST_PARSER_DEFAULT_FLAVOR", "postman")
        with pytest.raises(ValidationError):
            Settings()

    def test_depth_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("REST_PARSER_MAX_RENDER_DEPTH", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_render_depth_from_settings(self, monkeypatch):
        monkeypatch.setenv("REST_PARSER_MAX_RENDER_DEPTH", "1")
        get_settings.cache_clear()
        try:
            env = VariableEnvironment.from_values({"a": "{{b}}", "b": "x"})
            with pytest.raises(TemplateRecursionExceeded):
                parse_template("{{a}}").render(env)
        finally:
            get_settings.cache_clear()
