"""Tests for factory configuration."""

import logging
from pathlib import Path

import pytest

from typeforge.config import (
    DEFAULT_NAMESPACE,
    FactoryConfig,
    find_config_file,
    load_config,
)
from typeforge.errors import ConfigError, ErrorCategory
from typeforge.logging import LogFormat


class TestFactoryConfig:
    def test_defaults(self):
        config = FactoryConfig()

        assert config.namespace == DEFAULT_NAMESPACE
        assert config.use_guid is True
        assert config.log_level == logging.WARNING
        assert config.log_format == LogFormat.TEXT

    def test_apply_logging(self):
        root = logging.getLogger("typeforge")
        level, handlers = root.level, list(root.handlers)
        try:
            FactoryConfig(log_level=logging.DEBUG).apply_logging()
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(level)
            root.handlers[:] = handlers


class TestFindConfigFile:
    def test_typeforge_toml(self, tmp_path: Path):
        (tmp_path / "typeforge.toml").write_text('namespace = "app"\n')
        assert find_config_file(tmp_path) == tmp_path / "typeforge.toml"

    def test_searches_parents(self, tmp_path: Path):
        (tmp_path / "typeforge.toml").write_text('namespace = "app"\n')
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == tmp_path / "typeforge.toml"

    def test_pyproject_with_section(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text('[tool.typeforge]\nnamespace = "app"\n')
        assert find_config_file(tmp_path) == tmp_path / "pyproject.toml"

    def test_pyproject_without_section(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n')
        assert find_config_file(tmp_path, ["pyproject.toml"]) is None

    def test_prefers_typeforge_toml(self, tmp_path: Path):
        (tmp_path / "typeforge.toml").write_text("")
        (tmp_path / "pyproject.toml").write_text("[tool.typeforge]\n")
        assert find_config_file(tmp_path) == tmp_path / "typeforge.toml"


class TestLoadConfig:
    def test_load_typeforge_toml(self, tmp_path: Path):
        path = tmp_path / "typeforge.toml"
        path.write_text(
            'namespace = "app.generated"\n'
            "use_guid = false\n"
            "\n"
            "[logging]\n"
            'level = "debug"\n'
            'format = "json"\n'
        )

        config = load_config(path)

        assert config.namespace == "app.generated"
        assert config.use_guid is False
        assert config.log_level == logging.DEBUG
        assert config.log_format == LogFormat.JSON

    def test_load_pyproject(self, tmp_path: Path):
        path = tmp_path / "pyproject.toml"
        path.write_text('[tool.typeforge]\nnamespace = "from.pyproject"\n')

        config = load_config(path)

        assert config.namespace == "from.pyproject"
        assert config.use_guid is True

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "typeforge.toml")
        assert exc_info.value.category == ErrorCategory.CONFIG

    def test_pyproject_without_section(self, tmp_path: Path):
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n')
        with pytest.raises(ConfigError, match="tool.typeforge"):
            load_config(path)

    def test_invalid_toml(self, tmp_path: Path):
        path = tmp_path / "typeforge.toml"
        path.write_text("namespace = \n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(path)

    @pytest.mark.parametrize(
        "content",
        [
            'namespace = ""\n',
            "namespace = 3\n",
            'use_guid = "yes"\n',
            '[logging]\nlevel = "loud"\n',
            '[logging]\nformat = "xml"\n',
            'logging = "DEBUG"\n',
        ],
    )
    def test_invalid_values(self, tmp_path: Path, content):
        path = tmp_path / "typeforge.toml"
        path.write_text(content)
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.context["file"] == str(path)
