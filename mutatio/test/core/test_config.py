"""Tests for mutatio.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from mutatio.core.config import (
    ConfigError,
    MutatioConfig,
    TransportConfig,
    load_config,
    load_project_config,
    parse_ci_platform,
)
from mutatio.core.result import Err, Ok


class TestMutatioConfig:
    """Test MutatioConfig defaults and parsing."""

    def test_defaults(self) -> None:
        config = MutatioConfig()
        assert config.development_branch == "development"
        assert config.release_branch == "release"
        assert config.mainline == "master"
        assert config.remote == "origin"
        assert config.push is True
        assert config.ci == "auto"
        assert config.identity is None
        assert config.transport == TransportConfig()

    def test_frozen(self) -> None:
        config = MutatioConfig()
        with pytest.raises(AttributeError):
            config.push = False  # type: ignore[misc]

    def test_from_dict(self) -> None:
        config = MutatioConfig.from_dict(
            {
                "development_branch": "develop",
                "mainline": "MAIN",
                "push": False,
                "ci": "GitHub",
                "identity": "JIRA-42",
                "transport": {"ssh_key": "~/.ssh/id_ed25519", "token_env": "GIT_TOKEN"},
            }
        )
        assert config.development_branch == "develop"
        assert config.mainline == "main"
        assert config.push is False
        assert config.ci == "github"
        assert config.identity == "JIRA-42"
        assert config.transport.ssh_key == "~/.ssh/id_ed25519"
        assert config.transport.token_env == "GIT_TOKEN"

    def test_from_dict_ignores_wrong_types(self) -> None:
        config = MutatioConfig.from_dict({"remote": 3, "transport": "none"})
        assert config.push is True
        assert config.remote == "origin"
        assert config.transport.token_env == "MUTATIO_GIT_TOKEN"

    @pytest.mark.parametrize("value", ["false", "no", 0])
    def test_from_dict_rejects_non_bool_push(self, value: object) -> None:
        with pytest.raises(TypeError, match="push must be true or false"):
            MutatioConfig.from_dict({"push": value})

    def test_from_dict_rejects_unknown_ci(self) -> None:
        with pytest.raises(ValueError, match="unknown ci platform"):
            MutatioConfig.from_dict({"ci": "circleci"})


class TestParseCiPlatform:
    def test_known_values(self) -> None:
        assert parse_ci_platform("azure") == "azure"
        assert parse_ci_platform(" TeamCity ") == "teamcity"

    def test_unknown_value(self) -> None:
        assert parse_ci_platform("travis") is None


class TestLoadConfig:
    """Test load_config function."""

    def test_load_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "mutatio.toml"
        path.write_text(
            'release_branch = "rel"\npush = false\n\n[transport]\ntoken_env = "CI_TOKEN"\n',
            encoding="utf-8",
        )

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.release_branch == "rel"
        assert result.value.push is False
        assert result.value.transport.token_env == "CI_TOKEN"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "mutatio.toml")

        assert isinstance(result, Err)
        assert isinstance(result.error, ConfigError)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "mutatio.toml"
        path.write_text("push = [unterminated", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_quoted_push_is_an_error(self, tmp_path: Path) -> None:
        """A string push flag must not silently mean push = true."""
        path = tmp_path / "mutatio.toml"
        path.write_text('push = "false"\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid config structure" in result.error.message
        assert "push must be true or false" in result.error.message

    def test_invalid_structure(self, tmp_path: Path) -> None:
        path = tmp_path / "mutatio.toml"
        path.write_text('ci = "bamboo"\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid config structure" in result.error.message


class TestLoadProjectConfig:
    def test_defaults_without_files(self, tmp_path: Path) -> None:
        assert load_project_config(tmp_path) == Ok(MutatioConfig())

    def test_pyproject_tool_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "x"\n\n[tool.mutatio]\nmainline = "main"\n',
            encoding="utf-8",
        )

        result = load_project_config(tmp_path)

        assert isinstance(result, Ok)
        assert result.value.mainline == "main"

    def test_pyproject_without_tool_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
        assert load_project_config(tmp_path) == Ok(MutatioConfig())

    def test_mutatio_toml_wins(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool.mutatio]\nmainline = "main"\n', encoding="utf-8")
        (tmp_path / "mutatio.toml").write_text('mainline = "master"\nremote = "upstream"\n', encoding="utf-8")

        result = load_project_config(tmp_path)

        assert isinstance(result, Ok)
        assert result.value.mainline == "master"
        assert result.value.remote == "upstream"
