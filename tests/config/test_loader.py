"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence and validation
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from covdelta.config.loader import (
    GLOBAL_CONFIG_PATH,
    REPO_CONFIG_NAME,
    _deep_merge,
    _load_yaml,
    load_config,
)
from covdelta.config.models import LoggingConfig, SourcesConfig
from covdelta.core.errors import ConfigError, ErrorCode
from covdelta.core.excludes import DEFAULT_POLICY


@pytest.fixture
def no_global_config(tmp_path: Path):
    with patch("covdelta.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
        yield


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("logging:\n  level: DEBUG\n")

        assert _load_yaml(yaml_file) == {"logging": {"level": "DEBUG"}}

    def test_returns_empty_for_yaml_null(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "null.yaml"
        yaml_file.write_text("null\n")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("logging:\n  level:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_merge(self) -> None:
        base = {"sources": {"repository": "bitcoin/bitcoin", "max_workers": 8}}
        override = {"sources": {"max_workers": 2}}

        assert _deep_merge(base, override) == {
            "sources": {"repository": "bitcoin/bitcoin", "max_workers": 2}
        }

    def test_override_replaces_non_dict(self) -> None:
        base: dict[str, Any] = {"a": {"nested": 1}}
        override: dict[str, Any] = {"a": "simple"}
        assert _deep_merge(base, override) == {"a": "simple"}

    def test_does_not_mutate_base(self) -> None:
        base = {"a": 1}
        _deep_merge(base, {"b": 2})
        assert base == {"a": 1}


@pytest.mark.usefixtures("no_global_config")
class TestLoadConfig:
    """Tests for load_config function."""

    def test_returns_default_config_when_no_files(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert config.logging.level == "INFO"
        assert config.sources.max_workers == 8
        assert config.exclusion.to_policy() == DEFAULT_POLICY
        assert config.artifacts.pull_url_template is None

    def test_loads_repo_config(self, tmp_path: Path) -> None:
        (tmp_path / REPO_CONFIG_NAME).write_text(
            "exclusion:\n  excluded_dirs: [vendor]\n  allowed_extensions: ['.py']\n"
        )

        policy = load_config(tmp_path).exclusion.to_policy()

        assert policy.is_excluded("vendor/lib.py")
        assert not policy.is_excluded("app.py")

    def test_repo_config_overrides_global(self, tmp_path: Path) -> None:
        global_file = tmp_path / "global.yaml"
        global_file.write_text("sources:\n  repository: a/b\n  max_workers: 2\n")
        (tmp_path / REPO_CONFIG_NAME).write_text("sources:\n  repository: c/d\n")

        with patch("covdelta.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(tmp_path)

        assert config.sources.repository == "c/d"
        assert config.sources.max_workers == 2

    def test_env_vars_override_yaml(self, tmp_path: Path) -> None:
        (tmp_path / REPO_CONFIG_NAME).write_text("logging:\n  level: INFO\n")

        with patch.dict(os.environ, {"COVDELTA__LOGGING__LEVEL": "WARNING"}):
            config = load_config(tmp_path)

        assert config.logging.level == "WARNING"

    def test_kwargs_override_all(self, tmp_path: Path) -> None:
        config = load_config(
            tmp_path,
            logging=LoggingConfig(level="ERROR"),
            sources=SourcesConfig(max_workers=1),
        )

        assert config.logging.level == "ERROR"
        assert config.sources.max_workers == 1

    @pytest.mark.parametrize(
        "content",
        [
            "sources:\n  max_workers: 0\n",
            "sources:\n  raw_url_template: https://example.invalid/{path}\n",
            "sources:\n  raw_url_template: https://example.invalid/{repo}/{commit}/{path}\n",
            "artifacts:\n  pull_url_template: https://ci.invalid/{pr}.json\n",
            "artifacts:\n  master_url_template: https://ci.invalid/{commit.json\n",
            "logging:\n  level: LOUD\n",
        ],
    )
    def test_raises_config_error_for_invalid_value(self, tmp_path: Path, content: str) -> None:
        (tmp_path / REPO_CONFIG_NAME).write_text(content)

        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE

    def test_accepts_artifact_templates_with_known_placeholders(self, tmp_path: Path) -> None:
        (tmp_path / REPO_CONFIG_NAME).write_text(
            "artifacts:\n"
            "  pull_url_template: https://ci.invalid/pr/{pull_number}/{commit}.json\n"
            "  master_url_template: https://ci.invalid/master/{commit}.json\n"
        )

        config = load_config(tmp_path)
        assert config.artifacts.pull_url_template == (
            "https://ci.invalid/pr/{pull_number}/{commit}.json"
        )
        assert config.artifacts.master_url_template == "https://ci.invalid/master/{commit}.json"


class TestGlobalConfigPath:
    def test_is_in_user_config(self) -> None:
        assert isinstance(GLOBAL_CONFIG_PATH, Path)
        assert "covdelta" in str(GLOBAL_CONFIG_PATH)
