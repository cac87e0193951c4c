"""Tests for repobridge.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from repobridge.config import ConfigError, RepoBridgeConfig, load_config
from repobridge.git import DiffLimits


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, RepoBridgeConfig)
    assert config.root == tmp_path.resolve()
    assert config.normalize.strip_bom is True
    assert config.normalize.strip_trailing_whitespace is False
    assert config.limits.max_search_results == 50
    assert config.limits.context_lines == 2
    assert config.limits.max_batch_files == 100
    assert config.service.host == "0.0.0.0"
    assert config.service.port == 8000
    assert config.logging.level == "info"
    assert config.logging.json is False


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".repobridge.yml"
    config_file.write_text(
        """
normalize:
  strip_bom: false
  strip_trailing_whitespace: yes
limits:
  max_search_results: 10
  context_lines: 0
  max_diff_lines: 50
  large_file_lines: 1000
  max_lcs_cells: 1000000
  max_batch_files: 5
service:
  host: 127.0.0.1
  port: 9001
logging:
  level: DEBUG
  json: true
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.normalize.strip_bom is False
    assert config.normalize.strip_trailing_whitespace is True
    assert config.limits.max_search_results == 10
    assert config.limits.context_lines == 0
    assert config.limits.max_batch_files == 5
    assert config.service.host == "127.0.0.1"
    assert config.service.port == 9001
    assert config.logging.level == "debug"
    assert config.logging.json is True
    assert config.limits.diff_limits() == DiffLimits(
        max_diff_lines=50, large_file_lines=1000, max_lcs_cells=1_000_000
    )


def test_load_config_accepts_custom_file_name(tmp_path: Path) -> None:
    config_file = tmp_path / "bridge.yml"
    config_file.write_text("service:\n  port: 7000\n", encoding="utf-8")

    assert load_config(config_file).service.port == 7000


def test_invalid_limits_fall_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / ".repobridge.yml").write_text(
        "limits:\n  max_search_results: lots\n  max_diff_lines: -4\n  context_lines: '3'\n",
        encoding="utf-8",
    )

    limits = load_config(tmp_path).limits

    assert limits.max_search_results == 50
    assert limits.max_diff_lines == 200
    assert limits.context_lines == 3


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    (tmp_path / ".repobridge.yml").write_text("\n# nothing here\n", encoding="utf-8")

    assert load_config(tmp_path).limits.max_lcs_cells == 250_000


def test_non_mapping_root_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".repobridge.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unparsable_yaml_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".repobridge.yml").write_text("limits: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)
    assert ".repobridge.yml" in str(excinfo.value)
