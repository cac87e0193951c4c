"""Configuration loading for repobridge (.repobridge.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .git.diff import DiffLimits

CONFIG_FILENAME = ".repobridge.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class NormalizeConfig:
    """Content normalization switches."""

    strip_bom: bool = True
    strip_trailing_whitespace: bool = False


@dataclass
class LimitsConfig:
    """Resource bounds applied to search, diff and graph requests."""

    max_search_results: int = 50
    context_lines: int = 2
    max_diff_lines: int = 200
    large_file_lines: int = 500
    max_lcs_cells: int = 250_000
    max_batch_files: int = 100

    def diff_limits(self) -> DiffLimits:
        return DiffLimits(
            max_diff_lines=self.max_diff_lines,
            large_file_lines=self.large_file_lines,
            max_lcs_cells=self.max_lcs_cells,
        )


@dataclass
class ServiceConfig:
    """Bind address for the HTTP service."""

    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class LoggingConfig:
    level: str = "info"
    json: bool = False


@dataclass
class RepoBridgeConfig:
    """Represents the settings defined in .repobridge.yml."""

    root: Path
    normalize: NormalizeConfig = field(default_factory=NormalizeConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Path) -> RepoBridgeConfig:
    """Load configuration from disk.

    ``config_path`` may name a directory or a file; a missing file yields the
    defaults. Values of the wrong type fall back to their defaults.
    """
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return RepoBridgeConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    normalize_data = _as_dict(data.get("normalize"))
    defaults = NormalizeConfig()
    normalize = NormalizeConfig(
        strip_bom=_or_default(_as_bool(normalize_data.get("strip_bom")), defaults.strip_bom),
        strip_trailing_whitespace=_or_default(
            _as_bool(normalize_data.get("strip_trailing_whitespace")),
            defaults.strip_trailing_whitespace,
        ),
    )

    limits_data = _as_dict(data.get("limits"))
    limits = LimitsConfig()
    for name in (
        "max_search_results",
        "context_lines",
        "max_diff_lines",
        "large_file_lines",
        "max_lcs_cells",
        "max_batch_files",
    ):
        value = _as_int(limits_data.get(name))
        if value is not None and value >= 0:
            setattr(limits, name, value)

    service_data = _as_dict(data.get("service"))
    service = ServiceConfig()
    if service_data:
        service.host = _as_str(service_data.get("host")) or service.host
        service.port = _or_default(_as_int(service_data.get("port")), service.port)

    logging_data = _as_dict(data.get("logging"))
    logging_config = LoggingConfig()
    if logging_data:
        logging_config.level = (_as_str(logging_data.get("level")) or logging_config.level).lower()
        logging_config.json = _or_default(_as_bool(logging_data.get("json")), logging_config.json)

    return RepoBridgeConfig(
        root=root,
        normalize=normalize,
        limits=limits,
        service=service,
        logging=logging_config,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "LimitsConfig",
    "LoggingConfig",
    "NormalizeConfig",
    "RepoBridgeConfig",
    "ServiceConfig",
    "load_config",
]
