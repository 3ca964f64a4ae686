"""Configuration loading for repolens (.repolens.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".repolens.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class AnalysisConfig:
    """Tunables of the structural analysis engine."""

    normalizer: int = 5
    confidence_threshold: float = 0.4
    max_dependencies: int = 20
    max_import_dependencies: int = 15
    max_untested_files: int = 20


@dataclass
class ScanConfig:
    """Settings for turning a local checkout into repository files."""

    max_file_bytes: int = 1_000_000
    exclude_paths: List[str] = field(default_factory=list)


@dataclass
class RepolensConfig:
    """Represents the settings defined in .repolens.yml."""

    root: Path
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)


def load_config(config_path: Path) -> RepolensConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return RepolensConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    defaults = AnalysisConfig()
    analysis_data = _as_dict(data.get("analysis"))
    analysis = AnalysisConfig(
        normalizer=_positive_int(analysis_data.get("normalizer"), defaults.normalizer),
        confidence_threshold=_unit_float(
            analysis_data.get("confidence_threshold"), defaults.confidence_threshold
        ),
        max_dependencies=_positive_int(
            analysis_data.get("max_dependencies"), defaults.max_dependencies
        ),
        max_import_dependencies=_positive_int(
            analysis_data.get("max_import_dependencies"), defaults.max_import_dependencies
        ),
        max_untested_files=_positive_int(
            analysis_data.get("max_untested_files"), defaults.max_untested_files
        ),
    )

    scan_data = _as_dict(data.get("scan"))
    scan = ScanConfig()
    if scan_data:
        scan.max_file_bytes = _positive_int(scan_data.get("max_file_bytes"), scan.max_file_bytes)
        scan.exclude_paths = _as_str_list(scan_data.get("exclude_paths"))

    return RepolensConfig(root=root, analysis=analysis, scan=scan)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


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


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _positive_int(value: Any, default: int) -> int:
    parsed = _as_int(value)
    if parsed is None or parsed <= 0:
        return default
    return parsed


def _unit_float(value: Any, default: float) -> float:
    parsed = _as_float(value)
    if parsed is None or not 0.0 <= parsed <= 1.0:
        return default
    return parsed


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "AnalysisConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "RepolensConfig",
    "ScanConfig",
    "load_config",
]
