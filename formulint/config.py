"""Configuration loading for formulint (.formulint.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .validators import BUILTIN_VALIDATORS, DEFAULT_URL_SCHEMES, build_validators

CONFIG_FILENAME = ".formulint.yml"
DEFAULT_REPORT_PATH = ".formulint/report.json"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ChecksConfig:
    """Which validators run and what they accept."""

    disabled: List[str] = field(default_factory=list)
    url_schemes: List[str] = field(default_factory=lambda: list(DEFAULT_URL_SCHEMES))


@dataclass
class ReportConfig:
    """Where the JSON report of a tap check is written."""

    enabled: bool = True
    path: str = DEFAULT_REPORT_PATH


@dataclass
class FormulintConfig:
    """Represents the settings defined in .formulint.yml."""

    root: Path
    exclude_paths: List[str] = field(default_factory=list)
    checks: ChecksConfig = field(default_factory=ChecksConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    @property
    def report_path(self) -> Optional[Path]:
        if not self.report.enabled:
            return None
        return self.root / self.report.path


def load_config(config_path: Path) -> FormulintConfig:
    """Load configuration for a tap directory or an explicit config file."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return FormulintConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    checks = ChecksConfig()
    checks_data = _as_dict(data.get("checks"))
    if checks_data:
        checks.disabled = [name.lower() for name in _as_str_list(checks_data.get("disabled"))]
        schemes = _as_str_list(checks_data.get("url_schemes"))
        if schemes:
            checks.url_schemes = [scheme.lower() for scheme in schemes]
    try:
        build_validators(checks.disabled)
    except ValueError as exc:
        known = ", ".join(BUILTIN_VALIDATORS)
        raise ConfigError(f"Invalid checks.disabled in {CONFIG_FILENAME}: {exc} (known: {known})") from exc

    report = ReportConfig()
    report_data = _as_dict(data.get("report"))
    if report_data:
        enabled = _as_bool(report_data.get("enabled"))
        if enabled is not None:
            report.enabled = enabled
        path = _as_str(report_data.get("path"))
        if path:
            report.path = path

    return FormulintConfig(
        root=root,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        checks=checks,
        report=report,
    )


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
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


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


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ChecksConfig",
    "ConfigError",
    "FormulintConfig",
    "ReportConfig",
    "load_config",
]
