"""TOML config loading for ppcodemap.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from ppcodemap.directives import DEFAULT_MARKER

CONFIG_NAME = "ppcodemap.toml"


@dataclass
class CodemapConfig:
    marker: str = DEFAULT_MARKER


@dataclass
class ReportConfig:
    color: bool = True


@dataclass
class PpcodemapConfig:
    codemap: CodemapConfig = field(default_factory=CodemapConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find ppcodemap.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> PpcodemapConfig:
    """Parse a ppcodemap.toml file into a PpcodemapConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = PpcodemapConfig()

    if "codemap" in data:
        cm = data["codemap"]
        marker = cm.get("marker", DEFAULT_MARKER)
        if not isinstance(marker, str) or not marker.strip():
            raise ValueError(f"{path}: [codemap] marker must be a non-empty string")
        config.codemap = CodemapConfig(marker=marker.strip())

    if "report" in data:
        rpt = data["report"]
        config.report = ReportConfig(color=bool(rpt.get("color", True)))

    return config


def resolve_config(start_path: Path | None = None) -> PpcodemapConfig:
    """Load the nearest config, or defaults when there is none."""
    try:
        return load_config(find_config(start_path))
    except FileNotFoundError:
        return PpcodemapConfig()
