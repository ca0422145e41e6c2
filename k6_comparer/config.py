"""Configuration loading from CLI args, env vars, and optional YAML file."""

import logging
import os
from dataclasses import dataclass

import yaml

from k6_comparer.table import DEFAULT_STRIP_PREFIXES

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_CSV = "k6_comparison_results.csv"
DEFAULT_PLOT_DIR = "K6Plots"
DEFAULT_FILE_PATTERN = "*.txt"


@dataclass(frozen=True)
class ColorGroup:
    match: str    # case-insensitive substring of the source name
    color: str    # any matplotlib colour spec


DEFAULT_COLOR_GROUPS = (
    ColorGroup(match="Azure", color="cornflowerblue"),
    ColorGroup(match="Umbraco", color="#2A4B8D"),
)
FALLBACK_COLOR = "gray"


@dataclass(frozen=True)
class Config:
    sources: tuple[str, ...] = ()
    output_csv: str = DEFAULT_OUTPUT_CSV
    file_pattern: str = DEFAULT_FILE_PATTERN
    strip_prefixes: tuple[str, ...] = DEFAULT_STRIP_PREFIXES
    plot_dir: str = DEFAULT_PLOT_DIR
    color_groups: tuple[ColorGroup, ...] = DEFAULT_COLOR_GROUPS
    compare_filter: str | None = None
    log_level: str = "INFO"


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s does not contain a mapping, using defaults", path)
        return {}
    logger.info("Loaded YAML config from %s", path)
    return data


def _first(*values):
    """First value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def _color_groups(raw) -> tuple[ColorGroup, ...]:
    if raw is None:
        return DEFAULT_COLOR_GROUPS
    return tuple(ColorGroup(match=str(g["match"]), color=str(g["color"])) for g in raw)


def load_config(cli_args=None, yaml_data: dict | None = None) -> Config:
    """Build Config. Precedence: CLI args, env vars, YAML, defaults."""
    yaml_data = yaml_data or {}

    def cli(name):
        return getattr(cli_args, name, None) if cli_args is not None else None

    sources = _first(cli("folders") or None, yaml_data.get("sources"), [])
    strip_prefixes = _first(yaml_data.get("strip_prefixes"), DEFAULT_STRIP_PREFIXES)

    return Config(
        sources=tuple(sources),
        output_csv=_first(
            cli("output_csv"), os.environ.get("K6_OUTPUT_CSV"),
            yaml_data.get("output_csv"), DEFAULT_OUTPUT_CSV,
        ),
        file_pattern=_first(
            cli("pattern"), os.environ.get("K6_FILE_PATTERN"),
            yaml_data.get("file_pattern"), DEFAULT_FILE_PATTERN,
        ),
        strip_prefixes=tuple(strip_prefixes),
        plot_dir=_first(
            cli("plots"), os.environ.get("K6_PLOT_DIR"),
            yaml_data.get("plot_dir"), DEFAULT_PLOT_DIR,
        ),
        color_groups=_color_groups(yaml_data.get("color_groups")),
        compare_filter=_first(cli("compare_filter"), yaml_data.get("compare_filter")),
        log_level=str(_first(
            cli("log_level"), os.environ.get("LOG_LEVEL"),
            yaml_data.get("log_level"), "INFO",
        )).upper(),
    )
