"""Persisted analysis defaults stored in ``~/.hookreg/config.toml``."""

from __future__ import annotations

import logging
from typing import Any, Dict

import toml

from . import config as cfg
from .config import AnalysisConfig

logger = logging.getLogger(__name__)

ANALYSIS_SECTION = "analysis"


def load_full_config() -> Dict[str, Any]:
    """Load the entire TOML config (all sections)."""
    if not cfg.CONFIG_FILE.exists():
        return {}
    try:
        with open(cfg.CONFIG_FILE, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", cfg.CONFIG_FILE, exc)
        return {}


def _save_full_config(config: Dict[str, Any]) -> bool:
    """Write entire config dict to TOML file, preserving all sections."""
    cfg.BASE_DIR.mkdir(parents=True, exist_ok=True)
    try:
        with open(cfg.CONFIG_FILE, "w", encoding="utf-8") as f:
            toml.dump(config, f)
        return True
    except OSError as exc:
        logger.warning("Could not write config %s: %s", cfg.CONFIG_FILE, exc)
        return False


def load_analysis_options() -> Dict[str, Any]:
    """Return the raw ``[analysis]`` section, or an empty dict."""
    section = load_full_config().get(ANALYSIS_SECTION, {})
    return dict(section) if isinstance(section, dict) else {}


def load_analysis_config(**overrides: Any) -> AnalysisConfig:
    """Built-in defaults, then the persisted section, then *overrides*.

    ``None`` overrides are skipped so CLI options left unset do not mask
    persisted values.
    """
    options = load_analysis_options()
    options.update({k: v for k, v in overrides.items() if v is not None})
    return AnalysisConfig.from_mapping(options)


def save_analysis_config(**options: Any) -> bool:
    """Validate and merge *options* into the ``[analysis]`` section.

    Returns:
        True if saved successfully, False otherwise.
    """
    merged = load_analysis_options()
    merged.update({k: v for k, v in options.items() if v is not None})
    validated = AnalysisConfig.from_mapping(merged)

    full = load_full_config()
    full[ANALYSIS_SECTION] = validated.to_dict()
    return _save_full_config(full)


def clear_analysis_config() -> bool:
    """Remove ``[analysis]`` section from config, resetting to defaults."""
    full = load_full_config()
    full.pop(ANALYSIS_SECTION, None)
    return _save_full_config(full)
