"""Configuration paths and analysis defaults for hookreg."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

from .errors import ConfigError

BASE_DIR = Path(os.environ.get("HOOKREG_HOME", str(Path.home() / ".hookreg"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

DEFAULT_TARGET = ""
DEFAULT_KIND = "function"
DEFAULT_DEPTH = 3
DEFAULT_FLEXIBLE = False
DEFAULT_KEEP_TAIL = 2

HOOK_KINDS = ("function", "method", "property", "all")

# Accepted option names -> AnalysisConfig field. Anything else is ignored.
_OPTION_ALIASES = {
    "targetSubstring": "target",
    "target_substring": "target",
    "targetFunction": "target",
    "target": "target",
    "kind": "kind",
    "hookType": "kind",
    "hook_type": "kind",
    "depth": "depth",
    "flexible": "flexible",
}


@dataclass(frozen=True)
class AnalysisConfig:
    """Options controlling extraction, filtering and synthesis."""

    target: str = DEFAULT_TARGET
    kind: str = DEFAULT_KIND
    depth: int = DEFAULT_DEPTH
    flexible: bool = DEFAULT_FLEXIBLE

    def __post_init__(self) -> None:
        if self.kind not in HOOK_KINDS:
            raise ConfigError(
                f"Unknown hook kind '{self.kind}'. Expected one of: {', '.join(HOOK_KINDS)}"
            )
        if isinstance(self.depth, bool) or not isinstance(self.depth, int) or self.depth < 0:
            raise ConfigError(f"depth must be an integer >= 0, got {self.depth!r}")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "AnalysisConfig":
        """Build a config from loosely named options, ignoring unknown keys."""
        values: Dict[str, Any] = {}
        for key, value in options.items():
            field_name = _OPTION_ALIASES.get(key)
            if field_name is None or value is None:
                continue
            values[field_name] = value

        if "target" in values:
            values["target"] = str(values["target"])
        if "depth" in values and isinstance(values["depth"], str):
            try:
                values["depth"] = int(values["depth"])
            except ValueError as exc:
                raise ConfigError(f"depth must be an integer, got {values['depth']!r}") from exc
        if "flexible" in values:
            values["flexible"] = _as_bool(values["flexible"])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)
