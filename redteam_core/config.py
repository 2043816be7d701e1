import copy
import os
from dataclasses import dataclass
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from rich.console import Console

console = Console()

DEFAULT_CONFIG: dict[str, Any] = {
    "parser": {"uslm_namespace": "xml.house.gov/schemas/uslm"},
    "detector": {
        "ambiguity_min_targets": 2,
        "ambiguity_max_targets": 4,
        "dedupe_cycles": False,
    },
    "build": {"max_workers": None},
}


def _merge(defaults: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_config_path() -> str:
    load_dotenv()
    return os.getenv("REDTEAM_CONFIG", "config.yaml")


def load_config(config_path: Optional[str] = None) -> dict[str, Any]:
    """
    From config.yaml (or $REDTEAM_CONFIG), merged over DEFAULT_CONFIG

    Args:
        config_path: Path to config file

    Returns:
        Configuration dictionary
    """
    config_path = config_path or get_config_path()
    try:
        with open(config_path, "r") as f:
            loaded = yaml.safe_load(f) or {}
    except FileNotFoundError:
        console.print(f"[yellow]Warning: {config_path} not found. Using default config.[/yellow]")
        return copy.deepcopy(DEFAULT_CONFIG)
    return _merge(DEFAULT_CONFIG, loaded)


@dataclass(frozen=True)
class DetectorConfig:
    """Tunables for the loophole detector."""

    # Distinct sibling targets that count as ambiguous (inclusive band).
    # Fewer is unambiguous, more is treated as a deliberate enumeration.
    ambiguity_min_targets: int = 2
    ambiguity_max_targets: int = 4

    # Keep only the first report of each distinct cycle node set
    dedupe_cycles: bool = False

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "DetectorConfig":
        section = config.get("detector", config)
        return cls(
            ambiguity_min_targets=int(section.get("ambiguity_min_targets", cls.ambiguity_min_targets)),
            ambiguity_max_targets=int(section.get("ambiguity_max_targets", cls.ambiguity_max_targets)),
            dedupe_cycles=bool(section.get("dedupe_cycles", cls.dedupe_cycles)),
        )


# Default configuration instance
DEFAULT_DETECTOR_CONFIG = DetectorConfig()
