"""Server and model defaults, optionally overridden by local/config.json."""

import json
from pathlib import Path

from .model import Breakpoint, TypographyModel, default_breakpoints

BASE_DIR = Path(__file__).parent.parent.parent
CONFIG_PATH = BASE_DIR / "local" / "config.json"

DEFAULTS = {
    "host": "127.0.0.1",
    "port": 8765,
    "base_rem_px": 16,
    "breakpoints": [bp.model_dump() for bp in default_breakpoints()],
}


def load_config(config_path: Path = CONFIG_PATH) -> dict:
    """Load config from a JSON file, falling back to DEFAULTS for missing keys."""
    config = dict(DEFAULTS)
    if config_path.exists():
        overrides = json.loads(config_path.read_text())
        config.update({k: v for k, v in overrides.items() if k in DEFAULTS})
    return config


def initial_model(config: dict) -> TypographyModel:
    """Build the empty session model a fresh server starts with."""
    return TypographyModel(
        base_rem_px=config["base_rem_px"],
        breakpoints=[Breakpoint(**bp) for bp in config["breakpoints"]],
    )
