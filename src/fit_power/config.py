"""Configuration file support."""

import json
import os
from pathlib import Path

CONFIG_DIR = Path.home() / ".config" / "fit-power"
CONFIG_PATH = CONFIG_DIR / "fit-power.json"
LOCAL_CONFIG_PATH = Path("fit-power.json")

DEFAULT_DECODE_URL = "http://data.intrepidsport.cn:8803/fit/decode/v1"

# Default values for CLI options
DEFAULTS = {
    "mass": 80.0,
    "cda": 0.32,
    "crr": 0.005,
    "drivetrain_penalty": 0.02,
    "max_power": 2000.0,
    "headwind": 0.0,
    "humidity": 50.0,
    "smoothing": 0,
}


def load_config() -> dict:
    """Load configuration from config files.

    Merges config from global and local files:
    1. ~/.config/fit-power/fit-power.json (global, loaded first)
    2. ./fit-power.json (local, overrides global)

    Files that cannot be read or parsed are skipped.

    Returns:
        Dict with merged config values, empty dict if no files exist.
    """
    config = {}
    for config_path in [CONFIG_PATH, LOCAL_CONFIG_PATH]:
        if config_path.exists():
            try:
                with config_path.open() as f:
                    config.update(json.load(f))
            except (json.JSONDecodeError, OSError):
                continue
    return config


def get_decode_url(config: dict | None = None) -> str:
    """URL of the FIT decoding service.

    FIT_POWER_DECODE_URL takes precedence over the "decode_url" config key.
    """
    if config is None:
        config = load_config()
    return os.environ.get("FIT_POWER_DECODE_URL") or config.get("decode_url") or DEFAULT_DECODE_URL
