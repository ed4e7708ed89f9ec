"""
Configuration management for Mutation Gate.

Loads config from file with sensible defaults. No magic, no surprises.
Rule values themselves are never stored here; they are read from the
environment at decision time.
"""

import json
import logging
import os

from pathlib import Path

from .types import GateConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "./mutation_gate_config.json"
CONFIG_PATH_ENV = "MUTATION_GATE_CONFIG"


def load_config(config_path: str | None = None) -> GateConfig:
    """
    Load configuration from file, with fallback to defaults.

    Priority:
    1. Explicit config_path argument
    2. MUTATION_GATE_CONFIG environment variable
    3. Default path (./mutation_gate_config.json)
    4. Built-in defaults
    """
    path = config_path or os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH)

    if Path(path).exists():
        with open(path) as f:
            data = json.load(f)
        logger.debug(f"Loaded configuration from {path}")
        return GateConfig.from_dict(data)

    # Return defaults if no config file
    return GateConfig()


def save_config(config: GateConfig, config_path: str | None = None) -> None:
    """
    Save configuration to file.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    Path(path).parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        json.dump(config.to_dict(), f, indent=2)


def create_default_config_file(path: str = DEFAULT_CONFIG_PATH) -> None:
    """Create a default configuration file for users to customize."""
    save_config(GateConfig(), path)
    print(f"Created default config at: {path}")
