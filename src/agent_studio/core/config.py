"""3-layer configuration system for Agent Studio.

Loads and merges configuration from:
1. Default settings (built-in)
2. User config (~/.agent-studio/config.yaml, or an explicit path)
3. CLI parameters (override)
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Optional

import yaml

from .. import __version__
from .history import history_path_for

DEFAULT_DATA_DIR = Path.home() / ".agent-studio"

DEFAULT_CONFIG: dict = {
    "studio": {
        "data_dir": str(DEFAULT_DATA_DIR),
        "default_domain": "esg",
    },
    "output": {
        "export_dir": ".",
    },
    "ai": {
        "provider": "gemini",
        "timeout_seconds": 60,
        "step_timeout_seconds": 90,
        "gemini": {
            "model": "gemini-1.5-flash",
            "api_key_env": "GEMINI_API_KEY",
        },
        "openai": {
            "model": "gpt-4o-mini",
            "api_key_env": "OPENAI_API_KEY",
        },
        "anthropic": {
            "model": "claude-haiku-4-5-20251001",
            "api_key_env": "ANTHROPIC_API_KEY",
        },
        "ollama": {
            "endpoint": "http://localhost:11434",
            "model": "llama3.1:8b",
        },
    },
}


def default_config_path() -> Path:
    return DEFAULT_DATA_DIR / "config.yaml"


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Arrays are replaced, not merged."""
    result = {}
    for key in base:
        result[key] = base[key]
    for key, value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = value
    return result


def load_config_file(config_path: Optional[Path] = None) -> dict:
    """Load a YAML config file. Missing, empty or unreadable files yield {}."""
    config_path = Path(config_path) if config_path else default_config_path()
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_text(encoding="utf-8-sig")  # utf-8-sig strips BOM
        data = yaml.safe_load(content)
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def get_effective_config(
    config_path: Optional[Path] = None,
    cli_overrides: Optional[dict] = None,
) -> dict:
    """Get the fully resolved configuration."""
    config = copy.deepcopy(DEFAULT_CONFIG)

    file_config = load_config_file(config_path)
    if file_config:
        config = deep_merge(config, file_config)

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    return config


def get_history_path(config: dict) -> Path:
    data_dir = config.get("studio", {}).get("data_dir") or str(DEFAULT_DATA_DIR)
    return history_path_for(Path(data_dir).expanduser())


def get_step_timeout(config: dict) -> Optional[float]:
    """Per-step timeout in seconds, or None when disabled (0 or null)."""
    value = config.get("ai", {}).get("step_timeout_seconds")
    if not value:
        return None
    return float(value)


def initialize_config(config_path: Optional[Path] = None) -> tuple[Path, bool]:
    """Write a starter config file unless one exists.

    Returns (path, created).
    """
    config_path = Path(config_path) if config_path else default_config_path()
    if config_path.exists():
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(
        "# Agent Studio configuration\n"
        f"# Written by agent-studio {__version__}\n"
        "\n"
        "studio:\n"
        f'  data_dir: "{config_path.parent.as_posix()}"\n'
        "  default_domain: esg\n"
        "\n"
        "ai:\n"
        "  provider: gemini\n"
        "  step_timeout_seconds: 90\n",
        encoding="utf-8",
    )
    return config_path, True
