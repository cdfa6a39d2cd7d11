"""YAML + environment variable + CLI flag configuration loading.

Config file: config/provider-sim.yaml
Env var override prefix: PROVIDER_SIM_
Nesting convention: double underscore (e.g. PROVIDER_SIM_SERVER__PORT)
"""

from __future__ import annotations

import argparse
import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

_DEFAULT_CONFIG_PATH = Path("config/provider-sim.yaml")

_DEFAULTS: dict[str, Any] = {
    "server": {
        "host": "0.0.0.0",
        "port": 8000,
    },
    "provider": {
        "api_key": "",
        "model": "gpt-4-external",
    },
    "logging": {
        "level": "INFO",
    },
}

ENV_PREFIX = "PROVIDER_SIM_"

# Values under these keys are never coerced: "12345678" is a valid API key.
_STRING_KEYS = {"api_key", "model", "host"}


class StartupConfigError(ValueError):
    """Configuration that must stop the process before it serves anything."""


@dataclass(frozen=True)
class InstanceConfig:
    api_key: str
    model: str = "gpt-4-external"
    port: int = 8000
    host: str = "0.0.0.0"


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into base, recursively for nested dicts."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _coerce_value(value: str) -> int | float | bool | str:
    """Attempt to coerce a string env var value to a typed value."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value


def _apply_env_overrides(config: dict) -> dict:
    """Apply PROVIDER_SIM_ prefixed environment variables as overrides.

    Double underscore separates nesting levels:
        PROVIDER_SIM_PROVIDER__API_KEY=sk-test -> config["provider"]["api_key"] = "sk-test"
        PROVIDER_SIM_SERVER__PORT=8001 -> config["server"]["port"] = 8001
    """
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        parts = key[len(ENV_PREFIX) :].lower().split("__")
        target = config
        for part in parts[:-1]:
            if part not in target:
                target[part] = {}
            target = target[part]
        leaf = parts[-1]
        target[leaf] = value if leaf in _STRING_KEYS else _coerce_value(value)
    return config


def _apply_cli_overrides(config: dict, args: argparse.Namespace) -> dict:
    """Apply explicitly passed CLI flags; flags left at None are ignored."""
    overrides = {
        ("server", "host"): args.host,
        ("server", "port"): args.port,
        ("provider", "api_key"): args.api_key,
        ("provider", "model"): args.model,
        ("logging", "level"): args.log_level,
    }
    for (section, key), value in overrides.items():
        if value is not None:
            config.setdefault(section, {})[key] = value
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="provider-sim",
        description="Key-validating OpenAI-compatible inference provider simulator",
    )
    parser.add_argument("--port", type=int, default=None, help="Listen port (default 8000)")
    parser.add_argument(
        "--api-key",
        default=None,
        help="Required API key (checked in X-Provider-Api-Key header)",
    )
    parser.add_argument(
        "--model", default=None, help="Model name to report (default gpt-4-external)"
    )
    parser.add_argument("--host", default=None, help="Bind address (default 0.0.0.0)")
    parser.add_argument("--log-level", default=None, help="Logging level (default INFO)")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"YAML config file (default {_DEFAULT_CONFIG_PATH})",
    )
    return parser


def load_config(
    config_path: Path | None = None, args: argparse.Namespace | None = None
) -> dict[str, Any]:
    """Load configuration from YAML file with env var and CLI overrides.

    Precedence (highest wins): CLI flags > env vars > YAML file > defaults.
    """
    config = copy.deepcopy(_DEFAULTS)

    path = config_path or _DEFAULT_CONFIG_PATH
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config = _deep_merge(config, file_config)

    config = _apply_env_overrides(config)
    if args is not None:
        config = _apply_cli_overrides(config, args)
    return config


def build_instance_config(config: dict[str, Any]) -> InstanceConfig:
    """Validate the loaded config and freeze it. Raises StartupConfigError."""
    api_key = config["provider"].get("api_key")
    if api_key is None or str(api_key) == "":
        raise StartupConfigError("--api-key is required")
    port = config["server"]["port"]
    try:
        port = int(port)
    except (TypeError, ValueError):
        raise StartupConfigError(f"invalid port: {port!r}") from None
    if not 0 <= port <= 65535:
        raise StartupConfigError(f"port out of range: {port}")
    return InstanceConfig(
        api_key=str(api_key),
        model=str(config["provider"]["model"]),
        port=port,
        host=str(config["server"]["host"]),
    )
