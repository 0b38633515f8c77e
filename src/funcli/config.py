"""Configuration resolution with environment and file precedence.

The effective :class:`~funcli.models.BuilderConfig` of a builder is
resolved by :func:`resolve_config`. Precedence (high to low):

1. Explicit keyword overrides passed to :meth:`CommandBuilder.new`.
2. Environment variables (``FUNCLI_NAMING_CONVENTION``, ``FUNCLI_STRICT``,
   ``FUNCLI_DOCS_PATH``, ``FUNCLI_SCAN_SOURCE``, ``FUNCLI_PROG_NAME``,
   ``FUNCLI_VERBOSE``, ``NO_COLOR``).
3. A JSON config file named by ``FUNCLI_CONFIG``.
4. Defaults declared on the model.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from funcli.exceptions import ConfigError
from funcli.models import BuilderConfig

CONFIG_ENV_VAR = "FUNCLI_CONFIG"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


# --- Config file ---


def load_config_file(path: Path) -> dict[str, Any]:
    """Load a JSON config file.

    Args:
        path: Path to a JSON object file.

    Returns:
        The parsed mapping.

    Raises:
        ConfigError: If the file does not exist, contains invalid JSON, or
            does not hold a JSON object.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a JSON object")
    return data


# --- Environment ---


def _parse_bool(var: str, raw: str) -> bool:
    """Interpret an environment flag, rejecting anything ambiguous."""
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"Environment variable {var} must be a boolean, got {raw!r}")


def load_env_overrides(environ: Optional[dict[str, str]] = None) -> dict[str, Any]:
    """Collect configuration values from ``FUNCLI_*`` environment variables.

    Args:
        environ: Mapping to read instead of :data:`os.environ` (tests).

    Returns:
        A partial configuration mapping containing only the variables set.
    """
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    if env.get("FUNCLI_NAMING_CONVENTION"):
        values["naming_convention"] = env["FUNCLI_NAMING_CONVENTION"]
    if "FUNCLI_STRICT" in env:
        values["strict"] = _parse_bool("FUNCLI_STRICT", env["FUNCLI_STRICT"])
    if env.get("FUNCLI_DOCS_PATH"):
        values["docs_paths"] = [
            p for p in env["FUNCLI_DOCS_PATH"].split(os.pathsep) if p
        ]
    if "FUNCLI_SCAN_SOURCE" in env:
        values["scan_source"] = _parse_bool(
            "FUNCLI_SCAN_SOURCE", env["FUNCLI_SCAN_SOURCE"]
        )
    if env.get("FUNCLI_PROG_NAME"):
        values["prog_name"] = env["FUNCLI_PROG_NAME"]
    if "FUNCLI_VERBOSE" in env:
        values["verbose"] = _parse_bool("FUNCLI_VERBOSE", env["FUNCLI_VERBOSE"])
    # clig.dev: NO_COLOR disables colour whatever its value.
    if env.get("NO_COLOR") is not None:
        values["no_color"] = True
    return values


# --- Precedence resolution ---


def resolve_config(
    environ: Optional[dict[str, str]] = None,
    **overrides: Any,
) -> BuilderConfig:
    """Resolve the builder configuration with the full precedence chain.

    Keyword overrides whose value is ``None`` are ignored so that callers
    can forward optional arguments unchanged.

    Args:
        environ: Environment mapping to read instead of :data:`os.environ`.
        **overrides: Field values with the highest precedence.

    Returns:
        The validated :class:`~funcli.models.BuilderConfig`.

    Raises:
        ConfigError: If the config file is invalid or a value fails
            validation.
    """
    env = os.environ if environ is None else environ
    merged: dict[str, Any] = {}

    config_path = env.get(CONFIG_ENV_VAR)
    if config_path:
        merged.update(load_config_file(Path(config_path).expanduser()))

    merged.update(load_env_overrides(env))
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return BuilderConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid funcli configuration: {exc}") from exc
