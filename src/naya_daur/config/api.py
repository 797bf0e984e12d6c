"""Public API for configuration resolution.

Precedence, highest first:
Programmatic > Environment > ``.env`` file > Defaults
"""

from collections.abc import Mapping
import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError

from naya_daur.exceptions import ConfigurationError

from .schema import NayaDaurSettings
from .types import FIELD_ORDER, ConfigOrigin, ResolvedConfig

log = logging.getLogger(__name__)

ENV_PREFIX = "GEMINI_"


def _env_name(field: str) -> str:
    return f"{ENV_PREFIX}{field.upper()}"


def _pick_fields(source: Mapping[str, str | None]) -> dict[str, Any]:
    """Map GEMINI_* entries onto field names.

    Names match case-insensitively, like the settings model. Empty values
    count as unset.
    """
    by_name = {key.upper(): value for key, value in source.items()}
    found: dict[str, Any] = {}
    for field in FIELD_ORDER:
        value = by_name.get(_env_name(field))
        if value is not None and value.strip():
            found[field] = value
    return found


def _load_env_file(env_file: str | Path) -> dict[str, Any]:
    """Read GEMINI_* values from a ``.env`` file without touching os.environ."""
    env_path = Path(env_file)
    if not env_path.exists():
        raise ConfigurationError(f"Environment file not found: {env_path}")

    return _pick_fields(dotenv_values(env_path, encoding="utf-8"))


def _load_env() -> dict[str, Any]:
    return _pick_fields(os.environ)


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    use_env_file: str | Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Args:
        programmatic: Overrides with the highest precedence. Unknown fields
            are ignored.
        use_env_file: Optional ``.env`` file read below the process
            environment.

    Returns:
        ResolvedConfig with merged values and per-field origin.

    Raises:
        ConfigurationError: If the env file is missing or the merged values
            fail validation.

    Example:
        config = resolve_config({"model": "gemini-2.5-pro"})
        print(config.audit())
    """
    merged: dict[str, Any] = {}
    origins: dict[str, ConfigOrigin] = {}

    defaults = NayaDaurSettings.model_construct().to_dict()
    for field in FIELD_ORDER:
        merged[field] = defaults[field]
        origins[field] = "default"

    layers: list[tuple[ConfigOrigin, dict[str, Any]]] = []
    if use_env_file:
        layers.append(("env_file", _load_env_file(use_env_file)))
    layers.append(("env", _load_env()))
    layers.append(("programmatic", dict(programmatic or {})))

    for origin, values in layers:
        for field, value in values.items():
            if field in merged:
                merged[field] = value
                origins[field] = origin

    try:
        validated = NayaDaurSettings(**merged).to_dict()
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e

    resolved = ResolvedConfig(
        **{field: validated[field] for field in FIELD_ORDER}, origin=origins
    )
    log.debug("Resolved configuration: %s", resolved)
    return resolved


def print_config_audit(config: ResolvedConfig | None = None) -> str:
    """Return the redacted audit report for ``config`` (or a fresh resolution)."""
    config = config or resolve_config()
    return "Configuration audit:\n" + config.audit()
