"""Configuration management for the Naya Daur client.

Configuration is resolved once from defaults, an optional ``.env`` file, the
environment and programmatic overrides, then frozen for the clients.
"""

from .api import print_config_audit, resolve_config
from .schema import NayaDaurSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

__all__ = [
    "ConfigOrigin",
    "FrozenConfig",
    "NayaDaurSettings",
    "ResolvedConfig",
    "SourceMap",
    "print_config_audit",
    "resolve_config",
]
