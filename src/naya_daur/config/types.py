"""Core configuration data types.

Configuration is resolved once from all sources into a ``ResolvedConfig``
(values plus where each came from), then frozen into a ``FrozenConfig``
that clients hold for their lifetime.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

ConfigOrigin = Literal["programmatic", "env", "env_file", "default"]
SourceMap = Mapping[str, ConfigOrigin]

FIELD_ORDER = (
    "api_key",
    "model",
    "image_model",
    "base_url",
    "max_retries",
    "retry_initial_delay",
    "retry_max_delay",
    "request_timeout",
    "image_sample_count",
)


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, before freezing."""

    api_key: str | None
    model: str
    image_model: str
    base_url: str
    max_retries: int
    retry_initial_delay: float
    retry_max_delay: float | None
    request_timeout: float
    image_sample_count: int

    # Where each field value came from
    origin: SourceMap

    def __str__(self) -> str:
        """String representation with redacted API key for safe logging."""
        return (
            f"ResolvedConfig({_format_fields(self)}, origin={dict(self.origin)!r})"
        )

    def __repr__(self) -> str:
        return self.__str__()

    def to_frozen(self) -> "FrozenConfig":
        """Convert to the immutable configuration handed to clients."""
        return FrozenConfig(**{field: getattr(self, field) for field in FIELD_ORDER})

    def with_overrides(self, **overrides: object) -> "ResolvedConfig":
        """Create a new ResolvedConfig with programmatic overrides applied.

        Unknown fields are ignored.
        """
        new_values = self._asdict()
        new_origin = dict(self.origin)

        for field, value in overrides.items():
            if field in FIELD_ORDER:
                new_values[field] = value
                new_origin[field] = "programmatic"

        new_values["origin"] = new_origin
        return ResolvedConfig(**new_values)

    def audit(self) -> str:
        """Report the origin of each field with the API key redacted."""
        lines = []
        for field in FIELD_ORDER:
            if field not in self.origin:
                continue
            origin = self.origin[field]
            value = getattr(self, field)
            if field == "api_key":
                display = f"{origin}:None" if value is None else f"{origin}:[REDACTED]"
            elif origin == "env":
                display = f"env:GEMINI_{field.upper()}={value}"
            else:
                display = f"{origin}:{value}"
            lines.append(f"{field}: {display}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration consumed by the HTTP clients."""

    api_key: str | None
    model: str
    image_model: str
    base_url: str
    max_retries: int
    retry_initial_delay: float
    retry_max_delay: float | None
    request_timeout: float
    image_sample_count: int

    def __str__(self) -> str:
        return f"FrozenConfig({_format_fields(self)})"

    def __repr__(self) -> str:
        return self.__str__()


def _format_fields(config: ResolvedConfig | FrozenConfig) -> str:
    parts = []
    for field in FIELD_ORDER:
        value = getattr(config, field)
        if field == "api_key" and value:
            value = "[REDACTED]"
        parts.append(f"{field}={value!r}")
    return ", ".join(parts)
