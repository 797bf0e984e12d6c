"""Grounded JSON client for the Gemini generative-language API."""

import importlib.metadata
import logging

from naya_daur.client import (
    GroundedJSONRetriever,
    ImageGenerator,
    RequestDescriptor,
    RetryState,
    fetch_with_backoff,
    generate_images,
    retrieve_grounded_json,
)
from naya_daur.config import FrozenConfig, ResolvedConfig, resolve_config
from naya_daur.exceptions import (
    APIError,
    ConfigurationError,
    GroundingStepError,
    ImageGenerationError,
    MissingKeyError,
    NayaDaurError,
    NetworkError,
    ResponseParseError,
    ResponseValidationError,
)
from naya_daur.telemetry import SimpleReporter, TelemetryContext, TelemetryReporter

try:
    __version__ = importlib.metadata.version("naya-daur")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library logging stays silent unless the application configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Core retrieval
    "GroundedJSONRetriever",
    "retrieve_grounded_json",
    "RequestDescriptor",
    "fetch_with_backoff",
    "RetryState",
    # Images
    "ImageGenerator",
    "generate_images",
    # Configuration
    "resolve_config",
    "ResolvedConfig",
    "FrozenConfig",
    # Telemetry
    "TelemetryContext",
    "TelemetryReporter",
    "SimpleReporter",
    # Exceptions
    "NayaDaurError",
    "ConfigurationError",
    "MissingKeyError",
    "APIError",
    "NetworkError",
    "GroundingStepError",
    "ResponseParseError",
    "ResponseValidationError",
    "ImageGenerationError",
]
