"""HTTP clients for the generative-language API."""

from .backoff import RetryState, extract_error_message, fetch_with_backoff, redact_url
from .base import BaseGeminiClient
from .grounded import (
    GroundedJSONRetriever,
    RequestDescriptor,
    build_grounded_payload,
    build_structured_payload,
    extract_candidate_text,
    retrieve_grounded_json,
)
from .images import ImageGenerator, generate_images

__all__ = [
    "BaseGeminiClient",
    "GroundedJSONRetriever",
    "ImageGenerator",
    "RequestDescriptor",
    "RetryState",
    "build_grounded_payload",
    "build_structured_payload",
    "extract_candidate_text",
    "extract_error_message",
    "fetch_with_backoff",
    "generate_images",
    "redact_url",
    "retrieve_grounded_json",
]
