"""Exception hierarchy for the Naya Daur client"""  # noqa: D415


class NayaDaurError(Exception):
    """Base exception for all Naya Daur errors"""  # noqa: D415


class ConfigurationError(NayaDaurError):
    """Raised when configuration cannot be resolved or validated"""  # noqa: D415


class MissingKeyError(NayaDaurError):
    """Raised when required API key is missing"""  # noqa: D415


class APIError(NayaDaurError):
    """Raised for a non-2xx HTTP response from the generation API.

    Carries the HTTP status code and the most specific message available:
    the nested ``error.message`` from the response body when present,
    otherwise the transport status text.
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"API Error: {status_code} {message}")

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429


class NetworkError(NayaDaurError):
    """Raised when network issues persist after all retries"""  # noqa: D415


class GroundingStepError(NayaDaurError):
    """Raised when a grounded retrieval phase returns no candidate text."""

    def __init__(self, step: int, message: str) -> None:
        self.step = step
        super().__init__(f"Step {step} Failed: {message}")


class ResponseParseError(NayaDaurError):
    """Raised when a response body or model output is not valid JSON"""  # noqa: D415


class ResponseValidationError(NayaDaurError):
    """Raised when structured output does not match the expected model"""  # noqa: D415


class ImageGenerationError(NayaDaurError):
    """Raised when the image endpoint returns no usable predictions"""  # noqa: D415
