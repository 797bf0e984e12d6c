"""
Project-wide constants for the Naya Daur grounded JSON client
"""  # noqa: D200, D212, D415

# ==============================================================================
# API and Network Configuration
# ==============================================================================

GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TEXT_MODEL = "gemini-2.5-flash-preview-09-2025"
DEFAULT_IMAGE_MODEL = "imagen-4.0-generate-001"

# Retry and timeout settings
MAX_RETRIES = 3
RETRY_INITIAL_DELAY = 1.0  # seconds
NETWORK_TIMEOUT = 120.0  # seconds, grounded generation can be slow
RATE_LIMIT_STATUS = 429

# ==============================================================================
# Grounded Retrieval
# ==============================================================================

# Tool flag that switches on search grounding for a generation call
SEARCH_GROUNDING_TOOL = "google_search"
JSON_MIME_TYPE = "application/json"

PROGRESS_STEP_1 = "Step 1/2: Searching for grounded insights..."
PROGRESS_STEP_2 = "Step 2/2: Analyzing and structuring data..."

# ==============================================================================
# Image Generation
# ==============================================================================

DEFAULT_IMAGE_SAMPLE_COUNT = 2
MAX_IMAGE_SAMPLE_COUNT = 4
IMAGE_DATA_URI_PREFIX = "data:image/png;base64,"
