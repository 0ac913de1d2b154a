"""All magic values live here — no inline literals anywhere else."""

# Upload allow-list
ALLOWED_IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp", ".gif"})
IMAGE_MIME_PREFIX = "image/"
ALLOWED_IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/webp", "image/gif"})
UPLOAD_FIELD = "image"
URL_FIELD = "imageUrl"
UPLOAD_CHUNK_SIZE = 64 * 1024
URL_SCHEMES = ("http", "https")

# Provider names (UPLOAD_PROVIDER / URL_PROVIDER)
PROVIDER_OPENAI_CHAT = "openai-chat"
PROVIDER_OPENAI_RESPONSES = "openai-responses"
PROVIDER_CLAUDE = "claude"
PROVIDER_GEMINI = "gemini"
PROVIDERS = (
    PROVIDER_OPENAI_CHAT,
    PROVIDER_OPENAI_RESPONSES,
    PROVIDER_CLAUDE,
    PROVIDER_GEMINI,
)
URL_CAPABLE_PROVIDERS = (PROVIDER_OPENAI_CHAT, PROVIDER_OPENAI_RESPONSES)

# Models
OPENAI_VISION_MODEL = "gpt-4.1-mini"
OPENAI_MAX_TOKENS = 500
CLAUDE_VISION_MODEL = "claude-sonnet-4-20250514"
CLAUDE_MAX_TOKENS = 1000
GEMINI_VISION_MODEL = "gemini-2.0-flash"

# Endpoints
GEMINI_NATIVE_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
# Matches the provider SDKs' default request timeout.
PROVIDER_TIMEOUT_SECONDS: float = 600.0

# Prompts
AGRONOMIST_PERSONA = (
    "You are an expert Indian agronomist. Analyze crop images for diseases, pests, "
    "nutrient deficiencies, and water stress. Provide simple, actionable advice."
)
OPENAI_DEFAULT_PROMPT = "Analyze this crop image and give step-by-step guidance."
CLAUDE_DEFAULT_PROMPT = (
    "You are an expert agricultural advisor. Analyze this crop image and provide:\n\n"
    "1. Crop Identification: What crop is this (if identifiable)?\n"
    "2. Health Assessment: Is the crop healthy or showing signs of disease/stress?\n"
    "3. Issues Detected: Any visible problems (diseases, pests, nutrient deficiencies, "
    "water stress)?\n"
    "4. Recommendations: Specific actions the farmer should take.\n"
    "5. Severity: Rate the urgency (Low/Medium/High).\n\n"
    "Please be specific and practical. Format your response clearly with these sections."
)
GEMINI_DEFAULT_PROMPT = (
    "You are an expert agricultural advisor. Analyze the provided crop image.\n\n"
    "Provide: Crop Identification, Health Assessment, Issues Detected, "
    "Recommendations, Severity (Low/Medium/High)."
)

# Normalization
FALLBACK_ANALYSIS = "No analysis returned from model."
ITEM_SEPARATOR = "\n\n"
SUB_ITEM_SEPARATOR = " "

# HTTP
ROUTE_ANALYZE_URL = "/api/analyze"
ROUTE_ANALYZE_UPLOAD = "/api/analyze-image"
ROUTE_HEALTH = "/health"
API_KEY_HEADER = "X-API-Key"

# Error messages
MSG_ERR_NO_FILE = "no file"
MSG_ERR_DISALLOWED_TYPE = "disallowed type"
MSG_ERR_MISSING_URL = "missing url"
MSG_ERR_MULTIPLE_FILES = "expected exactly one file"
MSG_ERR_INVALID_REQUEST = "invalid request"
MSG_ERR_URL_UNSUPPORTED = "image URLs are not supported by provider %s"
MSG_ERR_METHOD = "Method not allowed"
MSG_ERR_UNAUTHORIZED = "Unauthorized"
MSG_ERR_INTERNAL = "Server error while analyzing image."
MSG_ERR_PROVIDER = "Provider request failed."
MSG_ERR_NO_KEY = "Server misconfiguration: %s is not set."
MSG_ERR_UNKNOWN_PROVIDER = "Server misconfiguration: unknown provider %r."

# Log messages
MSG_SERVICE_STARTING = "Starting crop analysis service on %s:%d"
MSG_INTAKE_REJECTED = "Upload rejected (%s): filename=%r content_type=%r"
MSG_INTAKE_CLEANUP_FAILED = "Failed to remove temp upload %s"
MSG_PROVIDER_CALL = "→ %s (%s)"
MSG_PROVIDER_DONE = "✓ %s responded (%.1fs, status %d)"
MSG_PROVIDER_FAILED = "✗ %s request failed: %s"
MSG_REQUEST_FAILED = "Analysis request failed: %s"
