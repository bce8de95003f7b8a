"""
Generative AI configuration constants.

Model chain and sampling parameters for the Gemini SDK.
The API key is loaded from GEMINI_API_KEY.
"""

# (api_version, model) pairs tried in order until one answers
GEMINI_MODEL_CHAIN = [
    ("v1beta", "gemini-1.5-flash-latest"),
    ("v1", "gemini-pro"),
    ("v1beta", "gemini-1.0-pro"),
]

GEMINI_VISION_MODEL = ("v1beta", "gemini-1.5-flash-latest")

GEMINI_GENERATION_CONFIG = {
    "temperature": 0.7,
    "top_k": 40,
    "top_p": 0.95,
    "max_output_tokens": 1024,
}

GEMINI_REQUEST_TIMEOUT = 60.0

# Provider error text -> message shown to API clients
AI_ERROR_MESSAGES = [
    ("API key", "AI service configuration error: Invalid or missing API key"),
    ("NOT_FOUND", "AI service error: The specified model was not found. Please check your API configuration."),
    ("PERMISSION_DENIED", "AI service error: Permission denied. Please check your API key permissions."),
    ("RESOURCE_EXHAUSTED", "AI service error: API quota exceeded. Please try again later."),
    ("extract text", "AI service error: Could not parse the response from the AI model."),
]

AI_GENERIC_ERROR_MESSAGE = "Failed to generate AI content. Please try again later."

AI_INVALID_IMAGE_MESSAGE = "AI service error: The image data could not be decoded."
