import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

from .settings import Settings, settings
from .constants import (
    LLM_CONFIG,
    SEARCH_CONFIG,
    PIPELINE_CONFIG,
)

REQUIRED_KEYS = [
    "GEMINI_API_KEY",
    "TAVILY_API_KEY",
]

def check_api_keys_on_startup():
    """Check for required API keys on startup."""
    missing_keys = []
    for key_name in REQUIRED_KEYS:
        if not getattr(settings, key_name, None):
            missing_keys.append(key_name)

    if missing_keys:
        logger.warning(f"Missing API keys: {', '.join(missing_keys)}. Verification requests will fail.")
    else:
        logger.info("All required API keys are configured.")

__all__ = [
    "logger",
    "Settings",
    "settings",
    "REQUIRED_KEYS",
    "check_api_keys_on_startup",
    "LLM_CONFIG",
    "SEARCH_CONFIG",
    "PIPELINE_CONFIG",
]
