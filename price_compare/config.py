# price_compare/config.py

import os
from typing import Optional
from dotenv import load_dotenv

# Merge a local .env into the process environment (existing variables win)
load_dotenv()

SERPAPI_BASE_URL = "https://serpapi.com/search"

# Search pipeline limits
EARLY_STOP_THRESHOLD = 20
MAX_RESULTS_PER_CALL = 10
DEFAULT_COUNTRY = "US"
FALLBACK_WEBSITE_LABEL = "Google Shopping"

# Frontend HTTP client
CLIENT_TIMEOUT_SECONDS = 30
CLIENT_RETRY_DELAY_SECONDS = 1.0

MISSING_API_KEY_MESSAGE = "API key is missing. Please set the SERPAPI_API_KEY in the backend .env file."


def get_serpapi_api_key() -> str:
  """Read at call time so the key can be set or rotated without a restart."""
  return os.getenv("SERPAPI_API_KEY", "").strip()


def get_serpapi_timeout() -> Optional[float]:
  """
  Optional timeout in seconds for upstream calls. Unset, empty, 0 or "none"
  leave requests' default: no timeout.
  """
  raw = os.getenv("SERPAPI_TIMEOUT", "").strip().lower()
  if raw in ("", "0", "none"):
    return None
  try:
    return float(raw)
  except ValueError:
    return None


def get_cors_origins() -> list:
  raw = os.getenv("CORS_ORIGINS", "*")
  return [origin.strip() for origin in raw.split(",") if origin.strip()] or ["*"]


def get_api_url() -> str:
  """Backend base URL used by the frontend."""
  return os.getenv("API_URL", "http://localhost:3000").rstrip("/")


HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
FRONTEND_PORT = int(os.getenv("FRONTEND_PORT", "5000"))
