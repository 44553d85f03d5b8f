import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

# --- Gemini ---
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_URL = os.getenv(
    "GEMINI_URL",
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash:generateContent",
)
GEMINI_TIMEOUT_SECONDS = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "30"))

# --- HTTP ---
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8080"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class GeminiConfig:
    api_key: str
    url: str
    timeout: float


def load_gemini_config() -> GeminiConfig:
    """Snapshot the Gemini settings into an immutable config object."""
    return GeminiConfig(api_key=GEMINI_API_KEY, url=GEMINI_URL, timeout=GEMINI_TIMEOUT_SECONDS)
