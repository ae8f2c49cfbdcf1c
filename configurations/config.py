import os
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

def get_env_var(name: str) -> str:
    """Get environment variable or raise a clear error if missing."""
    value = os.getenv(name)
    if not value:
        raise RuntimeError(
            f"❌ Missing required environment variable: {name}\n"
            f"👉 Did you copy .env.example to .env and fill in your keys?"
        )
    return value


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


DEBUG = _flag("DEBUG")
PORT = int(os.getenv("PORT", "8000"))

# Optional LLM refinement of savings goals (needs GOOGLE_API_KEY when enabled)
AI_TARGET_PARSER = _flag("AI_TARGET_PARSER")
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "10"))
GEMINI_MODEL_NAME = os.getenv("GEMINI_MODEL_NAME", "gemini-1.5-flash")

DEFAULT_TIMELINE_DAYS = int(os.getenv("DEFAULT_TIMELINE_DAYS", "30"))

# Webhook signature check is skipped when unset
LINE_CHANNEL_SECRET = os.getenv("LINE_CHANNEL_SECRET")

WEB_APP_URL = os.getenv("WEB_APP_URL", "http://localhost:8000")
