from pathlib import Path
import os

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]

load_dotenv(ROOT / ".env")

RUN_MODE = os.getenv("RUN_MODE", "dev").lower()
API_HOST = os.getenv("TRAINLOG_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("TRAINLOG_API_PORT", "8000"))
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "TRAINLOG_CORS_ORIGINS",
        "http://127.0.0.1:5173,http://localhost:5173",
    ).split(",")
    if origin.strip()
]

# Language-model provider (injected into the completion client, never read by the core)
LLM_API_KEY = os.getenv("TRAINLOG_LLM_API_KEY") or os.getenv("OPENAI_API_KEY")
LLM_BASE_URL = os.getenv("TRAINLOG_LLM_BASE_URL") or None
LLM_MODEL = os.getenv("TRAINLOG_LLM_MODEL", "gpt-4o")
LLM_TEMPERATURE = float(os.getenv("TRAINLOG_LLM_TEMPERATURE", "0.7"))
LLM_MAX_TOKENS = int(os.getenv("TRAINLOG_LLM_MAX_TOKENS", "4000"))
LLM_TIMEOUT_SEC = float(os.getenv("TRAINLOG_LLM_TIMEOUT_SEC", "120"))

# Uploads
UPLOAD_MAX_BYTES = int(os.getenv("TRAINLOG_UPLOAD_MAX_BYTES", str(20 * 1024 * 1024)))
UPLOAD_TTL_SECONDS = int(os.getenv("TRAINLOG_UPLOAD_TTL_SECONDS", "3600"))
PLAN_RATE_LIMIT = int(os.getenv("TRAINLOG_PLAN_RATE_LIMIT", "5"))
PLAN_RATE_WINDOW_SEC = int(os.getenv("TRAINLOG_PLAN_RATE_WINDOW_SEC", "300"))

# Dashboard windows
DASHBOARD_MONTHS = int(os.getenv("TRAINLOG_DASHBOARD_MONTHS", "24"))
DASHBOARD_WEEKS = int(os.getenv("TRAINLOG_DASHBOARD_WEEKS", "20"))
