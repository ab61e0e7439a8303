# app/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./exam_prep.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# Marking scheme applied when a test does not carry its own
DEFAULT_CORRECT_MARKS = _float_env("DEFAULT_CORRECT_MARKS", 4)
DEFAULT_INCORRECT_MARKS = _float_env("DEFAULT_INCORRECT_MARKS", -1)
DEFAULT_UNATTEMPTED_MARKS = _float_env("DEFAULT_UNATTEMPTED_MARKS", 0)

# SM-2
DEFAULT_EASE_FACTOR = _float_env("DEFAULT_EASE_FACTOR", 2.5)
MIN_EASE_FACTOR = 1.3

REVISION_QUEUE_DEFAULT_LIMIT = int(os.getenv("REVISION_QUEUE_DEFAULT_LIMIT", "20"))
