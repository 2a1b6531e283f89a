"""Configuration for the AMEP classroom backend."""

import logging
import os

from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()


class ConfigurationError(Exception):
    """Raised when configuration values are missing or invalid."""
    pass


def _env_flag(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# --- Logging Setup ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Storage backend: "memory" (demo data, single process) or "redis"
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory").lower()

REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD", None)

# Quiz generation
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", 0.7))
QUESTIONS_PER_QUIZ = 5
OPTIONS_PER_QUESTION = 4
MAX_PENDING_QUIZZES = 10   # Unsubmitted quizzes kept per learner, oldest dropped first
PENDING_QUIZ_TTL_MS = int(os.getenv("PENDING_QUIZ_TTL_MS", 2 * 60 * 60 * 1000))

# Adaptive difficulty
ADAPTIVE_MODEL_ENABLED = _env_flag("ADAPTIVE_MODEL_ENABLED", True)
SCORE_WINDOW = 5            # Recent scores kept per learner
DEFAULT_MASTERY = 50        # Mastery / baseline average with no history
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 100

# Teacher dashboard
AT_RISK_THRESHOLD = 50      # Mastery below this = at risk
RECOMMENDED_TASKS = 4       # Tasks offered on the student dashboard
MIN_CLASS_CODE_LENGTH = 4


def validate_config() -> list:
    """Validate configuration and return a list of warnings.

    Raises:
        ConfigurationError: If the store backend is unknown.
    """
    issues = []

    if STORE_BACKEND not in ("memory", "redis"):
        raise ConfigurationError(
            f"Unknown STORE_BACKEND {STORE_BACKEND!r}, expected 'memory' or 'redis'"
        )

    if not os.getenv("OPENAI_API_KEY"):
        issues.append("OPENAI_API_KEY not set, quizzes will use the fallback question")

    return issues
