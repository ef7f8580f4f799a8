"""
Runtime settings.

Defaults live in ``DEFAULT_SETTINGS``; environment variables override them.
A ``.env`` file, when one is found, is loaded first so the API key
can live there. Nothing is written to disk.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "theme": "light",                  # "light" or "dark"
    "explain_url": (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "{model}:generateContent"
    ),
    "explain_model": "gemini-2.0-flash",
    "api_key": "",
    "explain_timeout": 30.0,           # seconds
    "log_level": "INFO",
}

# setting key -> environment variable
_ENV_OVERRIDES = {
    "theme": "MARKET_THEME",
    "explain_url": "MARKET_EXPLAIN_URL",
    "explain_model": "MARKET_EXPLAIN_MODEL",
    "api_key": "GEMINI_API_KEY",
    "explain_timeout": "MARKET_EXPLAIN_TIMEOUT",
    "log_level": "MARKET_LOG_LEVEL",
}


def get_settings(environ=None) -> dict:
    """Return the defaults merged with any environment overrides."""
    env = os.environ if environ is None else environ
    merged = dict(DEFAULT_SETTINGS)
    for key, var in _ENV_OVERRIDES.items():
        raw = env.get(var)
        if raw is None or raw == "":
            continue
        if key == "explain_timeout":
            try:
                value = float(raw)
            except ValueError:
                logger.warning("Ignoring %s=%r: not a number", var, raw)
                continue
            if value <= 0:
                logger.warning("Ignoring %s=%r: must be positive", var, raw)
                continue
            merged[key] = value
        elif key == "theme":
            if raw not in ("light", "dark"):
                logger.warning("Ignoring %s=%r: expected 'light' or 'dark'", var, raw)
                continue
            merged[key] = raw
        else:
            merged[key] = raw
    return merged
