"""
Configuration - Server settings loaded from the environment

Values come from the process environment or a local .env file.
Only PORT is required in practice; everything else has a working default.
"""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _split_urls(raw: str) -> List[str]:
    """Split a comma-separated list of endpoints, dropping blanks."""
    return [part.strip() for part in raw.split(",") if part.strip()]


# Listening port
PORT = int(os.getenv("PORT", "8000"))

# CORS origin for the Streamlit frontend
FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN", "http://localhost:8501")

# Upper bound for a single provider call during fan-out
PROVIDER_TIMEOUT_SECONDS = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "20"))

# HTTP JSON provider endpoints per category
GAMES_PROVIDER_URLS = _split_urls(os.getenv("GAMES_PROVIDER_URLS", ""))
MOVIES_PROVIDER_URLS = _split_urls(os.getenv("MOVIES_PROVIDER_URLS", ""))
