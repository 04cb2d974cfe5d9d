# config.py
"""
Runtime settings read from the environment.

A `.env` file at the project root is loaded first (python-dotenv); variables
already set in the environment win over the file.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# src/spendwise/config.py -> parents[2] == project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")


def _clean_env(value: str | None) -> str | None:
    if not value:
        return None
    cleaned = value.strip().strip("'\"")
    return cleaned or None


DB_URL = _clean_env(os.getenv("SPENDWISE_DB_URL")) or "sqlite:///./tracker.db"
HOST = _clean_env(os.getenv("SPENDWISE_HOST")) or "0.0.0.0"
PORT = int(_clean_env(os.getenv("SPENDWISE_PORT")) or "3000")
LOG_LEVEL = (_clean_env(os.getenv("SPENDWISE_LOG_LEVEL")) or "INFO").upper()
