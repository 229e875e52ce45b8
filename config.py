# config.py
"""
Central configuration. Loads environment variables from a .env file
and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── Gemini AI ─────────────────────────────────────────────
GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# Most recent transactions sent along with an insight request
INSIGHT_HISTORY_LIMIT: int = int(os.getenv("INSIGHT_HISTORY_LIMIT", "50"))

# ── Local storage ─────────────────────────────────────────
STORAGE_PATH: str = os.getenv("FINANCE_STORAGE_PATH", "finance_store.json")
STORAGE_KEY: str = os.getenv("FINANCE_STORAGE_KEY", "finance_transactions")

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
