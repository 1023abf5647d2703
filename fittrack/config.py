"""
Configuration for FitTrack.

Values are read from environment variables first, then from Streamlit secrets
(.streamlit/secrets.toml):

    SUPABASE_URL = "https://<project>.supabase.co"
    SUPABASE_ANON_KEY = "<anon key>"

Without Supabase credentials the app still runs, in guest mode only.
"""
from __future__ import annotations

import logging
import os
from datetime import date, datetime
from typing import Optional

import pytz

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_secret(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get a setting from the environment or, failing that, Streamlit secrets."""
    value = os.getenv(key)
    if value:
        return value
    try:
        import streamlit as st

        return st.secrets[key]
    except Exception:
        # No secrets.toml, or key missing
        return default


def setup_logging(level: Optional[str] = None) -> None:
    level_name = (level or os.getenv("FITTRACK_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)


SUPABASE_URL = get_secret("SUPABASE_URL", "")
SUPABASE_ANON_KEY = get_secret("SUPABASE_ANON_KEY", "")
SUPABASE_AVAILABLE = bool(SUPABASE_URL and SUPABASE_ANON_KEY)

LOCAL_TZ = pytz.timezone(os.getenv("FITTRACK_TZ", "America/Chicago"))
GUEST_STORE_PATH = os.getenv(
    "FITTRACK_GUEST_STORE",
    os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "guest_data.json"),
)


def local_today(tz=None) -> date:
    """Calendar date 'now' in the configured timezone."""
    return datetime.now(tz or LOCAL_TZ).date()
