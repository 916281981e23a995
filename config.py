import os

import streamlit as st
from streamlit.errors import StreamlitAPIException

DEFAULT_API_BASE_URL = "http://localhost:3000/api"
DEFAULT_API_TIMEOUT = 15.0
DEFAULT_SESSION_DB = "session.db"


def get_secret(key):
    try:
        return st.secrets.get(key)
    except (FileNotFoundError, StreamlitAPIException):
        # No secrets.toml outside a configured deployment
        return None


def get_setting(key, default=None):
    """Streamlit secrets first, then the process environment."""
    value = get_secret(key)
    if value is None or value == "":
        value = os.getenv(key)
    return default if value is None or value == "" else value


def api_base_url() -> str:
    return str(get_setting("API_BASE_URL", DEFAULT_API_BASE_URL)).rstrip("/")


def api_timeout() -> float:
    raw = get_setting("API_TIMEOUT", DEFAULT_API_TIMEOUT)
    try:
        return float(raw)
    except (TypeError, ValueError):
        return DEFAULT_API_TIMEOUT


def session_backend() -> str:
    return str(get_setting("SESSION_BACKEND", "streamlit")).lower()


def session_db_path() -> str:
    return str(get_setting("SESSION_DB", DEFAULT_SESSION_DB))
