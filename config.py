import os
from typing import Optional

import streamlit as st
import toml

SECRETS_FILE = ".streamlit/secrets.toml"

DEFAULT_API_URL = "http://localhost:5000/api"
DEFAULT_STORAGE_DB = "local_storage.db"
DEFAULT_REQUEST_TIMEOUT = 10.0


def _file_secret(key) -> Optional[str]:
    # Headless runs (scripts, tests) have no st.secrets; read the same file directly.
    if not os.path.exists(SECRETS_FILE):
        return None
    try:
        return toml.load(SECRETS_FILE).get(key)
    except (toml.TomlDecodeError, OSError):
        return None


def get_secret(key):
    try:
        value = st.secrets.get(key)
    except FileNotFoundError:
        value = None
    if value is None:
        value = _file_secret(key)
    if value is None:
        value = os.getenv(key)
    return value


def get_api_url() -> str:
    return get_secret("POSTBOARD_API_URL") or DEFAULT_API_URL


def get_storage_db() -> str:
    return get_secret("POSTBOARD_STORAGE_DB") or DEFAULT_STORAGE_DB


def get_request_timeout() -> float:
    raw = get_secret("POSTBOARD_REQUEST_TIMEOUT")
    try:
        return float(raw) if raw is not None else DEFAULT_REQUEST_TIMEOUT
    except (TypeError, ValueError):
        return DEFAULT_REQUEST_TIMEOUT
