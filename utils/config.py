"""
Global settings for the Resource Allocation Graph simulator.

Every value can be overridden with an RAG_* environment variable; command-line
flags in simulator.py take precedence over both.
"""

import os


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got {value!r})")


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


API_HOST = os.environ.get("RAG_API_HOST", "127.0.0.1")
API_PORT = _env_int("RAG_API_PORT", 5000)  # Flask default
EVENT_HISTORY = _env_int("RAG_EVENT_HISTORY", 100)  # events kept by the API's log
LOG_ENDPOINT_LIMIT = _env_int("RAG_LOG_LIMIT", 50)  # events returned by GET /log
VERBOSE = _env_bool("RAG_VERBOSE", False)
