"""
Pytest configuration: isolate settings and taxonomy singletons per test.
"""
import pytest

from core.config import reset_settings
from core.taxonomy import reset_taxonomy

_ENV_VARS = [
    "APP_NAME",
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "TAXONOMY_PATH",
    "RAW_CONTENT_SEPARATOR",
    "SKIP_NOISE_LINES",
    "MAX_UPLOAD_BYTES",
]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Clear configuration env vars and reset cached singletons."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    reset_taxonomy()
    yield
    reset_settings()
    reset_taxonomy()
