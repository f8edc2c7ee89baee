from __future__ import annotations

import sys
from pathlib import Path

import pytest

# The app is a flat set of modules at the repo root
_ROOT = str(Path(__file__).resolve().parents[1])
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)

import providers  # noqa: E402
import reader  # noqa: E402


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """Pin module config so a developer's environment doesn't leak into tests."""
    monkeypatch.setattr(reader, "READER_BASE_URL", "https://r.jina.ai/")
    monkeypatch.setattr(reader, "MAX_ARTICLE_CHARS", 15000)
    monkeypatch.setattr(providers, "OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(providers, "OPENAI_MODEL", "gpt-4o-mini")
    monkeypatch.setattr(providers, "GEMINI_API_KEY", "gemini-test")
    monkeypatch.setattr(providers, "GEMINI_MODEL", "gemini-1.5-flash")
    monkeypatch.setattr(providers, "GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")
    monkeypatch.setattr(
        providers, "PLACEHOLDER_API_KEYS", {"YOUR_OPENAI_API_KEY", "YOUR_GEMINI_API_KEY"}
    )
    yield


@pytest.fixture
def no_network(monkeypatch):
    """Fail loudly if anything tries a real HTTP call."""

    def _blocked(*args, **kwargs):
        raise AssertionError(f"unexpected HTTP call: {args} {kwargs}")

    monkeypatch.setattr(reader.requests, "get", _blocked)
    monkeypatch.setattr(reader.requests, "post", _blocked)
    yield
