"""
Fakes for the HTTP and OpenAI collaborators.

FakeResponse stands in for requests.Response; FakeOpenAIClient mimics the
`client.chat.completions.create(...)` surface of the openai SDK.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import SimpleNamespace


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", json_data=None):
        self.status_code = status_code
        if json_data is not None:
            text = json.dumps(json_data)
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        return json.loads(self.text)


@dataclass
class RecordedCall:
    url: str
    kwargs: dict


@dataclass
class FakeHttp:
    """Returns queued responses in order and records every call."""
    responses: list = field(default_factory=list)
    calls: list[RecordedCall] = field(default_factory=list)

    def __call__(self, url, **kwargs):
        self.calls.append(RecordedCall(url=url, kwargs=kwargs))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def gemini_body(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


def openai_completion(content):
    if content is None:
        return SimpleNamespace(choices=[])
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeOpenAIClient:
    def __init__(self, result=None, error: Exception | None = None):
        self.calls: list[dict] = []
        self._result = result
        self._error = error
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        return self._result


class RecordingSummarizer:
    """Summarize callable for pipeline tests; can snapshot the session it runs inside."""

    def __init__(self, result: str = "• point one\n• point two", error: Exception | None = None,
                 session=None):
        self.result = result
        self.error = error
        self.session = session
        self.calls: list[tuple[str, str]] = []
        self.seen: list[dict] = []

    def __call__(self, text, api_key, timeout=None):
        self.calls.append((text, api_key))
        if self.session is not None:
            self.seen.append(self.session.to_dict())
        if self.error is not None:
            raise self.error
        return self.result


class RecordingRetriever:
    def __init__(self, body: str = "article body", error: Exception | None = None, session=None):
        self.body = body
        self.error = error
        self.session = session
        self.calls: list[str] = []
        self.seen: list[dict] = []

    def __call__(self, url, timeout=None):
        self.calls.append(url)
        if self.session is not None:
            self.seen.append(self.session.to_dict())
        if self.error is not None:
            raise self.error
        return self.body
