"""Shared fixtures: local import path, fake analyzer service, logging cleanup."""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest
import requests


def _ensure_src_on_path() -> None:
    src = Path(__file__).resolve().parents[1] / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))


_ensure_src_on_path()


def make_response(status_code: int = 200, body: Any = None, raw: Optional[bytes] = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = raw if raw is not None else json.dumps(body).encode("utf-8")
    resp.encoding = "utf-8"
    return resp


def es_tokens(words: List[str]) -> Dict[str, Any]:
    out = []
    offset = 0
    for i, w in enumerate(words):
        out.append({"token": w, "start_offset": offset, "end_offset": offset + len(w), "type": "<ALPHANUM>", "position": i})
        offset += len(w) + 1
    return {"tokens": out}


class FakeAnalyzer:
    """Stands in for `requests.Session.post`; records every call."""

    def __init__(self, handler: Optional[Callable[[Dict[str, Any]], requests.Response]] = None):
        self.calls: List[Dict[str, Any]] = []
        self.handler = handler or self.whitespace

    @staticmethod
    def whitespace(body: Dict[str, Any]) -> requests.Response:
        return make_response(200, es_tokens(body["text"].lower().split()))

    # patched onto the class as an instance, so it is not bound and gets no session argument
    def __call__(self, url, data=None, headers=None, timeout=None, **kwargs):
        body = json.loads(data.decode("utf-8") if isinstance(data, bytes) else data)
        self.calls.append({"url": url, "body": body, "headers": headers, "timeout": timeout})
        return self.handler(body)


@pytest.fixture
def fake_analyzer(monkeypatch) -> FakeAnalyzer:
    fake = FakeAnalyzer()
    monkeypatch.setattr(requests.Session, "post", fake)
    return fake


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
