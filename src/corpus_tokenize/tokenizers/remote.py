"""Remote analyzer tokenizer (Elasticsearch `_analyze`-style endpoint).

Configuration payload:
    <url>[?key=value[&key=value...]]     e.g. http://es:9200/_analyze?analyzer=standard

Only `analyzer` changes the request; other keys are kept on the config for reference.

Per non-missing cell:
    POST <url>
    Content-Type: application/json
    {"text": "<cell>", "analyzer": "<name>"}          (analyzer omitted when unset)
Response:
    {"tokens": [{"token": "...", "start_offset": 0, "end_offset": 3, "type": "<ALPHANUM>", "position": 0}, ...]}

Failures (I/O, timeout, non-2xx, unexpected JSON) raise RemoteTokenizationFailure and abort
the chunk being processed. Requests time out after `timeout_s`; `max_retries` > 0 enables
exponential backoff on connection errors and 429/5xx responses.
"""

from __future__ import annotations
import json
import logging
import threading
from typing import Any, Dict, List, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .base import StrategyKind, TokenizerConfig, TokenizerStrategy
from ..errors import ConfigError, RemoteTokenizationFailure

log = logging.getLogger("corpus_tokenize.remote")

RETRY_STATUS_FORCELIST = (429, 500, 502, 503, 504)


def parse_endpoint(payload: str) -> Tuple[str, Dict[str, str]]:
    """Split `<url>?k=v&k2=v2` into the bare url and its query params.

    A key without `=` maps to "". Values are taken verbatim (no percent-decoding).
    """
    url, sep, query = payload.partition("?")
    params: Dict[str, str] = {}
    if not sep:
        return url, params
    for item in query.split("&"):
        if not item:
            continue
        key, eq, value = item.partition("=")
        params[key if eq else item] = value
    return url, params


class RemoteAnalyzerTokenizer(TokenizerStrategy):
    kind = StrategyKind.REMOTE_ANALYZER

    def __init__(
        self,
        url: str,
        *,
        analyzer: Optional[str] = None,
        min_length: int = 0,
        timeout_s: float = 30.0,
        max_retries: int = 0,
        params: Optional[Dict[str, str]] = None,
    ):
        if not url:
            raise ConfigError("Remote analyzer tokenizer needs an endpoint url")
        if min_length < 0:
            raise ConfigError(f"min_length must be >= 0, got {min_length}")
        if timeout_s <= 0:
            raise ConfigError(f"timeout_s must be > 0, got {timeout_s}")
        if max_retries < 0:
            raise ConfigError(f"max_retries must be >= 0, got {max_retries}")
        self.url = url
        self.analyzer = analyzer or None
        self.min_length = min_length
        self.timeout_s = timeout_s
        self.max_retries = max_retries
        self.params = dict(params or {})
        self._local = threading.local()

    @classmethod
    def from_payload(cls, payload: str, **kwargs: Any) -> "RemoteAnalyzerTokenizer":
        url, params = parse_endpoint(payload)
        return cls(url, analyzer=params.get("analyzer"), params=params, **kwargs)

    @classmethod
    def from_config(cls, cfg: TokenizerConfig) -> "RemoteAnalyzerTokenizer":
        return cls(
            cfg.url or "",
            analyzer=cfg.analyzer,
            min_length=cfg.min_length,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            params=dict(cfg.params),
        )

    # Sessions are not thread-safe to share and cannot be pickled (Ray ships the tokenizer to workers).
    def __getstate__(self) -> Dict[str, Any]:
        state = self.__dict__.copy()
        state.pop("_local", None)
        return state

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self.__dict__.update(state)
        self._local = threading.local()

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            if self.max_retries > 0:
                retry = Retry(
                    total=self.max_retries,
                    backoff_factor=0.5,
                    status_forcelist=RETRY_STATUS_FORCELIST,
                    allowed_methods=frozenset({"POST"}),
                    raise_on_status=False,
                )
                adapter = HTTPAdapter(max_retries=retry)
                session.mount("http://", adapter)
                session.mount("https://", adapter)
            self._local.session = session
        return session

    def request_body(self, text: str) -> str:
        body: Dict[str, str] = {"text": text}
        if self.analyzer is not None:
            body["analyzer"] = self.analyzer
        return json.dumps(body, ensure_ascii=False)

    def tokenize(self, text: str) -> List[str]:
        try:
            resp = self._session().post(
                self.url,
                data=self.request_body(text).encode("utf-8"),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout_s,
            )
        except requests.RequestException as e:
            log.error(f"Analyzer request to {self.url} failed: {e}")
            raise RemoteTokenizationFailure(
                f"Analyzer request to {self.url} failed: {e}", url=self.url, text_length=len(text)
            ) from e

        if not 200 <= resp.status_code < 300:
            log.error(f"Analyzer {self.url} returned HTTP {resp.status_code}")
            raise RemoteTokenizationFailure(
                f"Analyzer {self.url} returned HTTP {resp.status_code}: {resp.text[:200]}",
                url=self.url,
                status_code=resp.status_code,
                text_length=len(text),
            )

        return self.filter_tokens(self._parse_tokens(resp, len(text)))

    def _response_failure(self, message: str, resp: requests.Response, text_length: int) -> RemoteTokenizationFailure:
        log.error(message)
        return RemoteTokenizationFailure(message, url=self.url, status_code=resp.status_code, text_length=text_length)

    def _parse_tokens(self, resp: requests.Response, text_length: int) -> List[str]:
        try:
            payload = resp.json()
        except ValueError as e:
            raise self._response_failure(f"Analyzer {self.url} returned invalid JSON: {e}", resp, text_length) from e

        tokens = payload.get("tokens") if isinstance(payload, dict) else None
        if not isinstance(tokens, list):
            raise self._response_failure(f"Analyzer {self.url} response has no 'tokens' array", resp, text_length)
        out: List[str] = []
        for i, t in enumerate(tokens):
            if not isinstance(t, dict) or not isinstance(t.get("token"), str):
                raise self._response_failure(
                    f"Analyzer {self.url} response token #{i} has no string 'token' field", resp, text_length
                )
            out.append(t["token"])
        return out

    def __repr__(self) -> str:
        return f"RemoteAnalyzerTokenizer(url={self.url!r}, analyzer={self.analyzer!r}, min_length={self.min_length})"

    class Builder:
        def __init__(self) -> None:
            self._url: Optional[str] = None
            self._min_length = 0
            self._timeout_s = 30.0
            self._max_retries = 0

        def set_url(self, url: str) -> "RemoteAnalyzerTokenizer.Builder":
            """Endpoint payload; may carry `?analyzer=<name>`."""
            self._url = url
            return self

        def set_min_length(self, min_length: int) -> "RemoteAnalyzerTokenizer.Builder":
            self._min_length = min_length
            return self

        def set_timeout(self, timeout_s: float) -> "RemoteAnalyzerTokenizer.Builder":
            self._timeout_s = timeout_s
            return self

        def set_max_retries(self, max_retries: int) -> "RemoteAnalyzerTokenizer.Builder":
            self._max_retries = max_retries
            return self

        def create(self) -> "RemoteAnalyzerTokenizer":
            if not self._url:
                raise ConfigError("RemoteAnalyzerTokenizer.Builder: url is required")
            return RemoteAnalyzerTokenizer.from_payload(
                self._url,
                min_length=self._min_length,
                timeout_s=self._timeout_s,
                max_retries=self._max_retries,
            )
