"""Strategy registry.

Maps the `<tag>` of a `tokenize:<tag>:<payload>` config string to a factory that parses the
payload into a TokenizerConfig. Unregistered tags are not errors: the selector falls back to
regex mode.

For now, we keep a simple in-process registry with `elasticsearch` pre-registered.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional

from .base import StrategyKind, TokenizerConfig
from .remote import parse_endpoint

StrategyFactory = Callable[..., TokenizerConfig]


def _remote_analyzer_config(
    payload: str,
    *,
    min_length: int = 0,
    timeout_s: float = 30.0,
    max_retries: int = 0,
    **_: Any,
) -> TokenizerConfig:
    url, params = parse_endpoint(payload)
    return TokenizerConfig(
        kind=StrategyKind.REMOTE_ANALYZER,
        url=url,
        analyzer=params.get("analyzer") or None,
        params=tuple(params.items()),
        min_length=min_length,
        timeout_s=timeout_s,
        max_retries=max_retries,
    )


_STRATEGIES: Dict[str, StrategyFactory] = {
    "elasticsearch": _remote_analyzer_config,
}


def register_strategy(tag: str, factory: StrategyFactory) -> None:
    if tag in _STRATEGIES:
        raise ValueError(f"Tokenizer strategy '{tag}' already registered")
    _STRATEGIES[tag] = factory


def unregister_strategy(tag: str) -> None:
    _STRATEGIES.pop(tag, None)


def get_strategy_factory(tag: str) -> Optional[StrategyFactory]:
    return _STRATEGIES.get(tag)


def list_strategies() -> List[str]:
    return list(_STRATEGIES.keys())
