"""Strategy selector: configuration string -> tokenizer.

Grammar:
- `tokenize:<tag>:<payload>` with a registered tag -> that strategy (e.g. `elasticsearch`)
- anything else, including `tokenize:<unknown>:<payload>` -> PatternTokenizer using the
  *whole* string as the delimiter regex

Segments are split on ':' with empty segments collapsed and at most three segments kept,
so the payload keeps its own colons (`http://host:9200/...`).
Parsing is pure; nothing is contacted until a tokenizer is asked to tokenize.
"""

from __future__ import annotations
import logging
from typing import Any, List

from .base import StrategyKind, TokenizerConfig, TokenizerStrategy
from .pattern import PatternTokenizer
from .registry import get_strategy_factory
from .remote import RemoteAnalyzerTokenizer

log = logging.getLogger("corpus_tokenize.selector")

PREFIX = "tokenize"


def split_segments(value: str, sep: str = ":", max_segments: int = 3) -> List[str]:
    segments: List[str] = []
    rest = value
    while rest:
        rest = rest.lstrip(sep)
        if not rest:
            break
        if len(segments) == max_segments - 1:
            segments.append(rest)
            break
        head, _, rest = rest.partition(sep)
        segments.append(head)
    return segments


def parse_config(
    config_string: str,
    *,
    min_length: int = 0,
    to_lowercase: bool = False,
    timeout_s: float = 30.0,
    max_retries: int = 0,
) -> TokenizerConfig:
    if config_string.startswith(PREFIX + ":"):
        segments = split_segments(config_string)
        if len(segments) == 3:
            factory = get_strategy_factory(segments[1])
            if factory is not None:
                return factory(
                    segments[2],
                    min_length=min_length,
                    to_lowercase=to_lowercase,
                    timeout_s=timeout_s,
                    max_retries=max_retries,
                )
        log.debug(f"Unrecognized tokenizer config {config_string!r}; using it as a regex")
    return TokenizerConfig(
        kind=StrategyKind.PATTERN,
        regex=config_string,
        min_length=min_length,
        to_lowercase=to_lowercase,
    )


def build_tokenizer(cfg: TokenizerConfig) -> TokenizerStrategy:
    if cfg.kind == StrategyKind.REMOTE_ANALYZER:
        return RemoteAnalyzerTokenizer.from_config(cfg)
    return PatternTokenizer.from_config(cfg)


def select_tokenizer(config_string: str, **opts: Any) -> TokenizerStrategy:
    """Parse `config_string` (see module docstring) and build the tokenizer it names."""
    return build_tokenizer(parse_config(config_string, **opts))
