"""Tokenizer strategy interface.

A strategy turns one cell value into an ordered list of token strings.
Strategies are shared read-only by every chunk worker, so `tokenize` must not mutate
instance state (per-thread resources such as HTTP sessions are fine).

Minimal contract:
- tokenize(text) -> list[str]              (already filtered by min_length)
- optional: tokenize_batch(list[str]) -> list[list[str]] for services that can batch
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple


class StrategyKind(str, Enum):
    PATTERN = "pattern"
    REMOTE_ANALYZER = "remote_analyzer"


@dataclass(frozen=True)
class TokenizerConfig:
    """Immutable tokenizer parameters, built once per transform call."""
    kind: StrategyKind
    regex: Optional[str] = None           # pattern only
    url: Optional[str] = None             # remote only
    analyzer: Optional[str] = None        # remote only
    params: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)  # remote query params, as given
    min_length: int = 0
    to_lowercase: bool = False            # pattern only
    timeout_s: float = 30.0               # remote only
    max_retries: int = 0                  # remote only


class TokenizerStrategy(ABC):
    """Base tokenizer strategy."""
    kind: StrategyKind
    min_length: int = 0

    @abstractmethod
    def tokenize(self, text: str) -> List[str]:
        """Split one cell value into tokens."""
        raise NotImplementedError

    def tokenize_batch(self, texts: Sequence[str]) -> List[List[str]]:
        """Optional fast path; default falls back to single tokenize.

        The row engine does not call this: it tokenizes cell by cell so row framing stays
        exact. It is the extension point for a service that can return per-text results.
        """
        return [self.tokenize(t) for t in texts]

    def filter_tokens(self, tokens: Iterable[str]) -> List[str]:
        return [t for t in tokens if len(t) >= self.min_length]
