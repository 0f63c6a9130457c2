"""Regex tokenizer.

Splits every cell on a delimiter pattern, the way `String.split` does on the JVM
(the tokenizer configs we receive were written against that behavior):
- a zero-width match at position 0 never yields a leading empty piece
- trailing empty pieces are dropped
- capture groups in the pattern are not emitted as pieces
- a cell with no match is returned whole
- `min_length` compares Python string length (code points), whereas the JVM counted UTF-16
  units; a character outside the BMP (most emoji) counts 1 here and counted 2 there

Pieces are lowercased *after* splitting (so casing never changes where the pattern matches),
then filtered by `min_length`. With the default `min_length=0` empty pieces survive.

Example:
    tok = (PatternTokenizer.Builder()
           .set_regex("[,;]")
           .set_min_length(2)
           .set_to_lowercase(True)
           .create())
    tok.tokenize("Foo;b,,Bar")  # -> ["foo", "bar"]
"""

from __future__ import annotations
import re
from typing import List, Optional, Pattern

from .base import StrategyKind, TokenizerConfig, TokenizerStrategy
from ..errors import ConfigError


def java_split(pattern: Pattern[str], text: str) -> List[str]:
    pieces: List[str] = []
    index = 0
    for m in pattern.finditer(text):
        if m.end() == 0:
            continue
        pieces.append(text[index:m.start()])
        index = m.end()
    if index == 0:
        return [text]
    pieces.append(text[index:])
    while pieces and pieces[-1] == "":
        pieces.pop()
    return pieces


def compile_regex(regex: str) -> Pattern[str]:
    try:
        return re.compile(regex)
    except re.error as e:
        raise ConfigError(f"Invalid tokenizer regex {regex!r}: {e}") from e


class PatternTokenizer(TokenizerStrategy):
    kind = StrategyKind.PATTERN

    def __init__(self, regex: str, min_length: int = 0, to_lowercase: bool = False):
        if min_length < 0:
            raise ConfigError(f"min_length must be >= 0, got {min_length}")
        self.regex = regex
        self.min_length = min_length
        self.to_lowercase = to_lowercase
        self._pattern = compile_regex(regex)

    @classmethod
    def from_config(cls, cfg: TokenizerConfig) -> "PatternTokenizer":
        return cls(cfg.regex or "", min_length=cfg.min_length, to_lowercase=cfg.to_lowercase)

    def tokenize(self, text: str) -> List[str]:
        pieces = java_split(self._pattern, text)
        if self.to_lowercase:
            pieces = [p.lower() for p in pieces]
        return self.filter_tokens(pieces)

    def __repr__(self) -> str:
        return (f"PatternTokenizer(regex={self.regex!r}, min_length={self.min_length}, "
                f"to_lowercase={self.to_lowercase})")

    class Builder:
        def __init__(self) -> None:
            self._regex: Optional[str] = None
            self._min_length = 0
            self._to_lowercase = False

        def set_regex(self, regex: str) -> "PatternTokenizer.Builder":
            self._regex = regex
            return self

        def set_min_length(self, min_length: int) -> "PatternTokenizer.Builder":
            self._min_length = min_length
            return self

        def set_to_lowercase(self, to_lowercase: bool) -> "PatternTokenizer.Builder":
            self._to_lowercase = to_lowercase
            return self

        def create(self) -> "PatternTokenizer":
            if self._regex is None:
                raise ConfigError("PatternTokenizer.Builder: regex is required")
            return PatternTokenizer(self._regex, self._min_length, self._to_lowercase)
