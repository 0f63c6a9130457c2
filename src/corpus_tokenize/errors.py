"""Exception hierarchy.

- InvalidInputType: a non-string column was handed to the tokenizer (checked before any work)
- RemoteTokenizationFailure: the analyzer service failed (network, status, or response shape)
- ConfigError: job config or tokenizer options are unusable
- ChunkCancelled: internal; a chunk stopped because a sibling chunk failed (never surfaces to callers)

An unrecognized `tokenize:<tag>:<payload>` string is *not* an error; it falls back to regex mode.
Errors raised inside chunk workers may cross process boundaries (Ray), so they pickle with
their attributes.
"""

from __future__ import annotations
from typing import Optional

__all__ = [
    "CorpusTokenizeError",
    "InvalidInputType",
    "RemoteTokenizationFailure",
    "ConfigError",
    "ChunkCancelled",
]


class CorpusTokenizeError(RuntimeError):
    """Base class for all errors raised by corpus_tokenize."""


class InvalidInputType(CorpusTokenizeError, TypeError):
    def __init__(self, column: str, actual_type: str):
        super().__init__(
            f"tokenize() requires all input columns to be of a String type. "
            f"Column '{column}' has type {actual_type}. Please convert column to a string column first."
        )
        self.column = column
        self.actual_type = actual_type

    def __reduce__(self):
        return (self.__class__, (self.column, self.actual_type))


class RemoteTokenizationFailure(CorpusTokenizeError):
    """The remote analyzer could not tokenize a cell. Never retried by the engine."""

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None, text_length: int = 0):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.text_length = text_length

    def __reduce__(self):
        return (self.__class__, (str(self), self.url, self.status_code, self.text_length))


class ConfigError(CorpusTokenizeError, ValueError):
    """Invalid job configuration or tokenizer option."""


class ChunkCancelled(CorpusTokenizeError):
    """A running chunk stopped early because another chunk of the same transform failed."""
