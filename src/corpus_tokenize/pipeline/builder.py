"""Per-chunk output builder.

Collects the flat token stream of one chunk. A row boundary is stored as a null, which is
Arrow's native missing-value encoding, so the finished column is a plain `pa.string()` array:

    ["the", "cat", null, null, "dog", null]    # 3 rows, the middle one produced no tokens

Builders are private to the worker that fills them until the chunk is finished.
"""

from __future__ import annotations
from typing import Iterable, List, Optional
import pyarrow as pa


class TokenColumnBuilder:
    def __init__(self) -> None:
        self._values: List[Optional[str]] = []
        self.tokens = 0
        self.rows = 0

    def add_token(self, token: str) -> None:
        self._values.append(token)
        self.tokens += 1

    def add_tokens(self, tokens: Iterable[str]) -> None:
        for t in tokens:
            self.add_token(t)

    def add_row_boundary(self) -> None:
        self._values.append(None)
        self.rows += 1

    def __len__(self) -> int:
        return len(self._values)

    def finish(self) -> pa.Array:
        return pa.array(self._values, type=pa.string())
