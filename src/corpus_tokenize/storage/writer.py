"""Token stream writers.

- parquet: the single-column token table as-is (nulls mark row ends), zstd compressed
- text:    one token per line, an empty line for each row marker; the sentence-per-block
           layout word-vector trainers read. Empty tokens and tokens containing a line break
           cannot be told apart from row markers in this layout, so they are rejected
           (tokenize with min_length >= 1 and a pattern that splits on newlines, or use parquet).
- manifest: JSON summary of a run
"""

from __future__ import annotations
from typing import Any, Dict
import json
import os
import pyarrow as pa
import pyarrow.compute as pc
import pyarrow.parquet as pq

from ..errors import ConfigError

FORMATS = ("parquet", "text")


def _count_unframeable(column: pa.ChunkedArray) -> int:
    bad = pc.or_(pc.equal(pc.utf8_length(column), 0), pc.match_substring_regex(column, r"[\r\n]"))
    return pc.sum(bad).as_py() or 0


def write_tokens(path: str, table: pa.Table, fmt: str = "parquet") -> str:
    if fmt not in FORMATS:
        raise ConfigError(f"Unknown output format: {fmt}. Available: {list(FORMATS)}")
    if fmt == "text":
        n_bad = _count_unframeable(table.column(0))
        if n_bad:
            raise ConfigError(
                f"text output cannot hold {n_bad} empty or multi-line tokens without breaking row framing; "
                f"set tokenizer.min_length >= 1 with a pattern that splits on line breaks, or use parquet"
            )
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    if fmt == "parquet":
        pq.write_table(table, path, compression="zstd")
        return path
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        for chunk in table.column(0).chunks:
            for value in chunk.to_pylist():
                f.write("\n" if value is None else value + "\n")
    return path


def write_manifest(path: str, manifest: Dict[str, Any]) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2, ensure_ascii=False)
