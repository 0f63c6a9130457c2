"""Output assembly and stream helpers.

- assemble: per-chunk token arrays (in input chunk order) -> single-column table
- split_rows: recover per-row token lists from the flat stream (null = end of row)
- rechunk: re-slice a table into chunks of a fixed row count
"""

from __future__ import annotations
from typing import List, Sequence, Union
import pyarrow as pa

DEFAULT_COLUMN = "tokens"


def assemble(chunk_outputs: Sequence[pa.Array], column_name: str = DEFAULT_COLUMN) -> pa.Table:
    """Concatenate chunk outputs in the given order. Chunk layout is kept one-to-one."""
    column = pa.chunked_array(list(chunk_outputs), type=pa.string())
    return pa.Table.from_arrays([column], names=[column_name])


def split_rows(tokens: Union[pa.Table, pa.ChunkedArray, pa.Array]) -> List[List[str]]:
    if isinstance(tokens, pa.Table):
        if tokens.num_columns != 1:
            raise ValueError(f"Expected a single-column token table, got {tokens.num_columns} columns")
        tokens = tokens.column(0)
    rows: List[List[str]] = []
    current: List[str] = []
    for value in tokens.to_pylist():
        if value is None:
            rows.append(current)
            current = []
        else:
            current.append(value)
    if current:
        raise ValueError("Token stream does not end with a row marker")
    return rows


def rechunk(table: pa.Table, rows_per_chunk: int) -> pa.Table:
    if rows_per_chunk <= 0:
        raise ValueError(f"rows_per_chunk must be > 0, got {rows_per_chunk}")
    batches = table.combine_chunks().to_batches(max_chunksize=rows_per_chunk)
    return pa.Table.from_batches(batches, schema=table.schema)
