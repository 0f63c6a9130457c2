"""Top-level transform: config string + table -> token table."""

from __future__ import annotations
from typing import Optional
import pyarrow as pa

from ..tokenizers.selector import select_tokenizer
from .assemble import DEFAULT_COLUMN
from .executors import ChunkExecutor
from .task import RowTokenizationTask


def transform(
    table: pa.Table,
    config_string: str,
    *,
    min_length: int = 0,
    to_lowercase: bool = False,
    timeout_s: float = 30.0,
    max_retries: int = 0,
    executor: Optional[ChunkExecutor] = None,
    rows_per_chunk: Optional[int] = None,
    column_name: str = DEFAULT_COLUMN,
) -> pa.Table:
    """Tokenize `table` with the strategy named by `config_string`.

    `config_string` is either a delimiter regex or `tokenize:elasticsearch:<url>[?analyzer=<name>]`.
    """
    tokenizer = select_tokenizer(
        config_string,
        min_length=min_length,
        to_lowercase=to_lowercase,
        timeout_s=timeout_s,
        max_retries=max_retries,
    )
    return RowTokenizationTask(tokenizer).transform(
        table, executor=executor, rows_per_chunk=rows_per_chunk, column_name=column_name
    )
