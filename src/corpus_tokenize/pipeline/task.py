"""Row tokenization task (the parallel engine).

Per chunk, for each row (ascending) and each column (declared order):
- null cells are skipped
- other cells are tokenized independently by the configured strategy (which applies min_length)
- surviving tokens are appended to the chunk's builder
then exactly one row marker (null) is appended, even for rows that produced no tokens.

Chunks are independent: `map_chunk` is a pure function of its batch and the read-only
tokenizer. `transform` fans the chunks out through a ChunkExecutor and assembles the
results in input chunk order. A failing chunk fails the whole transform and sets the
transform's cancel event, which stops chunks still running before their next row; nothing partial
is returned.
"""

from __future__ import annotations
import logging
import threading
import time
from typing import Any, Dict, List, Optional
import pyarrow as pa

from ..errors import ChunkCancelled, InvalidInputType
from ..tokenizers.base import TokenizerStrategy
from .assemble import DEFAULT_COLUMN, assemble
from .builder import TokenColumnBuilder
from .executors import ChunkExecutor, LocalExecutor

log = logging.getLogger("corpus_tokenize.task")


def is_string_type(t: pa.DataType) -> bool:
    return pa.types.is_string(t) or pa.types.is_large_string(t)


def validate_input(schema: pa.Schema) -> None:
    """Raise InvalidInputType for the first non-string column."""
    for f in schema:
        if not is_string_type(f.type):
            raise InvalidInputType(f.name, str(f.type))


class ChunkRunner:
    """Per-transform chunk function: `task.map_chunk` bound to the transform's cancel event.

    The event is process-local; a pickled runner (Ray) arrives without one and relies on
    Ray's own task cancellation instead.
    """

    def __init__(self, task: "RowTokenizationTask", cancel: Optional[threading.Event] = None):
        self.task = task
        self.cancel = cancel

    def __call__(self, batch: pa.RecordBatch) -> pa.Array:
        return self.task.map_chunk(batch, cancel=self.cancel)

    def __getstate__(self) -> Dict[str, Any]:
        return {"task": self.task, "cancel": None}


class RowTokenizationTask:
    def __init__(self, tokenizer: TokenizerStrategy):
        self.tokenizer = tokenizer

    def validate(self, table: pa.Table) -> None:
        """Raise InvalidInputType naming the first non-string column; runs before any chunk work."""
        validate_input(table.schema)

    def map_chunk(self, batch: pa.RecordBatch, cancel: Optional[threading.Event] = None) -> pa.Array:
        """Tokenize one chunk. Stops with ChunkCancelled before the next row once `cancel` is set."""
        builder = TokenColumnBuilder()
        columns = [c.to_pylist() for c in batch.columns]
        for row in range(batch.num_rows):
            if cancel is not None and cancel.is_set():
                raise ChunkCancelled(f"chunk cancelled at row {row} of {batch.num_rows}")
            for values in columns:
                value = values[row]
                if value is None:
                    continue
                builder.add_tokens(self.tokenizer.tokenize(value))
            builder.add_row_boundary()
        log.debug(f"chunk done rows={builder.rows} tokens={builder.tokens}")
        return builder.finish()

    def chunks(self, table: pa.Table, rows_per_chunk: Optional[int] = None) -> List[pa.RecordBatch]:
        if rows_per_chunk is None:
            return table.to_batches()
        if rows_per_chunk <= 0:
            raise ValueError(f"rows_per_chunk must be > 0, got {rows_per_chunk}")
        return table.combine_chunks().to_batches(max_chunksize=rows_per_chunk)

    def transform(
        self,
        table: pa.Table,
        *,
        executor: Optional[ChunkExecutor] = None,
        rows_per_chunk: Optional[int] = None,
        column_name: str = DEFAULT_COLUMN,
    ) -> pa.Table:
        """Tokenize every row of `table` into a single-column string table.

        Args:
            table: Input table; every column must be string typed. Each row is one sentence,
                possibly spread over several cells.
            executor: How chunks are run; defaults to a LocalExecutor.
            rows_per_chunk: Re-slice the input into chunks of this size (default: keep the
                table's own record batches).
            column_name: Name of the output column.

        Returns:
            Table with one `pa.string()` column of tokens, rows delimited by nulls.
        """
        self.validate(table)
        executor = executor or LocalExecutor()
        chunks = self.chunks(table, rows_per_chunk)
        t0 = time.time()
        log.info(
            f"tokenizing rows={table.num_rows} columns={table.num_columns} chunks={len(chunks)} "
            f"tokenizer={self.tokenizer!r} executor={executor.name}"
        )
        cancel = threading.Event()
        outputs = executor.map(ChunkRunner(self, cancel), chunks, cancel=cancel)
        result = assemble(outputs, column_name=column_name)
        log.info(
            f"tokenized rows={table.num_rows} entries={result.num_rows} "
            f"elapsed={time.time() - t0:.2f}s"
        )
        return result
