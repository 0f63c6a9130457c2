"""Input readers.

Loads the string table to tokenize. Supports multiple input forms:
- Single file: "path/to/file.parquet"
- Multiple files: ["a.parquet", "b.parquet"]
- Directory: "path/to/dir/" (all files with the format's extension)
- Glob pattern: "path/to/*.jsonl" or "path/to/**/*.jsonl"

Formats:
- parquet: column types are kept as stored (the tokenizer rejects non-string columns)
- jsonl:   pyarrow's JSON reader; inferred types are kept, all-null columns become string
- csv:     every column is read as string, cell text kept verbatim (CSV has no types of its own)

Each file keeps its own record batches, so file boundaries are also chunk boundaries.
"""

from __future__ import annotations
import glob
import logging
import os
from typing import List, Optional, Sequence, Union

import pyarrow as pa
import pyarrow.csv as pacsv
import pyarrow.json as pajson
import pyarrow.parquet as pq

from ..errors import ConfigError

log = logging.getLogger("corpus_tokenize.sources")

EXTENSIONS = {
    "parquet": (".parquet",),
    "jsonl": (".jsonl", ".json"),
    "csv": (".csv",),
}


def resolve_files(dataset: Union[str, Sequence[str]], fmt: str = "parquet") -> List[str]:
    """Resolve a dataset spec to a sorted list of existing file paths."""
    exts = EXTENSIONS.get(fmt)
    if exts is None:
        raise ConfigError(f"Unknown input format: {fmt}. Available: {list(EXTENSIONS)}")

    if not isinstance(dataset, str):
        files: List[str] = []
        for item in dataset:
            files.extend(resolve_files(item, fmt))
        return files

    if any(ch in dataset for ch in "*?["):
        matched = glob.glob(dataset, recursive=True)
        return sorted(f for f in matched if os.path.isfile(f) and f.endswith(exts))
    if os.path.isdir(dataset):
        found = []
        for root, _, names in os.walk(dataset):
            found.extend(os.path.join(root, n) for n in names if n.endswith(exts))
        return sorted(found)
    if os.path.isfile(dataset):
        return [dataset]
    raise FileNotFoundError(f"Input not found: {dataset}")


def _null_columns_to_string(table: pa.Table) -> pa.Table:
    for i, f in enumerate(table.schema):
        if pa.types.is_null(f.type):
            table = table.set_column(i, f.name, table.column(i).cast(pa.string()))
    return table


def _csv_header(path: str) -> List[str]:
    reader = pacsv.open_csv(path)
    try:
        return reader.schema.names
    finally:
        reader.close()


def _read_csv_as_strings(path: str) -> pa.Table:
    # declare every column as string up front so values like "007" or "NA" are kept verbatim
    convert = pacsv.ConvertOptions(column_types={name: pa.string() for name in _csv_header(path)})
    return pacsv.read_csv(path, convert_options=convert)


def _read_one(path: str, fmt: str, columns: Optional[List[str]]) -> pa.Table:
    if fmt == "parquet":
        return pq.read_table(path, columns=columns)
    if fmt == "jsonl":
        table = _null_columns_to_string(pajson.read_json(path))
    else:
        table = _read_csv_as_strings(path)
    if columns is not None:
        missing = [c for c in columns if c not in table.column_names]
        if missing:
            raise ConfigError(f"{path}: columns not found: {missing}. Available: {table.column_names}")
        table = table.select(columns)
    return table


def read_table(
    dataset: Union[str, Sequence[str]],
    fmt: str = "parquet",
    columns: Optional[List[str]] = None,
) -> pa.Table:
    files = resolve_files(dataset, fmt)
    if not files:
        raise FileNotFoundError(f"No {fmt} files matched: {dataset}")
    tables = []
    for path in files:
        t = _read_one(path, fmt, columns)
        log.info(f"read {path} rows={t.num_rows} columns={t.column_names}")
        tables.append(t)
    if len(tables) == 1:
        return tables[0]
    return pa.concat_tables(tables, promote_options="default")
