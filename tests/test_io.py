import json
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from corpus_tokenize import InvalidInputType, split_rows, transform
from corpus_tokenize.errors import ConfigError
from corpus_tokenize.sources.readers import read_table, resolve_files
from corpus_tokenize.storage.writer import write_manifest, write_tokens


def _write_jsonl(path: Path, rows) -> None:
    path.write_text("\n".join(json.dumps(r) for r in rows) + "\n", encoding="utf-8")


def test_read_parquet_with_column_subset(tmp_path: Path) -> None:
    pq.write_table(pa.table({"a": ["x"], "b": ["y"], "c": ["z"]}), tmp_path / "in.parquet")
    table = read_table(str(tmp_path / "in.parquet"), "parquet", ["c", "a"])
    assert table.column_names == ["c", "a"]


def test_read_parquet_directory_keeps_file_chunks(tmp_path: Path) -> None:
    pq.write_table(pa.table({"t": ["a", "b"]}), tmp_path / "part-0.parquet")
    pq.write_table(pa.table({"t": ["c"]}), tmp_path / "part-1.parquet")
    table = read_table(str(tmp_path), "parquet")
    assert table.column("t").to_pylist() == ["a", "b", "c"]
    assert len(table.to_batches()) == 2


def test_read_jsonl_all_null_column_becomes_string(tmp_path: Path) -> None:
    path = tmp_path / "in.jsonl"
    _write_jsonl(path, [{"text": "a b", "extra": None}, {"text": "c", "extra": None}])
    table = read_table(str(path), "jsonl")
    assert table.schema.field("extra").type == pa.string()
    assert transform(table, " ").column(0).to_pylist() == ["a", "b", None, "c", None]


def test_read_jsonl_numeric_column_is_rejected_by_transform(tmp_path: Path) -> None:
    path = tmp_path / "in.jsonl"
    _write_jsonl(path, [{"text": "a", "n": 1}])
    table = read_table(str(path), "jsonl")
    with pytest.raises(InvalidInputType):
        transform(table, " ")


def test_read_jsonl_missing_column(tmp_path: Path) -> None:
    path = tmp_path / "in.jsonl"
    _write_jsonl(path, [{"text": "a"}])
    with pytest.raises(ConfigError):
        read_table(str(path), "jsonl", ["body"])


def test_read_csv_as_strings(tmp_path: Path) -> None:
    path = tmp_path / "in.csv"
    path.write_text("id,text\n1,hello world\n2,bye\n", encoding="utf-8")
    table = read_table(str(path), "csv")
    assert all(f.type == pa.string() for f in table.schema)
    assert table.column("id").to_pylist() == ["1", "2"]


def test_read_csv_keeps_cell_text_verbatim(tmp_path: Path) -> None:
    path = tmp_path / "in.csv"
    path.write_text("zip,score,note\n007,1.50,NA\n010,2e3,true\n", encoding="utf-8")
    table = read_table(str(path), "csv")
    assert table.column("zip").to_pylist() == ["007", "010"]
    assert table.column("score").to_pylist() == ["1.50", "2e3"]
    assert table.column("note").to_pylist() == ["NA", "true"]
    assert split_rows(transform(table, ",")) == [["007", "1.50", "NA"], ["010", "2e3", "true"]]


def test_resolve_files_glob_and_list(tmp_path: Path) -> None:
    for name in ("b.jsonl", "a.jsonl", "skip.txt"):
        (tmp_path / name).write_text("{}\n", encoding="utf-8")
    assert resolve_files(str(tmp_path / "*.jsonl"), "jsonl") == [str(tmp_path / "a.jsonl"), str(tmp_path / "b.jsonl")]
    assert resolve_files([str(tmp_path / "b.jsonl")], "jsonl") == [str(tmp_path / "b.jsonl")]


def test_resolve_files_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        resolve_files(str(tmp_path / "nope.parquet"))
    with pytest.raises(ConfigError):
        resolve_files(str(tmp_path), "xml")


def test_write_tokens_parquet_roundtrip_keeps_markers(tmp_path: Path) -> None:
    tokens = pa.table({"tokens": pa.array(["a", None, "b", None], pa.string())})
    path = write_tokens(str(tmp_path / "out" / "tokens.parquet"), tokens)
    assert pq.read_table(path).column("tokens").to_pylist() == ["a", None, "b", None]


def test_write_tokens_text(tmp_path: Path) -> None:
    tokens = pa.table({"tokens": pa.array(["a", "b", None, None, "c", None], pa.string())})
    path = write_tokens(str(tmp_path / "tokens.txt"), tokens, "text")
    assert Path(path).read_text(encoding="utf-8") == "a\nb\n\n\nc\n\n"


@pytest.mark.parametrize("rows", [["a,,b"], ["x y\nz"], ["one\r\ntwo"]])
def test_write_tokens_text_rejects_unframeable_tokens(tmp_path: Path, rows) -> None:
    tokens = transform(pa.table({"t": rows}), ",")
    path = tmp_path / "tokens.txt"
    with pytest.raises(ConfigError, match="text output"):
        write_tokens(str(path), tokens, "text")
    assert not path.exists()


def test_write_tokens_text_rows_read_back(tmp_path: Path) -> None:
    rows = ["a,,b", "x y\nz", None, "solo"]
    tokens = transform(pa.table({"t": rows}), r"[,\s]+", min_length=1)
    path = write_tokens(str(tmp_path / "tokens.txt"), tokens, "text")
    blocks = Path(path).read_text(encoding="utf-8").split("\n")[:-1]
    read_back, current = [], []
    for line in blocks:
        if line:
            current.append(line)
        else:
            read_back.append(current)
            current = []
    assert read_back == split_rows(tokens) == [["a", "b"], ["x", "y", "z"], [], ["solo"]]


def test_write_tokens_unknown_format(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        write_tokens(str(tmp_path / "x"), pa.table({"tokens": pa.array([], pa.string())}), "avro")


def test_write_manifest(tmp_path: Path) -> None:
    path = tmp_path / "manifests" / "r.json"
    write_manifest(str(path), {"rows": 3})
    assert json.loads(path.read_text(encoding="utf-8")) == {"rows": 3}
