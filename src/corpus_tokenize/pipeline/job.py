"""Job runner: YAML config -> tokens file + manifest.

Steps:
1. read the input table (sources.readers)
2. select the tokenizer from `tokenizer.config`
3. run the row tokenization task on the configured executor
4. write tokens (parquet or text) and `manifests/<run_id>.json`

This is the entrypoint used by `corpus-tokenize run`.
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import logging
import os
import time

import pyarrow.compute as pc

from ..errors import ConfigError
from ..run_id import resolve_out_dir, resolve_run_id
from ..sources.readers import read_table
from ..storage.writer import write_manifest, write_tokens
from ..tokenizers.selector import parse_config, build_tokenizer
from .assemble import DEFAULT_COLUMN
from .executors import make_executor
from .task import RowTokenizationTask

log = logging.getLogger("corpus_tokenize.job")


def run_job(cfg: Dict[str, Any], ray_cfg: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    run = cfg.setdefault("run", {})
    run_id = run.get("run_id") or resolve_run_id(cfg)
    out_dir = resolve_out_dir(cfg, run_id)

    in_cfg = cfg.get("input") or {}
    if not in_cfg.get("path"):
        raise ConfigError("input.path is required")
    tok_cfg = cfg.get("tokenizer") or {}
    if "config" not in tok_cfg:
        raise ConfigError("tokenizer.config is required (a regex or tokenize:elasticsearch:<url>)")
    exec_cfg = cfg.get("execution") or {}
    out_cfg = cfg.get("output") or {}

    t0 = time.time()
    table = read_table(in_cfg["path"], in_cfg.get("format", "parquet"), in_cfg.get("columns"))

    tcfg = parse_config(
        str(tok_cfg["config"]),
        min_length=int(tok_cfg.get("min_length", 0)),
        to_lowercase=bool(tok_cfg.get("to_lowercase", False)),
        timeout_s=float(tok_cfg.get("timeout_s", 30.0)),
        max_retries=int(tok_cfg.get("max_retries", 0)),
    )
    tokenizer = build_tokenizer(tcfg)
    executor = make_executor(exec_cfg, ray_cfg)
    rows_per_chunk = exec_cfg.get("rows_per_chunk")

    column_name = out_cfg.get("column", DEFAULT_COLUMN)
    tokens = RowTokenizationTask(tokenizer).transform(
        table,
        executor=executor,
        rows_per_chunk=int(rows_per_chunk) if rows_per_chunk else None,
        column_name=column_name,
    )

    out_fmt = out_cfg.get("format", "parquet")
    default_name = "tokens.parquet" if out_fmt == "parquet" else "tokens.txt"
    out_path = os.path.join(out_dir, out_cfg.get("path", default_name))
    write_tokens(out_path, tokens, out_fmt)

    markers = tokens.column(0).null_count
    manifest = {
        "run_id": run_id,
        "config_path": os.environ.get("CORPUS_TOKENIZE_CONFIG_PATH"),
        "input": in_cfg["path"],
        "columns": table.column_names,
        "rows": table.num_rows,
        "row_markers": markers,
        "tokens": tokens.num_rows - markers,
        "distinct_tokens": pc.count_distinct(tokens.column(0)).as_py(),
        "chunks": tokens.column(0).num_chunks,
        "strategy": tcfg.kind.value,
        "executor": executor.name,
        "elapsed_s": round(time.time() - t0, 3),
        "outputs": {"tokens": out_path},
    }
    manifest_path = os.path.join(out_dir, "manifests", f"{run_id}.json")
    write_manifest(manifest_path, manifest)
    manifest["outputs"]["manifest"] = manifest_path
    log.info(
        f"run {run_id}: rows={manifest['rows']} tokens={manifest['tokens']} "
        f"chunks={manifest['chunks']} -> {out_path}"
    )
    return manifest
