"""CLI entrypoint.

Commands:
- `corpus-tokenize run --config configs/job.yaml [--ray-config configs/ray.yaml]`
- `corpus-tokenize tokenize-text --tokenizer "<config>" [--min-length N] [--lowercase] TEXT...`

Execution modes (config: execution.mode):
- local: thread pool in this process
- ray: one Ray task per chunk (needs the `ray` extra)
"""

from __future__ import annotations
import argparse
import json
import os
from typing import List, Optional

import yaml

from .errors import ConfigError
from .logging_ import setup_logging
from .pipeline.job import run_job
from .run_id import resolve_out_dir, resolve_run_id
from .tokenizers.selector import select_tokenizer


def _load_yaml(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    return data


def main(argv: Optional[List[str]] = None) -> None:
    p = argparse.ArgumentParser(prog="corpus-tokenize")
    sub = p.add_subparsers(dest="cmd", required=True)

    pr = sub.add_parser("run", help="Tokenize a dataset described by a job config")
    pr.add_argument("--config", required=True)
    pr.add_argument("--ray-config", default=None)
    pr.add_argument("--log-level", default="INFO")

    pt = sub.add_parser("tokenize-text", help="Tokenize strings given on the command line (one row each)")
    pt.add_argument("--tokenizer", required=True, help="Regex, or tokenize:elasticsearch:<url>[?analyzer=<name>]")
    pt.add_argument("--min-length", type=int, default=0)
    pt.add_argument("--lowercase", action="store_true")
    pt.add_argument("text", nargs="+")

    args = p.parse_args(argv)

    if args.cmd == "tokenize-text":
        tok = select_tokenizer(args.tokenizer, min_length=args.min_length, to_lowercase=args.lowercase)
        for t in args.text:
            print(json.dumps(tok.tokenize(t), ensure_ascii=False))
        return

    cfg = _load_yaml(args.config)
    run_id = resolve_run_id(cfg)
    out_dir = resolve_out_dir(cfg, run_id)
    cfg.setdefault("run", {})
    cfg["run"]["run_id"] = run_id
    cfg["run"]["out_dir"] = out_dir
    setup_logging(out_dir=out_dir, run_id=run_id, log_dir=cfg["run"].get("log_dir"), level=args.log_level)

    ray_cfg = _load_yaml(args.ray_config) if args.ray_config else None
    os.environ["CORPUS_TOKENIZE_CONFIG_PATH"] = os.path.abspath(args.config)
    manifest = run_job(cfg, ray_cfg)
    print(json.dumps(manifest, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
