"""Run ID resolution: explicit or auto-generated.

Auto-generated ids look like `<name>_<YYYY>_<HHMMSS>` (UTC), where name comes from `run.name`
or, failing that, the input path.
"""

from __future__ import annotations
import os
import re
from datetime import datetime, timezone
from typing import Any, Dict


def _input_name(cfg: Dict[str, Any]) -> str:
    run = cfg.get("run") or {}
    name = run.get("name")
    if not name:
        raw = (cfg.get("input") or {}).get("path") or ""
        if isinstance(raw, list):
            raw = raw[0] if raw else ""
        raw = str(raw).strip().rstrip("/\\")
        base = os.path.basename(raw)
        # files and globs: use the parent directory name
        if os.path.splitext(base)[1] or any(ch in base for ch in "*?["):
            base = os.path.basename(os.path.dirname(raw))
        name = base or "tokenize"
    name = re.sub(r"[^\w\-]", "_", str(name))
    return name or "tokenize"


def generate_run_id(cfg: Dict[str, Any]) -> str:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"{_input_name(cfg)}_{ts[:4]}_{ts[-6:]}"


def resolve_run_id(cfg: Dict[str, Any]) -> str:
    """Return run.run_id if set, else an auto-generated id."""
    run = cfg.get("run") or {}
    explicit = run.get("run_id")
    if explicit is not None and str(explicit).strip():
        return str(explicit).strip()
    return generate_run_id(cfg)


def resolve_out_dir(cfg: Dict[str, Any], run_id: str) -> str:
    """Return out_dir with {run_id} placeholder replaced by the resolved run_id."""
    run = cfg.get("run") or {}
    out_dir = run.get("out_dir") or "storage"
    return out_dir.replace("{run_id}", run_id)
