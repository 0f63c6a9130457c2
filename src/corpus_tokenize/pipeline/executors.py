"""Chunk executors.

An executor applies a per-chunk function across all chunks in parallel and returns the
results *in input chunk order*. The first failure is re-raised unchanged; chunks that have
not started are cancelled and running ones are told to stop through the cancel event.

- local: thread pool in this process (the remote tokenizer is I/O bound)
- ray: one Ray task per chunk (see ray_executor.py; needs the `ray` extra)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar
import logging
import os
import threading

from tqdm import tqdm

from ..errors import ConfigError

log = logging.getLogger("corpus_tokenize.executors")

C = TypeVar("C")
R = TypeVar("R")


class ChunkExecutor(ABC):
    name: str = "executor"

    @abstractmethod
    def map(
        self,
        fn: Callable[[C], R],
        chunks: Sequence[C],
        *,
        cancel: Optional[threading.Event] = None,
    ) -> List[R]:
        """Run `fn` over `chunks`, results in chunk order.

        `cancel` is the event `fn` polls to stop early; executors that run `fn` in this
        process set it on the first failure.
        """
        ...


class LocalExecutor(ChunkExecutor):
    name = "local"

    def __init__(self, workers: Optional[int] = None, progress: bool = False):
        self.workers = workers or min(8, os.cpu_count() or 1)
        if self.workers < 1:
            raise ConfigError(f"workers must be >= 1, got {self.workers}")
        self.progress = progress

    def map(
        self,
        fn: Callable[[C], R],
        chunks: Sequence[C],
        *,
        cancel: Optional[threading.Event] = None,
    ) -> List[R]:
        if self.workers == 1 or len(chunks) <= 1:
            return [fn(c) for c in tqdm(chunks, desc="chunks", disable=not self.progress)]

        pool = ThreadPoolExecutor(max_workers=self.workers)
        futures = [pool.submit(fn, c) for c in chunks]
        try:
            for f in tqdm(as_completed(futures), total=len(futures), desc="chunks", disable=not self.progress):
                f.result()
        except BaseException:
            if cancel is not None:
                cancel.set()
            cancelled = sum(1 for f in futures if f.cancel())
            running = sum(1 for f in futures if not f.done())
            log.error(f"chunk failed; cancelled {cancelled} pending chunks, stopping {running} running")
            raise
        finally:
            pool.shutdown(wait=True, cancel_futures=True)
        return [f.result() for f in futures]


def make_executor(exec_cfg: Dict[str, Any], ray_cfg: Optional[Dict[str, Any]] = None) -> ChunkExecutor:
    """Build an executor from the `execution:` config section (and optional ray config)."""
    mode = str(exec_cfg.get("mode", "local")).lower()
    if mode == "local":
        return LocalExecutor(
            workers=exec_cfg.get("workers"),
            progress=bool(exec_cfg.get("progress", False)),
        )
    if mode == "ray":
        from .ray_executor import RayExecutor
        ray_opts = (ray_cfg or {}).get("ray", {}) or {}
        return RayExecutor(address=ray_opts.get("address", "auto"), num_cpus=ray_opts.get("num_cpus"))
    raise ConfigError(f"Unknown execution mode: {mode}. Use 'local' or 'ray'")
