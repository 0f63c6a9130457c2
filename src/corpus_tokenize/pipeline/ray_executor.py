"""Ray chunk executor.

Each chunk becomes one Ray task; results are fetched in chunk order. The first failing task
cancels the rest and its original exception is re-raised on the driver.
"""

from __future__ import annotations
from typing import Callable, List, Optional, Sequence
import logging
import threading

import ray
from ray.exceptions import RayTaskError

from .executors import C, ChunkExecutor, R

log = logging.getLogger("corpus_tokenize.ray")


@ray.remote
def _run_chunk(fn, chunk):
    return fn(chunk)


class RayExecutor(ChunkExecutor):
    name = "ray"

    def __init__(self, address: Optional[str] = "auto", num_cpus: Optional[int] = None):
        if not ray.is_initialized():
            if address:
                ray.init(address=address, ignore_reinit_error=True)
            else:
                ray.init(num_cpus=num_cpus, ignore_reinit_error=True)
            log.info(f"[ray] initialized address={address or 'local'}")

    def map(
        self,
        fn: Callable[[C], R],
        chunks: Sequence[C],
        *,
        cancel: Optional[threading.Event] = None,
    ) -> List[R]:
        # `cancel` cannot cross process boundaries; running tasks are stopped with ray.cancel
        fn_ref = ray.put(fn)
        refs = [_run_chunk.remote(fn_ref, c) for c in chunks]
        pending = list(refs)
        while pending:
            done, pending = ray.wait(pending, num_returns=1)
            try:
                ray.get(done[0])
            except RayTaskError as e:
                for r in pending:
                    ray.cancel(r)
                log.error(f"[ray] chunk failed; cancelled {len(pending)} pending chunks")
                raise e.as_instanceof_cause() from None
        return ray.get(refs)
