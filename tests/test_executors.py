import threading
import time

import pytest

from corpus_tokenize.errors import ConfigError
from corpus_tokenize.pipeline.executors import LocalExecutor, make_executor


def test_results_in_input_order() -> None:
    def slow_first(i: int) -> int:
        time.sleep((8 - i) * 0.005)
        return i * 10

    assert LocalExecutor(workers=4).map(slow_first, list(range(8))) == [i * 10 for i in range(8)]


def test_runs_chunks_concurrently() -> None:
    seen = set()
    barrier = threading.Barrier(3, timeout=5)

    def fn(i: int) -> int:
        seen.add(threading.get_ident())
        barrier.wait()
        return i

    assert LocalExecutor(workers=3).map(fn, [0, 1, 2]) == [0, 1, 2]
    assert len(seen) == 3


def test_first_failure_is_reraised() -> None:
    def fn(i: int) -> int:
        if i == 2:
            raise ValueError("chunk 2 broke")
        return i

    with pytest.raises(ValueError, match="chunk 2 broke"):
        LocalExecutor(workers=2).map(fn, list(range(6)))


def test_single_worker_is_sequential() -> None:
    order = []
    LocalExecutor(workers=1).map(order.append, [3, 1, 2])
    assert order == [3, 1, 2]


def test_empty_input() -> None:
    assert LocalExecutor(workers=4).map(lambda c: c, []) == []


def test_make_executor_local() -> None:
    ex = make_executor({"mode": "local", "workers": 3})
    assert isinstance(ex, LocalExecutor)
    assert ex.workers == 3
    assert make_executor({}).name == "local"


def test_make_executor_unknown_mode() -> None:
    with pytest.raises(ConfigError):
        make_executor({"mode": "spark"})


def test_invalid_worker_count() -> None:
    with pytest.raises(ConfigError):
        LocalExecutor(workers=-1)


def test_failure_sets_cancel_and_drops_queued_chunks() -> None:
    cancel = threading.Event()
    started = []

    def fn(i: int) -> int:
        if i == 0:
            raise ValueError("chunk 0 broke")
        started.append(i)
        cancel.wait(timeout=5)
        return i

    with pytest.raises(ValueError, match="chunk 0 broke"):
        LocalExecutor(workers=2).map(fn, list(range(20)), cancel=cancel)
    assert cancel.is_set()
    assert len(started) < 19


def test_cancel_untouched_on_success() -> None:
    cancel = threading.Event()
    assert LocalExecutor(workers=2).map(lambda c: c, [1, 2, 3], cancel=cancel) == [1, 2, 3]
    assert not cancel.is_set()
