import pyarrow as pa
import pytest

ray = pytest.importorskip("ray")

from corpus_tokenize import RemoteTokenizationFailure, transform  # noqa: E402
from corpus_tokenize.pipeline.executors import LocalExecutor  # noqa: E402
from corpus_tokenize.pipeline.ray_executor import RayExecutor  # noqa: E402


@pytest.fixture(scope="module")
def ray_executor():
    ex = RayExecutor(address=None, num_cpus=2)
    yield ex
    ray.shutdown()


def test_ray_matches_local(ray_executor) -> None:
    table = pa.table({
        "a": [f"Row {i} Alpha" if i % 3 else None for i in range(50)],
        "b": [f"beta;gamma {i}" for i in range(50)],
    })
    local = transform(table, r"[\s;]+", min_length=1, to_lowercase=True, executor=LocalExecutor(workers=1))
    remote = transform(table, r"[\s;]+", min_length=1, to_lowercase=True, executor=ray_executor, rows_per_chunk=7)
    assert remote.column(0).to_pylist() == local.column(0).to_pylist()
    assert remote.column(0).num_chunks == 8


def test_ray_failure_propagates(ray_executor) -> None:
    # nothing listens on port 9; every request fails
    table = pa.table({"a": ["x", "y"]})
    with pytest.raises(RemoteTokenizationFailure):
        transform(table, "tokenize:elasticsearch:http://127.0.0.1:9/_analyze", timeout_s=2,
                  executor=ray_executor, rows_per_chunk=1)
