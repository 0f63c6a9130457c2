from .assemble import assemble, rechunk, split_rows
from .builder import TokenColumnBuilder
from .executors import ChunkExecutor, LocalExecutor, make_executor
from .job import run_job
from .task import RowTokenizationTask, validate_input
from .transform import transform

__all__ = [
    "assemble",
    "rechunk",
    "split_rows",
    "TokenColumnBuilder",
    "ChunkExecutor",
    "LocalExecutor",
    "make_executor",
    "RowTokenizationTask",
    "validate_input",
    "transform",
    "run_job",
]
