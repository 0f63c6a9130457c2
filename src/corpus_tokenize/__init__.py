"""corpus_tokenize

Turns rows of a string table into one flat token column for word-vector training:
each row's tokens appear in column order and every row ends with a null marker.

Public API surface:
- corpus_tokenize.transform : tokenize a pyarrow Table with a config string
- corpus_tokenize.tokenizers : PatternTokenizer, RemoteAnalyzerTokenizer, select_tokenizer
- corpus_tokenize.pipeline : RowTokenizationTask, executors, run_job
- corpus_tokenize.cli.main : CLI entrypoint
"""
from .errors import ConfigError, CorpusTokenizeError, InvalidInputType, RemoteTokenizationFailure
from .pipeline import split_rows, transform
from .tokenizers import PatternTokenizer, RemoteAnalyzerTokenizer, select_tokenizer

__all__ = [
    "__version__",
    "transform",
    "split_rows",
    "select_tokenizer",
    "PatternTokenizer",
    "RemoteAnalyzerTokenizer",
    "CorpusTokenizeError",
    "InvalidInputType",
    "RemoteTokenizationFailure",
    "ConfigError",
]
__version__ = "0.1.0"
