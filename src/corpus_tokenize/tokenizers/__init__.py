from .base import StrategyKind, TokenizerConfig, TokenizerStrategy
from .pattern import PatternTokenizer
from .remote import RemoteAnalyzerTokenizer, parse_endpoint
from .registry import register_strategy, get_strategy_factory, list_strategies
from .selector import select_tokenizer, parse_config, build_tokenizer

__all__ = [
    "StrategyKind",
    "TokenizerConfig",
    "TokenizerStrategy",
    "PatternTokenizer",
    "RemoteAnalyzerTokenizer",
    "parse_endpoint",
    "register_strategy",
    "get_strategy_factory",
    "list_strategies",
    "select_tokenizer",
    "parse_config",
    "build_tokenizer",
]
