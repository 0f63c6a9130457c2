from .writer import write_manifest, write_tokens

__all__ = ["write_manifest", "write_tokens"]
