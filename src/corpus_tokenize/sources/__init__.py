from .readers import read_table, resolve_files

__all__ = ["read_table", "resolve_files"]
