"""Jsonnet parsing: located syntax trees, source mapping, string unescaping and value types."""

__version__ = "0.1.0"
__all__ = ["expr", "location", "parser", "source", "types", "unescape"]