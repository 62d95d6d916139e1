"""Build model structs, dynamic-SQL builder code and file headers from column metadata and annotated methods."""

__version__ = "0.1.0"