"""I/O module — tabular input readers."""
from __future__ import annotations

from modeleval.io.readers import SUPPORTED_EXTENSIONS, read_table

__all__ = ["SUPPORTED_EXTENSIONS", "read_table"]
