"""Unified table reader -- auto-detects format by extension."""
from __future__ import annotations

from pathlib import Path

import pandas as pd
import structlog

from modeleval.core.exceptions import UnsupportedFormatError

logger = structlog.get_logger(__name__)

SUPPORTED_EXTENSIONS = {".csv", ".tsv", ".json", ".xlsx"}


def read_table(path: Path) -> pd.DataFrame:
    """Read a prediction table, auto-detecting format by extension.

    Args:
        path: Path to the input file.

    Returns:
        DataFrame with one row per prediction.

    Raises:
        UnsupportedFormatError: If file extension is not recognized.
        FileNotFoundError: If file does not exist.
    """
    path = Path(path)
    ext = path.suffix.lower()

    # Check extension first so unsupported formats fail fast
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(ext, sorted(SUPPORTED_EXTENSIONS))

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if ext == ".csv":
        df = pd.read_csv(path)
    elif ext == ".tsv":
        df = pd.read_csv(path, sep="\t")
    elif ext == ".json":
        df = pd.read_json(path, orient="records")
    else:
        df = pd.read_excel(path, engine="openpyxl")

    logger.info("read_table", path=str(path), format=ext.lstrip("."), n_rows=len(df))
    return df
