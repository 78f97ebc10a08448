"""
Data loading utilities for the walkthrough.

Provides functions to read delimited-text and spreadsheet files into tables.
Parsing is left to pandas; these helpers only resolve the reader, check the
file exists and log what was loaded.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)

DELIMITED_SUFFIXES = {".csv": ",", ".txt": ",", ".tsv": "\t"}
SPREADSHEET_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


def _check_exists(path: Path) -> None:
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")


def load_csv(path: str | Path, **read_kwargs: Any) -> pd.DataFrame:
    """Load a delimited-text file into a table.

    Args:
        path: Path to the file
        **read_kwargs: Passed through to ``pandas.read_csv``

    Returns:
        DataFrame with the file's columns in their original order.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(path)
    _check_exists(path)

    df = pd.read_csv(path, **read_kwargs)
    logger.info(f"Loaded {path.name}: {len(df)} rows x {len(df.columns)} columns")
    return df


def load_spreadsheet(path: str | Path, sheet: int | str = 0, **read_kwargs: Any) -> pd.DataFrame:
    """Load one sheet of a spreadsheet file into a table.

    Args:
        path: Path to the workbook
        sheet: Sheet index or name
        **read_kwargs: Passed through to ``pandas.read_excel``

    Returns:
        DataFrame with the sheet's columns in their original order.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(path)
    _check_exists(path)

    df = pd.read_excel(path, sheet_name=sheet, **read_kwargs)
    logger.info(
        f"Loaded {path.name} [sheet {sheet!r}]: {len(df)} rows x {len(df.columns)} columns"
    )
    return df


def load_table(path: str | Path, **kwargs: Any) -> pd.DataFrame:
    """Load a table, picking the reader from the file suffix.

    Raises:
        ValueError: If the suffix belongs to no known format
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in DELIMITED_SUFFIXES:
        kwargs.setdefault("sep", DELIMITED_SUFFIXES[suffix])
        return load_csv(path, **kwargs)
    if suffix in SPREADSHEET_SUFFIXES:
        return load_spreadsheet(path, **kwargs)

    known = sorted(set(DELIMITED_SUFFIXES) | SPREADSHEET_SUFFIXES)
    raise ValueError(f"Unsupported file type '{suffix}' for {path}. Expected one of: {', '.join(known)}")


def require_columns(table: pd.DataFrame, *columns: str) -> None:
    """Raise ``KeyError`` if any of ``columns`` is missing from ``table``."""
    missing = [c for c in columns if c not in table.columns]
    if missing:
        available = ", ".join(str(c) for c in table.columns)
        raise KeyError(f"Unknown column(s) {missing}; table has: {available}")


def describe_table(table: pd.DataFrame) -> dict[str, Any]:
    """Summarise a table's shape and column types.

    Returns:
        Dictionary with ``rows``, ``columns`` (names in order) and ``dtypes``
        (column name -> dtype string).
    """
    return {
        "rows": len(table),
        "columns": [str(c) for c in table.columns],
        "dtypes": {str(c): str(t) for c, t in table.dtypes.items()},
    }
