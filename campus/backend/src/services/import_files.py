"""Load import rows from tabular files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd


def load_rows(path: str | Path) -> list[dict[str, Any]]:
    """Return the rows of a CSV file as dictionaries.

    Values are read as text so the validators decide on coercion; blank
    cells become ``None``.
    """

    frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    frame.columns = [str(column).strip() for column in frame.columns]

    rows: list[dict[str, Any]] = []
    for record in frame.to_dict(orient="records"):
        rows.append(
            {
                key: (value.strip() or None) if isinstance(value, str) else value
                for key, value in record.items()
            }
        )
    return rows


__all__ = ["load_rows"]
