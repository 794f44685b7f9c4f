"""
Export utilities for the maternal health analysis.
Writes the classified table (CSV or Parquet) and the JSON run summary,
creating parent directories if missing.
"""

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Dict

import numpy as np
import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from ..exceptions import InvalidConfig

logger = logging.getLogger(__name__)

TABLE_COLUMNS = ["county", "year", "skilled_attendants_pct", "mmr", "risk_level"]


def _json_serializable(obj):
    """Convert numpy types and dataclasses to JSON-serializable types."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return _json_serializable(dataclasses.asdict(obj))
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, dict):
        return {str(k): _json_serializable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_json_serializable(x) for x in obj]
    return obj


def _ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def write_table(df: pd.DataFrame, path, fmt: str = "csv") -> Path:
    """
    Write the table with a header row, one record per line, in the row order
    given. Known columns come first in their canonical order.
    """
    path = Path(path)
    columns = [col for col in TABLE_COLUMNS if col in df.columns]
    columns += [col for col in df.columns if col not in columns]
    _ensure_parent_dir(path)

    if fmt == "csv":
        df.to_csv(path, columns=columns, index=False)
    elif fmt == "parquet":
        table = pa.Table.from_pandas(df[columns], preserve_index=False)
        pq.write_table(table, path)
    else:
        raise InvalidConfig(f"Unsupported table format: {fmt}")

    logger.info("Saved %d rows to %s", len(df), path)
    return path


def read_table(path, fmt: str = "csv") -> pd.DataFrame:
    """Read a table written by ``write_table``."""
    path = Path(path)
    if fmt == "csv":
        return pd.read_csv(path)
    if fmt == "parquet":
        return pq.read_table(path).to_pandas()
    raise InvalidConfig(f"Unsupported table format: {fmt}")


def save_summary(summary: Dict[str, Any], path) -> Path:
    """Save the run summary as indented JSON."""
    path = Path(path)
    _ensure_parent_dir(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(_json_serializable(summary), f, indent=2)
    logger.info("Saved summary to %s", path)
    return path
