"""Sample sources: a SQLite ``tps`` table and ``.npz`` snapshots.

Both return ``(timestamps, values)`` as ``datetime64[ns]`` (UTC) and
``float64`` numpy arrays, ordered by time, ready for ``build_heatmap``.
"""

from __future__ import annotations

import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any, Union

import numpy as np
import pandas as pd

from tpsheatmap.core.partition import to_utc_nanoseconds
from tpsheatmap.errors import LengthMismatchError
from tpsheatmap.utils.logging import get_logger

logger = get_logger(__name__)

TPS_QUERY = "select cast(whenlogged as int) as whenlogged, tpsvalue from tps order by whenlogged asc;"

PathLike = Union[str, Path]


def read_sqlite(path: PathLike, query: str = TPS_QUERY) -> tuple[np.ndarray, np.ndarray]:
    """Read samples from a SQLite database.

    The query must return two columns: unix seconds and the sample value.

    Raises:
        FileNotFoundError: If the database file does not exist (sqlite would
            silently create an empty one).
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"database doesn't exist: {path}")

    logger.info(f"Opening database {path}...")
    with closing(sqlite3.connect(str(path))) as conn:
        logger.info("Getting samples...")
        df = pd.read_sql_query(query, conn)

    logger.info(f"Got {len(df)} samples")
    when = df.iloc[:, 0].to_numpy(dtype=np.int64)
    timestamps = (when * np.int64(1_000_000_000)).view("datetime64[ns]")
    values = df.iloc[:, 1].to_numpy(dtype=np.float64)
    return timestamps, values


def write_snapshot(path: PathLike, timestamps: Any, values: Any) -> Path:
    """Save samples to a compressed ``.npz`` archive (int64 UTC ns + float64)."""
    path = Path(path).expanduser()
    ts_ns = to_utc_nanoseconds(timestamps)
    vals = np.asarray(values, dtype=np.float64)
    if ts_ns.size != vals.size:
        raise LengthMismatchError(ts_ns.size, vals.size)
    path.parent.mkdir(parents=True, exist_ok=True)
    # np.savez appends .npz to bare names; pass an open file to keep the name as given
    with open(path, "wb") as f:
        np.savez_compressed(f, timestamps=ts_ns, values=vals)
    logger.info(f"Wrote {ts_ns.size} samples to snapshot {path}")
    return path


def read_snapshot(path: PathLike) -> tuple[np.ndarray, np.ndarray]:
    """Load samples written by ``write_snapshot``."""
    path = Path(path).expanduser()
    logger.info(f"Opening snapshot {path}...")
    with np.load(path, allow_pickle=False) as data:
        ts_ns = np.asarray(data["timestamps"], dtype=np.int64)
        values = np.asarray(data["values"], dtype=np.float64)
    logger.info(f"Got {ts_ns.size} samples")
    return ts_ns.view("datetime64[ns]"), values
