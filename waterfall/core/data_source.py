#!/usr/bin/env python3
"""
Snapshot files for waterfall stores.
Reads and writes CSV/Parquet snapshots through an in-memory DuckDB connection.

A snapshot has one row per non-empty bucket with columns:
    slice  - slice index (image row)
    value  - bucket lower bound in nanoseconds
    count  - observations in the bucket
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

import duckdb

from .config import WaterfallConfig
from .heatmap import Heatmap


def _quote(path: Path) -> str:
    return str(path).replace("'", "''")


def _table_function(path: Path) -> str:
    if path.suffix.lower() == '.parquet':
        return f"read_parquet('{_quote(path)}')"
    return (
        f"read_csv('{_quote(path)}', header = true, "
        "columns = {'slice': 'INTEGER', 'value': 'BIGINT', 'count': 'BIGINT'})"
    )


class SnapshotSource:
    """Loads and stores Heatmap snapshots via DuckDB"""

    def __init__(self, config: Optional[WaterfallConfig] = None,
                 duckdb_threads: Optional[int] = None):
        """
        Args:
            config: Store geometry used for loaded snapshots
            duckdb_threads: Number of DuckDB threads (None for default)
        """
        self.config = config or WaterfallConfig()
        self.duckdb_threads = duckdb_threads
        self.conn = None
        self.logger = logging.getLogger('waterfall.data_source')

    def connect(self):
        """Get or create DuckDB connection"""
        if self.conn is None:
            self.conn = duckdb.connect(':memory:')
            if self.duckdb_threads is not None:
                self.conn.execute(f"SET threads TO {self.duckdb_threads}")
        return self.conn

    def close(self):
        """Close DuckDB connection"""
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def read_rows(self, path: Union[str, Path]) -> List[Tuple[int, int, int]]:
        """Return (slice, value, count) rows of a snapshot, ordered by slice and value"""
        path = Path(path)
        if not path.exists():
            raise ValueError(f"Snapshot file does not exist: {path}")

        conn = self.connect()
        query = f"""
        SELECT "slice", "value", "count"
        FROM {_table_function(path)}
        WHERE "count" > 0
        ORDER BY "slice", "value"
        """
        try:
            rows = conn.execute(query).fetchall()
        except duckdb.Error as e:
            raise ValueError(f"Cannot read snapshot {path}: {e}") from e

        self.logger.debug(f"Read {len(rows)} bucket rows from {path}")
        return [(int(s), int(v), int(c)) for s, v, c in rows]

    def load(self, path: Union[str, Path]) -> Heatmap:
        """Load a snapshot into a fresh Heatmap with the configured geometry"""
        heatmap = Heatmap(self.config)
        for slice_index, value, count in self.read_rows(path):
            if not 0 <= slice_index < heatmap.num_slices:
                heatmap.dropped += count
                continue
            heatmap.slices[slice_index].increment(value, count)

        if heatmap.dropped:
            self.logger.warning(
                f"{path}: {heatmap.dropped} observations outside {heatmap.num_slices} slices dropped"
            )
        self.logger.info(f"Loaded {heatmap.total()} observations from {path}")
        return heatmap

    def save(self, heatmap: Heatmap, path: Union[str, Path]):
        """Write the non-empty buckets of heatmap to a CSV or Parquet file"""
        path = Path(path)
        slices, values, counts = [], [], []
        for slice_index, histogram in enumerate(heatmap.slices):
            for bucket in histogram:
                if bucket.count > 0:
                    slices.append(slice_index)
                    values.append(bucket.value)
                    counts.append(bucket.count)

        conn = self.connect()
        fmt = 'PARQUET' if path.suffix.lower() == '.parquet' else 'CSV, HEADER'
        try:
            # One columnar statement; row-by-row inserts are far too slow
            conn.execute(
                'CREATE OR REPLACE TEMP TABLE snapshot AS SELECT '
                'unnest(?::INTEGER[]) AS "slice", '
                'unnest(?::BIGINT[]) AS "value", '
                'unnest(?::BIGINT[]) AS "count"',
                [slices, values, counts]
            )
            conn.execute(
                f"COPY (SELECT * FROM snapshot ORDER BY \"slice\", \"value\") "
                f"TO '{_quote(path)}' (FORMAT {fmt})"
            )
            conn.execute('DROP TABLE snapshot')
        except duckdb.Error as e:
            raise ValueError(f"Cannot write snapshot {path}: {e}") from e

        self.logger.info(f"Wrote {len(counts)} bucket rows to {path}")
