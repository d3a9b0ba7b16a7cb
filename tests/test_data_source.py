#!/usr/bin/env python3
"""
Tests for snapshot loading/saving through DuckDB.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from waterfall.core.config import WaterfallConfig
from waterfall.core.data_source import SnapshotSource
from waterfall.core.errors import GeometryMismatchError
from waterfall.core.heatmap import Heatmap
from waterfall.core.renderer import Waterfall


@pytest.fixture
def config():
    return WaterfallConfig(num_slices=10)


def _sample_heatmap(config):
    heatmap = Heatmap(config)
    heatmap.increment(0, 150, 3)
    heatmap.increment(4, 25_000, 2)
    heatmap.increment(9, 7_000_000, 1)
    return heatmap


def test_csv_snapshot_round_trip(tmp_path, config):
    path = tmp_path / 'snap.csv'
    original = _sample_heatmap(config)

    with SnapshotSource(config) as source:
        source.save(original, path)
        loaded = source.load(path)

    assert path.read_text().splitlines()[0] == 'slice,value,count'
    assert [h.counts for h in loaded.slices] == [h.counts for h in original.slices]


def test_parquet_snapshot(tmp_path, config):
    path = tmp_path / 'snap.parquet'

    with SnapshotSource(config) as source:
        source.save(_sample_heatmap(config), path)
        rows = source.read_rows(path)

    assert rows == [(0, 150, 3), (4, 25_000, 2), (9, 7_000_000, 1)]


def test_handwritten_snapshot_drops_out_of_range_slices(tmp_path, config):
    path = tmp_path / 'snap.csv'
    path.write_text('slice,value,count\n0,155,3\n2,0,0\n999,150,2\n')

    with SnapshotSource(config) as source:
        heatmap = source.load(path)

    histogram = heatmap.slices[0]
    assert histogram.counts[histogram.index_of(150)] == 3
    assert heatmap.total() == 3
    assert heatmap.dropped == 2


def test_missing_snapshot(tmp_path, config):
    with SnapshotSource(config) as source:
        with pytest.raises(ValueError):
            source.load(tmp_path / 'nope.csv')


def test_waterfall_merges_snapshot_files(tmp_path, config):
    first = tmp_path / 'a.csv'
    second = tmp_path / 'b.csv'
    with SnapshotSource(config) as source:
        source.save(_sample_heatmap(config), first)
        source.save(_sample_heatmap(config), second)

    waterfall = Waterfall(config)
    waterfall.load_file(first)
    waterfall.load_file(second)

    assert waterfall.heatmap.total() == 12
    assert waterfall.find_max() == 6


def test_merging_snapshot_with_other_geometry_fails(tmp_path):
    path = tmp_path / 'a.csv'
    waterfall = Waterfall(WaterfallConfig(num_slices=10))
    waterfall.heatmap.increment(0, 150)
    waterfall.save_file(path)

    other = Waterfall(WaterfallConfig(num_slices=10, precision=3))
    other.load_file(path)
    with pytest.raises(GeometryMismatchError):
        waterfall.merge_heatmap(other.heatmap)


def test_save_large_store(tmp_path):
    config = WaterfallConfig(num_slices=50)
    heatmap = Heatmap(config)
    for histogram in heatmap.slices:
        histogram.counts = [i + 1 for i in range(len(histogram))]
    path = tmp_path / 'large.csv'

    with SnapshotSource(config) as source:
        source.save(heatmap, path)
        rows = source.read_rows(path)

    assert len(rows) == 50 * 871
    assert rows[0] == (0, 0, 1)
    assert rows[-1] == (49, 60_000_000_000, 871)
    assert sum(count for _, _, count in rows) == heatmap.total()


def test_save_empty_store(tmp_path, config):
    path = tmp_path / 'empty.parquet'

    with SnapshotSource(config) as source:
        source.save(Heatmap(config), path)
        assert source.read_rows(path) == []
