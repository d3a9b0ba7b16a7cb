#!/usr/bin/env python3
"""
Tests for the waterfall command line interface.
"""

import os
import sys

from PIL import Image

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from waterfall.cli import main
from waterfall.core.config import WaterfallConfig
from waterfall.core.renderer import Waterfall


def test_demo_render_with_summary(tmp_path, capsys):
    output = tmp_path / 'demo.png'

    rc = main(['--demo', '--seed', '7', '--slices', '61', '-o', str(output),
               '--summary', '--format', 'simple'])

    assert rc == 0
    with Image.open(output) as image:
        assert image.size == (871, 61)
    out = capsys.readouterr().out
    assert 'Height (slices)' in out
    assert 'Time labels' in out


def test_render_from_snapshots(tmp_path):
    snapshot = tmp_path / 'snap.csv'
    waterfall = Waterfall(WaterfallConfig(num_slices=20))
    waterfall.heatmap.increment(3, 80_000, 5)
    waterfall.save_file(snapshot)
    output = tmp_path / 'out.png'

    rc = main([str(snapshot), str(snapshot), '--slices', '20', '-o', str(output)])

    assert rc == 0
    with Image.open(output) as image:
        assert image.size == (871, 20)


def test_no_input_is_an_error(capsys):
    assert main([]) == 1
    assert 'No input specified' in capsys.readouterr().err


def test_invalid_geometry_is_an_error(tmp_path, capsys):
    rc = main(['--demo', '--slices', '0', '-o', str(tmp_path / 'x.png')])

    assert rc == 1
    assert 'num_slices' in capsys.readouterr().err


def test_unwritable_output_is_an_error(tmp_path, capsys):
    rc = main(['--demo', '--slices', '5', '-o', str(tmp_path / 'missing' / 'x.png')])

    assert rc == 1
    assert 'Error:' in capsys.readouterr().err


def test_legend_is_printed(tmp_path, capsys):
    rc = main(['--demo', '--slices', '5', '-o', str(tmp_path / 'x.png'), '--legend'])

    assert rc == 0
    assert 'Color scale' in capsys.readouterr().out


def test_non_numeric_slice_env_is_an_error(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv('WATERFALL_SLICES', 'lots')

    rc = main(['--demo', '-o', str(tmp_path / 'x.png')])

    assert rc == 1
    err = capsys.readouterr().err
    assert err.startswith('Error:')
    assert 'WATERFALL_SLICES' in err
