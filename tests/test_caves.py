import os
import sys

import numpy as np

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from procworld.blocks import AIR, STONE
from procworld.caves import CaveCarver
from procworld.chunk import Chunk


def _solid_chunk(cx=0, cz=0):
    chunk = Chunk(cx, cz)
    chunk.blocks[...] = STONE
    return chunk


def test_threshold_above_range_carves_nothing():
    chunk = _solid_chunk()
    assert CaveCarver(42, threshold=1.1).carve(chunk, 0, 0) == 0
    assert (chunk.blocks == STONE).all()


def test_threshold_below_range_clears_everything_but_floor():
    chunk = _solid_chunk(3, -2)
    carved = CaveCarver(42, threshold=-1.1).carve(chunk, 3, -2)
    assert carved == chunk.size * (chunk.height - 1) * chunk.size
    assert (chunk.blocks[:, 1:, :] == AIR).all()
    assert (chunk.blocks[:, 0, :] == STONE).all()


def test_floor_row_never_in_mask():
    mask = CaveCarver(7, threshold=-1.1).cave_mask(0, 0)
    assert mask.shape == (16, 128, 16)
    assert not mask[:, 0, :].any()


def test_default_threshold_is_deterministic():
    a = CaveCarver(42).cave_mask(1, 1)
    b = CaveCarver(42).cave_mask(1, 1)
    assert np.array_equal(a, b)
    assert not np.array_equal(a, CaveCarver(43).cave_mask(1, 1)) or not a.any()


def test_carving_uses_world_coordinates():
    carver = CaveCarver(42, scale=0.05, threshold=0.0)
    here = carver.cave_mask(0, 0)
    there = carver.cave_mask(1, 0)
    # local (0, 40, 3) of chunk (1, 0) is world (16, 40, 3)
    values = carver.noise.noise3(np.float64(16.0), np.float64(40.0), np.float64(3.0), normalized=True)
    assert there[0, 40, 3] == (values > 0.0)
    assert not np.array_equal(here, there)
