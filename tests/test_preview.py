import os
import sys

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from procworld import preview
from procworld.mapgen import ChunkGenerator


def test_maps_match_generator():
    gen = ChunkGenerator(42)
    heights = preview.height_map(gen, -8, 4, 6, 5)
    biomes = preview.biome_map(gen, -8, 4, 6, 5)
    assert heights.shape == (6, 5)
    assert heights[2, 3] == gen.surface_height(-6, 7)
    assert biomes[5, 0] == int(gen.biome_at(-3, 4))


def test_render_writes_pngs(tmp_path):
    Image = pytest.importorskip("PIL.Image")
    gen = ChunkGenerator(42)
    height_path, biome_path = preview.render(gen, 0, 0, 0, prefix=str(tmp_path / "p"))
    with Image.open(height_path) as im:
        assert im.size == (16, 16)
        assert im.mode == 'L'
    with Image.open(biome_path) as im:
        assert im.mode == 'RGB'
    assert np.asarray(Image.open(biome_path)).shape == (16, 16, 3)
