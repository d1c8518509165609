import os
import sys

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from procworld import config
from procworld.biomes import Biome
from procworld.blocks import AIR, DIRT, GRASS, STONE, WATER, BLOCK_ID, block_id
from procworld.cache import ColumnCache
from procworld.chunk import Chunk
from procworld.climate import Climate, ClimateField
from procworld.mapgen import ChunkGenerator
from procworld.noise import PerlinNoise
from procworld.presets import DEFAULT
from procworld.terrain import TerrainColumnBuilder, apply_terrain_curve, resolve_layers

SAND = BLOCK_ID['sand']
# (n + 1) * 0.5 * 128 == 10.5
N_FOR_HEIGHT_10 = -0.8359375


class _FixedNoise:
    def __init__(self, value):
        self.value = value

    def noise2(self, x, z, normalized=False):
        return self.value


class _FixedClimate:
    def __init__(self, temperature, humidity):
        self.temperature = temperature
        self.humidity = humidity

    def climate_at(self, x, z):
        return Climate(self.temperature, self.humidity, Biome.PLAINS, 0.0)


def _settings(**overrides):
    settings = {
        'sea_level': 62,
        'total_height': 128,
        'min_height': 0,
        'curve': 'standard',
        'fill_block': STONE,
        'fluid_block': WATER,
        'layers': resolve_layers([{'depth': 1, 'block': 'dirt'}, {'depth': 2, 'block': 'stone'}]),
    }
    settings.update(overrides)
    return settings


def _builder(noise=None, climate=None, biomes_config=None, **overrides):
    return TerrainColumnBuilder(
        noise if noise is not None else _FixedNoise(N_FOR_HEIGHT_10),
        climate if climate is not None else _FixedClimate(0.6, 0.2),
        ColumnCache(),
        _settings(**overrides),
        biomes_config)


def test_terrain_curves():
    assert apply_terrain_curve(0.3, 'standard') == 0.3
    assert apply_terrain_curve(0.3, 'plains') == 0.3
    assert apply_terrain_curve(0.3, 'volcanic') == 0.3
    assert apply_terrain_curve(-0.5, 'mountains') == pytest.approx(-0.25)
    assert apply_terrain_curve(0.5, 'mountains') == pytest.approx(0.25)
    assert apply_terrain_curve(0.0, 'hills') == pytest.approx(0.5)
    assert apply_terrain_curve(0.5, 'hills') == pytest.approx(1.0)
    assert apply_terrain_curve(-0.5, 'hills') == pytest.approx(0.0)


def test_height_mapping_and_clamp():
    assert _builder().compute_height(0, 0) == 10
    assert _builder(noise=_FixedNoise(0.0)).compute_height(0, 0) == 64
    assert _builder(noise=_FixedNoise(1.0)).compute_height(0, 0) == 127
    assert _builder(noise=_FixedNoise(-1.0)).compute_height(0, 0) == 0
    assert _builder(noise=_FixedNoise(0.0), min_height=32).compute_height(0, 0) == 80


def test_layer_fixture():
    b = _builder()
    chunk = Chunk()
    b.fill_layers(chunk, 0, 0, 10)
    column = chunk.blocks[0, :, 0]
    assert column[10] == DIRT
    assert column[9] == STONE
    assert column[8] == STONE
    assert (column[:8] == STONE).all()
    assert (column[11:] == AIR).all()


def test_layers_stack_top_down():
    b = _builder(layers=resolve_layers([{'depth': 1, 'block': 'grass'}, {'depth': 2, 'block': 'sand'}]))
    chunk = Chunk()
    b.fill_layers(chunk, 3, 4, 10)
    column = chunk.blocks[3, :, 4]
    assert column[10] == GRASS
    assert column[9] == SAND and column[8] == SAND
    assert (column[:8] == STONE).all()


def test_layers_deeper_than_column():
    b = _builder(layers=resolve_layers([{'depth': 50, 'block': 'dirt'}]))
    chunk = Chunk()
    b.fill_layers(chunk, 0, 0, 10)
    assert (chunk.blocks[0, :11, 0] == DIRT).all()


def test_water_fills_up_to_sea_level():
    b = _builder(sea_level=20)
    chunk = Chunk()
    b.fill_layers(chunk, 0, 0, 10)
    b.fill_water(chunk, 0, 0, 10)
    column = chunk.blocks[0, :, 0]
    assert (column[11:21] == WATER).all()
    assert column[21] == AIR
    assert column[10] == DIRT


def test_no_water_above_sea_level():
    b = _builder(sea_level=5)
    chunk = Chunk()
    b.fill_layers(chunk, 0, 0, 10)
    b.fill_water(chunk, 0, 0, 10)
    assert not (chunk.blocks == WATER).any()


def test_build_column_applies_biome_blocks():
    b = _builder(sea_level=5)
    chunk = Chunk()
    assert b.build_column(chunk, 2, 2, 100, 200) == 10
    column = chunk.blocks[2, :, 2]
    assert column[10] == GRASS
    assert column[9] == DIRT
    assert column[8] == STONE
    assert chunk.get_biome(2, 2) == int(Biome.PLAINS)


def test_desert_surface_blocks():
    b = _builder(climate=_FixedClimate(0.9, 0.1), biomes_config=DEFAULT['biomes'], sea_level=5)
    chunk = Chunk()
    b.build_column(chunk, 0, 0, 0, 0)
    assert chunk.get_block(0, 10, 0) == SAND
    assert chunk.get_block(0, 9, 0) == BLOCK_ID['sandstone']
    assert chunk.get_biome(0, 0) == int(Biome.DESERT)


def test_biome_override_hits_fluid_surface():
    # the topmost occupied cell of a flooded column is water
    b = _builder(sea_level=20)
    chunk = Chunk()
    b.build_column(chunk, 0, 0, 0, 0)
    assert chunk.get_block(0, 20, 0) == GRASS
    assert chunk.get_block(0, 19, 0) == DIRT
    assert chunk.get_block(0, 18, 0) == WATER


def test_unknown_material_falls_back_to_stone():
    assert block_id('unobtainium') == STONE
    assert block_id(None) == STONE
    assert block_id('SAND') == SAND
    assert resolve_layers([{'depth': 2, 'block': 'nope'}]) == [(2, STONE)]
    b = _builder(biomes_config={'plains': {'blocks': {'surface': 'nope', 'subsurface': 'also_nope'}}}, sea_level=5)
    chunk = Chunk()
    b.build_column(chunk, 0, 0, 0, 0)
    assert chunk.get_block(0, 10, 0) == STONE
    assert chunk.get_block(0, 9, 0) == STONE


def test_negative_and_malformed_layers():
    assert resolve_layers([{'depth': -3, 'block': 'dirt'}]) == [(0, DIRT)]
    assert resolve_layers([{'depth': 'deep', 'block': 'dirt'}, 'dirt', {'depth': 1, 'block': 'sand'}]) == [(1, SAND)]
    assert resolve_layers(None) == []
    assert resolve_layers('grass') == []


def test_height_cache_equivalence():
    noise = PerlinNoise(42, 4, 0.5, 0.01)
    b = _builder(noise=noise, climate=ClimateField(42))
    points = [(0, 0), (15, 15), (-31, 77), (1000, -1000)]
    first = [b.surface_height(x, z) for x, z in points]
    assert first == [b.compute_height(x, z) for x, z in points]
    assert b.cache.stats()['misses'] == len(points)
    again = [b.surface_height(x, z) for x, z in points]
    assert again == first
    assert b.cache.stats()['hits'] == len(points)
    b.cache.clear()
    assert len(b.cache) == 0
    assert [b.surface_height(x, z) for x, z in points] == first
    assert [b.biome_at(x, z) for x, z in points] == [b.compute_biome(x, z) for x, z in points]


def test_clear_caches_keeps_results():
    gen = ChunkGenerator(42)
    before = [gen.surface_height(x, 3) for x in range(-5, 5)]
    biomes = [gen.biome_at(x, 3) for x in range(-5, 5)]
    gen.clear_caches()
    assert gen.cache.stats() == {'heights': 0, 'biomes': 0, 'hits': 0, 'misses': 0}
    assert [gen.surface_height(x, 3) for x in range(-5, 5)] == before
    assert [gen.biome_at(x, 3) for x in range(-5, 5)] == biomes


def test_missing_configuration_uses_defaults():
    gen = ChunkGenerator(5, preset={})
    assert gen.settings['sea_level'] == config.SEA_LEVEL
    assert gen.settings['total_height'] == config.TOTAL_HEIGHT
    assert gen.settings['curve'] == 'standard'
    assert gen.settings['layers'] == []
    assert gen.noise.octaves == config.TERRAIN_OCTAVES
    assert gen.caves.threshold == config.CAVE_THRESHOLD
    chunk = gen.generate(0, 0)
    assert (chunk.surface_heights() >= 0).all()


def test_invalid_settings_fall_back():
    preset = {'world-generator': {
        'settings': {'sea-level': 'high', 'total-height': 4000},
        'algorithms': {'terrain': {'octaves': -2, 'persistence': 3.0, 'scale': 'x'}},
    }}
    gen = ChunkGenerator(5, preset=preset)
    assert gen.settings['sea_level'] == config.SEA_LEVEL
    assert gen.settings['total_height'] == config.TOTAL_HEIGHT
    assert gen.noise.octaves == config.TERRAIN_OCTAVES
    assert gen.noise.persistence == config.TERRAIN_PERSISTENCE
    assert gen.noise.scale == config.TERRAIN_SCALE
