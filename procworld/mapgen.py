'''
Chunk generation pipeline.

A ChunkGenerator is built once per world from a seed and a preset and then
fills chunks in place: terrain columns, caves, structures, decorations.
Output is a pure function of (seed, chunk coordinates, preset); the column
cache only saves work.
'''
import time

import numpy

from procworld import config
from procworld import logutil
from procworld.blocks import block_id
from procworld.cache import ColumnCache
from procworld.caves import CaveCarver
from procworld.chunk import Chunk
from procworld.climate import ClimateField
from procworld.decorations import DecorationScatter
from procworld.noise import PerlinNoise
from procworld.presets import get_preset, lookup
from procworld.structures import StructurePlacer
from procworld.terrain import TerrainColumnBuilder, resolve_layers

MASK64 = (1 << 64) - 1


def mix_seed(seed, chunk_x, chunk_z, salt):
    '''Splitmix64-style hash of (seed, chunk, salt) into a 64-bit stream seed.'''
    h = (int(chunk_x) * 0x632BE59BD9B4E019) ^ (int(chunk_z) * 0x9E3779B97F4A7C15) ^ (int(salt) * 0x94D049BB133111EB) ^ int(seed)
    h &= MASK64
    h = (h ^ (h >> 30)) * 0xbf58476d1ce4e5b9 & MASK64
    h = (h ^ (h >> 27)) * 0x94d049bb133111eb & MASK64
    h ^= (h >> 31)
    return h


def _setting(table, path, default, cast, valid=None):
    value = lookup(table, path, default)
    try:
        value = cast(value)
    except (TypeError, ValueError):
        logutil.log("CONFIG", f"{path}={value!r} is not a valid {cast.__name__}, using {default!r}", level="WARN")
        return default
    if valid is not None and not valid(value):
        logutil.log("CONFIG", f"{path}={value!r} out of range, using {default!r}", level="WARN")
        return default
    return value


class ChunkGenerator(object):
    def __init__(self, seed, preset_name='default', preset=None):
        self.seed = int(seed)
        self.preset_name = preset_name
        self.preset = preset if preset is not None else get_preset(preset_name)
        wg = lookup(self.preset, 'world-generator', {})
        biomes_config = lookup(self.preset, 'biomes', {})
        structures_config = lookup(self.preset, 'structures', {})

        total_height = _setting(wg, 'settings.total-height', config.TOTAL_HEIGHT, int,
            lambda v: 1 <= v <= config.CHUNK_HEIGHT)
        self.settings = {
            'sea_level': _setting(wg, 'settings.sea-level', config.SEA_LEVEL, int, lambda v: 0 <= v < total_height),
            'total_height': total_height,
            'min_height': _setting(wg, 'settings.min-height', config.MIN_HEIGHT, int, lambda v: 0 <= v < total_height),
            'curve': str(lookup(wg, 'algorithms.terrain.curve', config.TERRAIN_CURVE)),
            'fill_block': block_id(config.DEFAULT_FILL_BLOCK),
            'fluid_block': block_id(config.DEFAULT_FLUID_BLOCK),
        }
        self.settings['layers'] = resolve_layers(lookup(wg, 'terrain-layers', []),
            fill_block=self.settings['fill_block'])

        self.noise = PerlinNoise(self.seed,
            _setting(wg, 'algorithms.terrain.octaves', config.TERRAIN_OCTAVES, int, lambda v: v > 0),
            _setting(wg, 'algorithms.terrain.persistence', config.TERRAIN_PERSISTENCE, float, lambda v: 0 < v <= 1),
            _setting(wg, 'algorithms.terrain.scale', config.TERRAIN_SCALE, float, lambda v: v > 0))
        self.climate = ClimateField(self.seed,
            _setting(wg, 'algorithms.biome.points', config.BIOME_POINTS, int, lambda v: v > 0),
            _setting(wg, 'algorithms.biome.scale', config.BIOME_SCALE, float, lambda v: v > 0))
        self.cache = ColumnCache()
        self.terrain = TerrainColumnBuilder(self.noise, self.climate, self.cache, self.settings, biomes_config)
        self.caves = CaveCarver(self.seed,
            _setting(wg, 'algorithms.cave.scale', config.CAVE_SCALE, float, lambda v: v > 0),
            _setting(wg, 'algorithms.cave.threshold', config.CAVE_THRESHOLD, float))
        self.structures = StructurePlacer(structures_config,
            enabled=bool(lookup(wg, 'structures.enabled', config.STRUCTURES_ENABLED)))
        self.decorations = DecorationScatter(self.terrain.biome_at, biomes_config)
        logutil.log("MAPGEN", f"generator ready: seed={self.seed} preset={preset_name} "
            f"sea_level={self.settings['sea_level']} curve={self.settings['curve']}", level="DEBUG")

    def chunk_rng(self, chunk_x, chunk_z, salt):
        return numpy.random.default_rng(mix_seed(self.seed, chunk_x, chunk_z, salt))

    def surface_height(self, x, z):
        return self.terrain.surface_height(x, z)

    def biome_at(self, x, z):
        return self.terrain.biome_at(x, z)

    def _build_terrain(self, chunk, chunk_x, chunk_z):
        gx0, gz0 = chunk_x * chunk.size, chunk_z * chunk.size
        for x in range(chunk.size):
            for z in range(chunk.size):
                try:
                    self.terrain.build_column(chunk, x, z, gx0 + x, gz0 + z)
                except (KeyError, TypeError, ValueError, IndexError) as ex:
                    logutil.log("MAPGEN", f"column ({x},{z}) left partial: {ex!r}", level="WARN")

    def generate_chunk(self, world, chunk_x, chunk_z):
        '''
        Fill the chunk the world hands out for (chunk_x, chunk_z) and return it.
        Stages run in order: terrain, caves, structures, decorations.
        '''
        chunk = world.get_chunk(chunk_x, chunk_z)
        logutil.set_chunk((chunk_x, chunk_z))
        try:
            timings = []
            t0 = time.perf_counter()
            self._build_terrain(chunk, chunk_x, chunk_z)
            t1 = time.perf_counter()
            timings.append(('terrain', t1 - t0))
            self.caves.carve(chunk, chunk_x, chunk_z)
            t2 = time.perf_counter()
            timings.append(('caves', t2 - t1))
            self.structures.place_structures(chunk, chunk_x, chunk_z,
                self.chunk_rng(chunk_x, chunk_z, config.STRUCTURE_STREAM_SALT))
            t3 = time.perf_counter()
            timings.append(('structures', t3 - t2))
            self.decorations.decorate(chunk, chunk_x, chunk_z,
                self.chunk_rng(chunk_x, chunk_z, config.DECORATION_STREAM_SALT))
            t4 = time.perf_counter()
            timings.append(('decorations', t4 - t3))
            logutil.log("TIMING", ' '.join(f"{name}={dt * 1000.0:.1f}ms" for name, dt in timings)
                + f" total={(t4 - t0) * 1000.0:.1f}ms", level="DEBUG")
        finally:
            logutil.set_chunk(None)
        return chunk

    def generate(self, chunk_x, chunk_z):
        """Generate a standalone chunk without a host world."""
        chunk = Chunk(chunk_x, chunk_z)
        return self.generate_chunk(_SingleChunk(chunk), chunk_x, chunk_z)

    def get_spawn_point(self):
        return tuple(config.SPAWN_POINT)

    def clear_caches(self):
        stats = self.cache.stats()
        self.cache.clear()
        logutil.log("CACHE", f"cleared {stats['heights']} heights, {stats['biomes']} biomes "
            f"({stats['hits']} hits, {stats['misses']} misses)", level="DEBUG")


class _SingleChunk(object):
    def __init__(self, chunk):
        self.chunk = chunk

    def get_chunk(self, chunk_x, chunk_z):
        return self.chunk
