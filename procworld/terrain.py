import math

from procworld import config
from procworld import logutil
from procworld.blocks import AIR, block_id
from procworld.biomes import BIOMES, biome_table, classify
from procworld.presets import lookup


def apply_terrain_curve(n, curve):
    '''
    Reshape normalized terrain noise. 'mountains' squares the magnitude but
    keeps the sign; 'hills' remaps onto [0, 1] whatever the input; anything
    else ('plains', 'standard', unknown) leaves the value alone.
    '''
    if curve == 'mountains':
        return n * abs(n)
    if curve == 'hills':
        return math.sin(n * config.HILLS_PERIOD) * 0.5 + 0.5
    return n


def resolve_layers(layer_specs, fill_block=None):
    """Preset layer list -> [(depth, block id)], top-down."""
    layers = []
    if not isinstance(layer_specs, (list, tuple)):
        if layer_specs is not None:
            logutil.log("CONFIG", f"terrain-layers must be a list, got {layer_specs!r}", level="WARN")
        return layers
    for spec in layer_specs:
        try:
            depth = int(spec.get('depth', 0))
        except (AttributeError, TypeError, ValueError):
            logutil.log("CONFIG", f"malformed terrain layer {spec!r} skipped", level="WARN")
            continue
        if depth < 0:
            logutil.log("CONFIG", f"negative layer depth in {spec!r} treated as 0", level="WARN")
            depth = 0
        layers.append((depth, block_id(spec.get('block'), default=fill_block)))
    return layers


class TerrainColumnBuilder(object):
    '''
    Builds one column at a time: surface height from the terrain noise,
    material layers down to the floor, fluid up to sea level, then the
    biome's surface and subsurface blocks on top.

    Heights and biomes go through the shared ColumnCache.
    '''
    def __init__(self, noise, climate, cache, settings, biomes_config=None):
        self.noise = noise
        self.climate = climate
        self.cache = cache
        self.sea_level = settings['sea_level']
        self.total_height = settings['total_height']
        self.min_height = settings['min_height']
        self.curve = settings['curve']
        self.fill_block = settings['fill_block']
        self.fluid_block = settings['fluid_block']
        self.layers = settings['layers']
        self.biome_blocks = {}
        for biome in BIOMES:
            table = biome_table(biomes_config, biome)
            self.biome_blocks[biome] = (
                block_id(lookup(table, 'blocks.surface', config.DEFAULT_SURFACE_BLOCK)),
                block_id(lookup(table, 'blocks.subsurface', config.DEFAULT_SUBSURFACE_BLOCK)),
            )

    def compute_height(self, x, z):
        n = self.noise.noise2(x, z, normalized=True)
        n = apply_terrain_curve(n, self.curve)
        height = int(self.min_height + (n + 1) * 0.5 * (self.total_height - self.min_height))
        return min(max(height, 0), self.total_height - 1)

    def surface_height(self, x, z):
        return self.cache.height(x, z, self.compute_height)

    def compute_biome(self, x, z):
        climate = self.climate.climate_at(x, z)
        return classify(climate.temperature, climate.humidity)

    def biome_at(self, x, z):
        return self.cache.biome(x, z, self.compute_biome)

    def fill_layers(self, chunk, x, z, surface):
        column = chunk.blocks[x, :, z]
        top = min(surface, chunk.height - 1)
        for depth, block in self.layers:
            if top < 0:
                return
            if depth > 0:
                column[max(top - depth + 1, 0):top + 1] = block
            top -= depth
        if top >= 0:
            column[:top + 1] = self.fill_block

    def fill_water(self, chunk, x, z, surface):
        if surface >= self.sea_level:
            return
        top = min(self.sea_level, chunk.height - 1)
        gap = chunk.blocks[x, surface + 1:top + 1, z]
        gap[gap == AIR] = self.fluid_block

    def apply_biome_blocks(self, chunk, x, z, biome):
        y = chunk.find_surface(x, z)
        if y == config.NO_SURFACE:
            return False
        surface_block, subsurface_block = self.biome_blocks[biome]
        chunk.set_block(x, y, z, surface_block)
        chunk.set_block(x, y - 1, z, subsurface_block)
        return True

    def build_column(self, chunk, local_x, local_z, global_x, global_z):
        height = self.surface_height(global_x, global_z)
        self.fill_layers(chunk, local_x, local_z, height)
        self.fill_water(chunk, local_x, local_z, height)
        biome = self.biome_at(global_x, global_z)
        self.apply_biome_blocks(chunk, local_x, local_z, biome)
        chunk.set_biome(local_x, local_z, biome)
        return height
