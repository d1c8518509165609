'''
Top-down previews of a generator's terrain: surface height as greyscale and
biomes as flat colours. Needs Pillow (the ``preview`` extra).

    python -m procworld.preview 42 default 8
'''
import sys

import numpy

from procworld.biomes import Biome

BIOME_COLORS = {
    Biome.OCEAN: (40, 80, 200),
    Biome.PLAINS: (120, 190, 80),
    Biome.DESERT: (230, 210, 140),
    Biome.MOUNTAINS: (130, 130, 130),
    Biome.FOREST: (30, 110, 40),
}


def height_map(generator, x0, z0, width, depth):
    """(width, depth) int array of terrain heights starting at global (x0, z0)."""
    heights = numpy.zeros((width, depth), dtype=numpy.int32)
    for x in range(width):
        for z in range(depth):
            heights[x, z] = generator.surface_height(x0 + x, z0 + z)
    return heights


def biome_map(generator, x0, z0, width, depth):
    biomes = numpy.zeros((width, depth), dtype='u1')
    for x in range(width):
        for z in range(depth):
            biomes[x, z] = generator.biome_at(x0 + x, z0 + z)
    return biomes


def height_image(heights, total_height):
    from PIL import Image
    grey = numpy.clip(heights * 255.0 / max(total_height - 1, 1), 0, 255).astype('u1')
    # rows are z, columns are x
    return Image.fromarray(numpy.ascontiguousarray(grey.T), 'L')


def biome_image(biomes):
    from PIL import Image
    rgb = numpy.zeros(biomes.shape + (3,), dtype='u1')
    for biome, color in BIOME_COLORS.items():
        rgb[biomes == int(biome)] = color
    return Image.fromarray(numpy.ascontiguousarray(rgb.transpose(1, 0, 2)), 'RGB')


def render(generator, chunk_x, chunk_z, radius, prefix='preview'):
    '''
    Write <prefix>_height.png and <prefix>_biome.png covering the square of
    chunks within ``radius`` of (chunk_x, chunk_z). Returns the two paths.
    '''
    from procworld import config
    size = config.CHUNK_SIZE
    x0 = (chunk_x - radius) * size
    z0 = (chunk_z - radius) * size
    span = (2 * radius + 1) * size
    heights = height_map(generator, x0, z0, span, span)
    biomes = biome_map(generator, x0, z0, span, span)
    paths = (prefix + '_height.png', prefix + '_biome.png')
    height_image(heights, generator.settings['total_height']).save(paths[0])
    biome_image(biomes).save(paths[1])
    return paths


if __name__ == '__main__':
    import time
    from procworld.mapgen import ChunkGenerator

    seed = int(sys.argv[1]) if len(sys.argv) > 1 else 42
    preset = sys.argv[2] if len(sys.argv) > 2 else 'default'
    radius = int(sys.argv[3]) if len(sys.argv) > 3 else 4
    t = time.time()
    gen = ChunkGenerator(seed, preset)
    print('wrote', *render(gen, 0, 0, radius, prefix=f"preview_{seed}_{preset}"))
    print('elapsed', time.time() - t)
