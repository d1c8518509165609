import numpy

from procworld import config
from procworld.blocks import AIR
from procworld.noise import PerlinNoise


class CaveCarver(object):
    """Clears every cell above the floor where 3D cave noise exceeds the threshold."""
    def __init__(self, seed, scale=config.CAVE_SCALE, threshold=config.CAVE_THRESHOLD):
        self.noise = PerlinNoise(seed + config.CAVE_SEED_OFFSET, config.CAVE_OCTAVES,
            config.CAVE_PERSISTENCE, scale)
        self.threshold = float(threshold)

    def cave_mask(self, chunk_x, chunk_z, size=config.CHUNK_SIZE, height=config.CHUNK_HEIGHT):
        '''
        Boolean (size, height, size) mask of cells to clear. Row y = 0 is
        always False.
        '''
        X, Y, Z = numpy.mgrid[0:size, 1:height, 0:size].astype(numpy.float64)
        X += chunk_x * size
        Z += chunk_z * size
        values = self.noise.noise3(X, Y, Z, normalized=True)
        mask = numpy.zeros((size, height, size), dtype=bool)
        mask[:, 1:, :] = values > self.threshold
        return mask

    def carve(self, chunk, chunk_x, chunk_z):
        mask = self.cave_mask(chunk_x, chunk_z, chunk.size, chunk.height)
        chunk.blocks[mask] = AIR
        return int(mask.sum())
