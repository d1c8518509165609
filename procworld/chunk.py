import hashlib

import numpy

from procworld import config
from procworld.blocks import AIR


class Chunk(object):
    '''
    One generation unit: a (CHUNK_SIZE, height, CHUNK_SIZE) volume of block
    ids indexed [x, y, z] plus a (CHUNK_SIZE, CHUNK_SIZE) biome id overlay.
    Coordinates are chunk-local.
    '''
    def __init__(self, chunk_x=0, chunk_z=0, height=config.CHUNK_HEIGHT):
        self.chunk_x = chunk_x
        self.chunk_z = chunk_z
        self.size = config.CHUNK_SIZE
        self.height = height
        self.blocks = numpy.zeros((self.size, height, self.size), dtype='u2')
        self.biomes = numpy.zeros((self.size, self.size), dtype='u1')

    def __repr__(self):
        return f"Chunk({self.chunk_x}, {self.chunk_z})"

    @property
    def origin(self):
        """Global (x, z) of local column (0, 0)."""
        return self.chunk_x * self.size, self.chunk_z * self.size

    def in_bounds(self, x, y, z):
        return 0 <= x < self.size and 0 <= y < self.height and 0 <= z < self.size

    def get_block(self, x, y, z):
        return int(self.blocks[x, y, z])

    def set_block(self, x, y, z, block):
        """Write one cell; writes outside the chunk are dropped. Returns True if written."""
        if not self.in_bounds(x, y, z):
            return False
        self.blocks[x, y, z] = block
        return True

    def get_biome(self, x, z):
        return int(self.biomes[x, z])

    def set_biome(self, x, z, biome):
        self.biomes[x, z] = int(biome)

    def find_surface(self, x, z):
        '''
        Height of the topmost non-air cell of column (x, z), or
        config.NO_SURFACE when the whole column is air.
        '''
        occupied = numpy.flatnonzero(self.blocks[x, :, z] != AIR)
        if occupied.size == 0:
            return config.NO_SURFACE
        return int(occupied[-1])

    def surface_heights(self):
        """(CHUNK_SIZE, CHUNK_SIZE) map of find_surface for every column."""
        occupied = self.blocks != AIR
        any_occupied = occupied.any(axis=1)
        top = (self.height - 1) - numpy.argmax(occupied[:, ::-1, :], axis=1)
        return numpy.where(any_occupied, top, config.NO_SURFACE)

    def copy(self):
        other = Chunk(self.chunk_x, self.chunk_z, self.height)
        other.blocks[...] = self.blocks
        other.biomes[...] = self.biomes
        return other

    def tobytes(self):
        return self.blocks.tobytes() + self.biomes.tobytes()

    def digest(self):
        return hashlib.sha1(self.tobytes()).hexdigest()

    def __eq__(self, other):
        if not isinstance(other, Chunk):
            return NotImplemented
        return (self.blocks.shape == other.blocks.shape
                and numpy.array_equal(self.blocks, other.blocks)
                and numpy.array_equal(self.biomes, other.biomes))

    __hash__ = None
