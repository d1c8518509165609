import threading
import zlib

import numpy

from procworld import logutil
from procworld.chunk import Chunk
from procworld.mapgen import ChunkGenerator


def hash_seed(seed):
    """Stable integer seed for a seed string (crc32, same value in every process)."""
    return zlib.crc32(str(seed).encode('utf-8'))


def random_seed():
    return int(numpy.random.default_rng().integers(0, 2 ** 31))


class World(object):
    '''
    Minimal host world: holds chunks by coordinate and hands them to its
    generator. get_chunk always returns the stored chunk for a coordinate,
    creating an empty one the first time.
    '''
    def __init__(self, name, seed, preset='default'):
        self.name = name
        self.seed = int(seed)
        self.preset = preset
        self.generator = ChunkGenerator(self.seed, preset)
        self.chunks = {}
        self._generated = set()
        self._lock = threading.Lock()

    def __repr__(self):
        return f"World({self.name!r}, seed={self.seed})"

    def get_chunk(self, chunk_x, chunk_z):
        key = (int(chunk_x), int(chunk_z))
        with self._lock:
            chunk = self.chunks.get(key)
            if chunk is None:
                chunk = self.chunks[key] = Chunk(*key)
        return chunk

    def load_chunk(self, chunk_x, chunk_z):
        """The generated chunk at (chunk_x, chunk_z), generating it on first request."""
        key = (int(chunk_x), int(chunk_z))
        with self._lock:
            done = key in self._generated
        if not done:
            self.generator.generate_chunk(self, *key)
            with self._lock:
                self._generated.add(key)
        return self.get_chunk(*key)

    def get_spawn_point(self):
        return self.generator.get_spawn_point()


class WorldManager(object):
    def __init__(self):
        self.worlds = {}

    def get_world_by_name(self, name):
        return self.worlds.get(name)

    def create_world(self, name, seed="", preset='default'):
        '''
        Register a new world using the procedural generator. An empty seed
        picks a random one. Returns False when the name is already taken.
        '''
        if self.get_world_by_name(name) is not None:
            logutil.log("WORLD", f"world {name!r} already exists", level="WARN")
            return False
        numeric_seed = hash_seed(seed) if seed else random_seed()
        self.worlds[name] = World(name, numeric_seed, preset)
        logutil.log("WORLD", f"created world {name!r} seed={numeric_seed} preset={preset}")
        return True
