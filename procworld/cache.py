import threading


class ColumnCache(object):
    '''
    Memo of per-column results keyed by global (x, z): surface heights and
    biomes. Values are pure functions of their key, so clearing only costs
    recomputation. A single lock guards both maps; the compute callback runs
    outside the lock, so two threads racing on one key may both compute it
    and store the same value.
    '''
    def __init__(self):
        self._lock = threading.Lock()
        self._heights = {}
        self._biomes = {}
        self.hits = 0
        self.misses = 0

    def _get(self, table, key, compute):
        with self._lock:
            if key in table:
                self.hits += 1
                return table[key]
            self.misses += 1
        value = compute(*key)
        with self._lock:
            return table.setdefault(key, value)

    def height(self, x, z, compute):
        return self._get(self._heights, (int(x), int(z)), compute)

    def biome(self, x, z, compute):
        return self._get(self._biomes, (int(x), int(z)), compute)

    def clear(self):
        with self._lock:
            self._heights.clear()
            self._biomes.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self):
        with self._lock:
            return len(self._heights) + len(self._biomes)

    def stats(self):
        with self._lock:
            return {
                'heights': len(self._heights),
                'biomes': len(self._biomes),
                'hits': self.hits,
                'misses': self.misses,
            }
