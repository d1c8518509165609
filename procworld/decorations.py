from procworld import config
from procworld import logutil
from procworld.blocks import AIR, BLOCK_SOLID, block_id, COBBLE, STONE, OAK_LOG, OAK_LEAVES
from procworld.biomes import BIOMES, biome_table
from procworld.presets import lookup
from procworld.structures import randint


def _height_range(value, default):
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return int(value[0]), int(value[1])
    if value is not None:
        return int(value), int(value)
    return default


class DecorationScatter(object):
    '''
    Surface decorations per column. Each biome lists entries such as

        {'type': 'tree', 'log': 'oak_log', 'leaves': 'oak_leaves', 'height': [4, 6], 'density': 0.03}

    and every entry gets one uniform draw per column; the decoration lands on
    the column's current surface when the draw is below its density.
    '''
    def __init__(self, biome_at, biomes_config=None):
        self.biome_at = biome_at
        self.decorations = {}
        for biome in BIOMES:
            entries = lookup(biome_table(biomes_config, biome), 'decorations', [])
            self.decorations[biome] = [e for e in entries if isinstance(e, dict)] if isinstance(entries, list) else []

    def decorate(self, chunk, chunk_x, chunk_z, rng):
        placed = 0
        gx0, gz0 = chunk_x * chunk.size, chunk_z * chunk.size
        for x in range(chunk.size):
            for z in range(chunk.size):
                biome = self.biome_at(gx0 + x, gz0 + z)
                for entry in self.decorations[biome]:
                    try:
                        if rng.random() >= float(entry.get('density', 0.0)):
                            continue
                        y = chunk.find_surface(x, z)
                        if y == config.NO_SURFACE:
                            continue
                        if self.place_decoration(chunk, x, y, z, entry, rng):
                            placed += 1
                    except (KeyError, TypeError, ValueError) as ex:
                        logutil.log("MAPGEN", f"decoration {entry!r} skipped at ({x},{z}): {ex!r}", level="WARN")
        return placed

    def place_decoration(self, chunk, x, y, z, entry, rng):
        # Only solid ground carries decorations (not water, leaves or plants).
        if not BLOCK_SOLID[chunk.get_block(x, y, z)]:
            return False
        kind = entry.get('type', 'plant')
        if kind == 'tree':
            lo, hi = _height_range(entry.get('height'), (4, 6))
            return self._place_tree(chunk, x, y, z, randint(rng, lo, hi),
                block_id(entry.get('log', 'oak_log'), default=OAK_LOG),
                block_id(entry.get('leaves', 'oak_leaves'), default=OAK_LEAVES))
        if kind == 'cactus':
            lo, hi = _height_range(entry.get('height'), (1, 3))
            return self._place_column(chunk, x, y, z, randint(rng, lo, hi), block_id(entry.get('block', 'cactus')))
        if kind == 'boulder':
            self._place_boulder(chunk, x, y, z, int(entry.get('radius', 1)), block_id(entry.get('block', 'cobblestone'), default=COBBLE))
            return True
        return self._place_column(chunk, x, y, z, 1, block_id(entry.get('block')))

    def _place_column(self, chunk, x, y, z, height, block):
        if y + 1 >= chunk.height or chunk.get_block(x, y + 1, z) != AIR:
            return False
        for dy in range(1, height + 1):
            if y + dy >= chunk.height or chunk.get_block(x, y + dy, z) != AIR:
                break
            chunk.set_block(x, y + dy, z, block)
        return True

    def _place_tree(self, chunk, x, ground_y, z, height, log, leaves, radius=2):
        # Keep canopies inside the chunk and under the ceiling.
        if ground_y + height + 2 >= chunk.height:
            return False
        if x < radius or z < radius or x >= chunk.size - radius or z >= chunk.size - radius:
            return False
        for dy in range(1, height + 1):
            chunk.set_block(x, ground_y + dy, z, log)
        top = ground_y + height
        for dx in range(-radius, radius + 1):
            for dz in range(-radius, radius + 1):
                for dy in range(-1, 2):
                    if abs(dx) + abs(dz) + abs(dy) > radius + 1:
                        continue
                    cx, cy, cz = x + dx, top + dy, z + dz
                    if chunk.get_block(cx, cy, cz) == AIR:
                        chunk.set_block(cx, cy, cz, leaves)
        return True

    def _place_boulder(self, chunk, x, ground_y, z, radius, block):
        for dx in range(-radius, radius + 1):
            for dz in range(-radius, radius + 1):
                if dx * dx + dz * dz > radius * radius + 1:
                    continue
                top = ground_y + 1 + max(0, 1 - abs(dx) - abs(dz))
                for h in range(ground_y + 1, top + 1):
                    chunk.set_block(x + dx, h, z + dz, block if (dx + dz) % 2 else STONE)
