from procworld import config
from procworld import logutil
from procworld.blocks import (AIR, block_id, BRICK, COBBLE, MOSSY_COBBLE, PLANKS, GLASS,
    FARMLAND, WATER, OAK_LOG)
from procworld.presets import lookup

ARCHETYPES = ('hut', 'house', 'farm', 'well', 'tower')


def randint(rng, lo, hi):
    """Uniform integer in [lo, hi] inclusive; a reversed range is swapped."""
    lo, hi = int(lo), int(hi)
    if hi < lo:
        lo, hi = hi, lo
    return int(rng.integers(lo, hi + 1))


def select_building(rng, buildings):
    '''
    Pick an archetype: uniform over a list, weighted over a
    {name: weight} mapping. Empty or malformed tables give 'hut'.
    '''
    if isinstance(buildings, dict):
        names = [k for k, w in buildings.items() if float(w) > 0]
        weights = [float(buildings[k]) for k in names]
        if not names:
            return 'hut'
        total = sum(weights)
        return names[int(rng.choice(len(names), p=[w / total for w in weights]))]
    if isinstance(buildings, (list, tuple)) and buildings:
        return str(buildings[int(rng.integers(0, len(buildings)))])
    return 'hut'


class StructurePlacer(object):
    '''
    Per-chunk stochastic placement of villages, dungeons and ruins.

    Every kind in the structures table gets one uniform draw per chunk and
    attempts placement when the draw is below its rarity. The anchor is a
    random column of the chunk; an empty column abandons that attempt.
    All randomness comes from the rng handed in, so layouts repeat for the
    same (seed, chunk).
    '''
    def __init__(self, structures_config, enabled=True):
        self.structures = structures_config if isinstance(structures_config, dict) else {}
        self.enabled = enabled
        self.generators = {
            'village': self.generate_village,
            'dungeon': self.generate_dungeon,
            'ruins': self.generate_ruins,
        }

    def should_attempt(self, rng, rarity):
        return rng.random() < float(rarity)

    def place_structures(self, chunk, chunk_x, chunk_z, rng):
        '''
        Returns one (kind, x, y, z) entry per attempt, in chunk-local
        coordinates; y is config.NO_SURFACE for abandoned attempts.
        '''
        attempts = []
        if not self.enabled:
            return attempts
        for kind, cfg in self.structures.items():
            try:
                if not lookup(cfg, 'enabled', False):
                    continue
                if not self.should_attempt(rng, lookup(cfg, 'rarity', 0.0)):
                    continue
                attempts.append(self.generate_structure(chunk, kind, cfg, rng))
            except (KeyError, TypeError, ValueError) as ex:
                logutil.log("MAPGEN", f"structure {kind} skipped in chunk ({chunk_x},{chunk_z}): {ex!r}", level="WARN")
        return attempts

    def generate_structure(self, chunk, kind, cfg, rng):
        x = int(rng.integers(0, chunk.size))
        z = int(rng.integers(0, chunk.size))
        y = chunk.find_surface(x, z)
        if y == config.NO_SURFACE:
            logutil.log("MAPGEN", f"{kind} at ({x},{z}) has no surface, skipped", level="DEBUG")
            return (kind, x, y, z)
        generator = self.generators.get(kind)
        if generator is None:
            logutil.log("MAPGEN", f"no generator for structure kind {kind!r}", level="WARN")
            return (kind, x, config.NO_SURFACE, z)
        generator(chunk, x, y, z, cfg, rng)
        logutil.log("MAPGEN", f"placed {kind} at ({x},{y},{z})", level="DEBUG")
        return (kind, x, y, z)

    # ----- villages -----

    def generate_village(self, chunk, x, y, z, cfg, rng):
        size = randint(rng, lookup(cfg, 'min-size', 2), lookup(cfg, 'max-size', 5))
        radius = int(lookup(cfg, 'radius', 6))
        buildings = lookup(cfg, 'buildings', list(ARCHETYPES))
        placed = []
        for _ in range(size):
            btype = select_building(rng, buildings)
            bx = x + randint(rng, -radius, radius)
            bz = z + randint(rng, -radius, radius)
            if 0 <= bx < chunk.size and 0 <= bz < chunk.size:
                by = chunk.find_surface(bx, bz)
            else:
                by = y
            if by == config.NO_SURFACE:
                continue
            self.generate_building(chunk, bx, by, bz, btype, rng)
            placed.append((btype, bx, by, bz))
        return placed

    def generate_building(self, chunk, x, y, z, btype, rng):
        """Stamp one archetype centred on (x, z) standing on ground height y."""
        orient = 'z+' if rng.random() < 0.5 else 'z-'
        if btype == 'hut':
            self._place_rect_building(chunk, x - 2, z - 2, y, width=4, depth=4, height=3,
                wall_block=PLANKS, roof_block=OAK_LOG, pitched=True, doorway_dir=orient)
        elif btype == 'house':
            self._place_rect_building(chunk, x - 3, z - 2, y, width=6, depth=5, height=4,
                wall_block=PLANKS, roof_block=OAK_LOG, pitched=True, doorway_dir=orient)
        elif btype == 'tower':
            self._place_rect_building(chunk, x - 1, z - 1, y, width=3, depth=3, height=7,
                wall_block=BRICK, roof_block=BRICK, pitched=False, doorway_dir=orient)
        elif btype == 'farm':
            self._place_farm(chunk, x - 2, z - 2, y)
        elif btype == 'well':
            self._place_well(chunk, x - 1, z - 1, y)
        else:
            logutil.log("MAPGEN", f"unknown building {btype!r}, using a hut", level="DEBUG")
            self.generate_building(chunk, x, y, z, 'hut', rng)

    def _place_rect_building(self, chunk, x, z, ground_y, width, depth, height, wall_block, roof_block, pitched=True, doorway_dir='z+', windows=True):
        """Rectangular building with a two-high doorway and glass windows."""
        base_y = ground_y + 1
        roof_y = base_y + height
        # Floor and foundation
        for dx in range(width):
            for dz in range(depth):
                chunk.set_block(x + dx, ground_y, z + dz, COBBLE)
                chunk.set_block(x + dx, base_y, z + dz, PLANKS)
                for dy in range(1, height):
                    chunk.set_block(x + dx, base_y + dy, z + dz, AIR)
        # Walls with doorway and windows
        door_x = x + width // 2
        door_z = z + depth - 1 if doorway_dir == 'z+' else z
        for dy in range(1, height):
            wy = base_y + dy
            for dx in range(width):
                for dz in range(depth):
                    wx, wz = x + dx, z + dz
                    at_edge = dx == 0 or dx == width - 1 or dz == 0 or dz == depth - 1
                    if not at_edge:
                        continue
                    # Door opening 2 blocks tall
                    if wx == door_x and wz == door_z and dy <= 2:
                        continue
                    # Windows in middle height
                    mid_band = (dy == max(2, height // 2)) and windows
                    if mid_band and ((dx % (width - 1) == 0 and dz % 2 == 1) or (dz % (depth - 1) == 0 and dx % 2 == 1)):
                        chunk.set_block(wx, wy, wz, GLASS)
                        continue
                    chunk.set_block(wx, wy, wz, wall_block)
        # Roof
        if pitched:
            left = 0
            right = width - 1
            step = 0
            while left <= right:
                ry = roof_y + step
                for dx in range(left, right + 1):
                    for dz in range(depth):
                        chunk.set_block(x + dx, ry, z + dz, roof_block)
                left += 1
                right -= 1
                step += 1
        else:
            for dx in range(width):
                for dz in range(depth):
                    chunk.set_block(x + dx, roof_y, z + dz, roof_block)

    def _place_farm(self, chunk, x, z, ground_y):
        # 5x5 plot: log border, farmland rows, water channel down the middle
        size = 5
        for dx in range(size):
            for dz in range(size):
                border = dx in (0, size - 1) or dz in (0, size - 1)
                if border:
                    block = OAK_LOG
                elif dx == size // 2:
                    block = WATER
                else:
                    block = FARMLAND
                chunk.set_block(x + dx, ground_y, z + dz, block)
                chunk.set_block(x + dx, ground_y + 1, z + dz, AIR)

    def _place_well(self, chunk, x, z, ground_y):
        # 3x3 cobble ring around a two-deep water shaft, corner posts and a plank roof
        for dx in range(3):
            for dz in range(3):
                wx, wz = x + dx, z + dz
                if dx == 1 and dz == 1:
                    chunk.set_block(wx, ground_y, wz, WATER)
                    chunk.set_block(wx, ground_y - 1, wz, WATER)
                    chunk.set_block(wx, ground_y + 1, wz, AIR)
                else:
                    chunk.set_block(wx, ground_y, wz, COBBLE)
                    chunk.set_block(wx, ground_y + 1, wz, COBBLE)
                corner = dx in (0, 2) and dz in (0, 2)
                chunk.set_block(wx, ground_y + 2, wz, OAK_LOG if corner else AIR)
                chunk.set_block(wx, ground_y + 3, wz, PLANKS)

    # ----- dungeons -----

    def generate_dungeon(self, chunk, x, y, z, cfg, rng):
        rooms = randint(rng, lookup(cfg, 'rooms.min', 2), lookup(cfg, 'rooms.max', 5))
        floor_y = max(1, y - int(lookup(cfg, 'depth', 0)))
        self._dungeon_room(chunk, x, floor_y, z, *config.DUNGEON_FIRST_ROOM)
        centers = [(x, z)]
        spacing = config.DUNGEON_ROOM_SPACING
        for _ in range(1, rooms):
            dir_x = int(rng.integers(-1, 2))
            dir_z = int(rng.integers(-1, 2))
            # offsets are from the anchor room, not the previous room
            new_x = x + dir_x * spacing
            new_z = z + dir_z * spacing
            self._dungeon_room(chunk, new_x, floor_y, new_z, *config.DUNGEON_ROOM)
            self._dungeon_corridor(chunk, x, floor_y, z, new_x, new_z)
            centers.append((new_x, new_z))
        return centers

    def _dungeon_room(self, chunk, cx, floor_y, cz, width, depth, height):
        """Walled room centred on (cx, cz): cobble floor and ceiling, mossy walls, air inside."""
        x0 = cx - width // 2
        z0 = cz - depth // 2
        for dx in range(width):
            for dz in range(depth):
                wx, wz = x0 + dx, z0 + dz
                at_edge = dx == 0 or dx == width - 1 or dz == 0 or dz == depth - 1
                chunk.set_block(wx, floor_y, wz, COBBLE)
                for dy in range(1, height + 1):
                    if at_edge:
                        block = MOSSY_COBBLE if (dx + dz + dy) % 3 == 0 else COBBLE
                    else:
                        block = AIR
                    chunk.set_block(wx, floor_y + dy, wz, block)
                chunk.set_block(wx, floor_y + height + 1, wz, COBBLE)

    def _dungeon_corridor(self, chunk, x0, floor_y, z0, x1, z1):
        """L-shaped corridor: along x at z0, then along z at x1. Two high, cobble floor."""
        def dig(wx, wz):
            chunk.set_block(wx, floor_y, wz, COBBLE)
            chunk.set_block(wx, floor_y + 1, wz, AIR)
            chunk.set_block(wx, floor_y + 2, wz, AIR)

        for wx in range(min(x0, x1), max(x0, x1) + 1):
            dig(wx, z0)
        for wz in range(min(z0, z1), max(z0, z1) + 1):
            dig(x1, wz)

    # ----- ruins -----

    def generate_ruins(self, chunk, x, y, z, cfg, rng):
        count = randint(rng, lookup(cfg, 'fragments.min', 2), lookup(cfg, 'fragments.max', 4))
        radius = int(lookup(cfg, 'radius', 5))
        decay = float(lookup(cfg, 'decay', 0.35))
        names = lookup(cfg, 'blocks', ['cobblestone', 'mossy_cobblestone'])
        if isinstance(names, str):
            names = [names]
        materials = [block_id(name, default=COBBLE) for name in names] or [COBBLE]
        fragments = []
        for _ in range(count):
            fx = x + randint(rng, -radius, radius)
            fz = z + randint(rng, -radius, radius)
            if 0 <= fx < chunk.size and 0 <= fz < chunk.size:
                ground = chunk.find_surface(fx, fz)
            else:
                ground = y
            length = randint(rng, 2, 5)
            height = randint(rng, 1, 3)
            along_x = rng.random() < 0.5
            if ground == config.NO_SURFACE:
                continue
            for i in range(length):
                wx = fx + i if along_x else fx
                wz = fz if along_x else fz + i
                chunk.set_block(wx, ground, wz, COBBLE)
                for dy in range(1, height + 1):
                    if rng.random() < decay:
                        continue
                    block = materials[int(rng.integers(0, len(materials)))]
                    chunk.set_block(wx, ground + dy, wz, block)
            fragments.append((fx, ground, fz, length, height))
        return fragments
