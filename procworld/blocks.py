import threading

import numpy

from procworld import config
from procworld import logutil

AIR = 0


class Block(object):
    name = None
    solid = True

class Decoration(object):
    solid = False

class Grass(Block):
    name = 'grass'

class Dirt(Block):
    name = 'dirt'

class Stone(Block):
    name = 'stone'

class Sand(Block):
    name = 'sand'

class Water(Block):
    name = 'water'
    solid = False

class Bedrock(Block):
    name = 'bedrock'

class Sandstone(Block):
    name = 'sandstone'

class OakLog(Block):
    name = 'oak_log'

class OakLeaves(Block):
    name = 'oak_leaves'
    solid = False

class BirchLog(Block):
    name = 'birch_log'

class BirchLeaves(Block):
    name = 'birch_leaves'
    solid = False

class Cactus(Block):
    name = 'cactus'

class CoalOre(Block):
    name = 'coal_ore'

class Gravel(Block):
    name = 'gravel'

class Cobblestone(Block):
    name = 'cobblestone'

class MossyCobblestone(Block):
    name = 'mossy_cobblestone'

class Planks(Block):
    name = 'planks'

class Brick(Block):
    name = 'brick'

class Glass(Block):
    name = 'glass'
    solid = False

class Farmland(Block):
    name = 'farmland'

class TallGrass(Decoration, Block):
    name = 'tall_grass'

class Rose(Decoration, Block):
    name = 'rose'

class DeadBush(Decoration, Block):
    name = 'dead_bush'


BLOCKS = [
    Grass,
    Dirt,
    Stone,
    Sand,
    Water,
    Bedrock,
    Sandstone,
    OakLog,
    OakLeaves,
    BirchLog,
    BirchLeaves,
    Cactus,
    CoalOre,
    Gravel,
    Cobblestone,
    MossyCobblestone,
    Planks,
    Brick,
    Glass,
    Farmland,
    TallGrass,
    Rose,
    DeadBush,
]

# Id 0 is air; registered blocks are numbered from 1 in list order.
BLOCK_ID = {'air': AIR}
for i, x in enumerate(BLOCKS):
    BLOCK_ID[x.name] = i + 1
BLOCK_NAME = {v: k for k, v in BLOCK_ID.items()}

BLOCK_SOLID = numpy.array([False] + [x.solid for x in BLOCKS], dtype = numpy.uint8)

GRASS = BLOCK_ID['grass']
DIRT = BLOCK_ID['dirt']
STONE = BLOCK_ID['stone']
WATER = BLOCK_ID['water']
COBBLE = BLOCK_ID['cobblestone']
MOSSY_COBBLE = BLOCK_ID['mossy_cobblestone']
PLANKS = BLOCK_ID['planks']
BRICK = BLOCK_ID['brick']
GLASS = BLOCK_ID['glass']
FARMLAND = BLOCK_ID['farmland']
OAK_LOG = BLOCK_ID['oak_log']
OAK_LEAVES = BLOCK_ID['oak_leaves']

_warned = set()
_warned_lock = threading.Lock()


def block_id(name, default=None):
    """Resolve a material name from a preset to its block id.

    Unknown or malformed names resolve to ``default`` (the configured dense
    fill material when not given) and are reported once per name.
    """
    if isinstance(name, str):
        key = name.strip().lower()
        if key in BLOCK_ID:
            return BLOCK_ID[key]
    if default is None:
        default = BLOCK_ID.get(config.DEFAULT_FILL_BLOCK, STONE)
    with _warned_lock:
        first = name not in _warned if isinstance(name, str) else True
        if isinstance(name, str):
            _warned.add(name)
    if first:
        logutil.log("BLOCKS", f"unknown block name {name!r}, using {BLOCK_NAME.get(default, default)}", level="WARN")
    return default
