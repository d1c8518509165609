'''
Built-in generator presets.

A preset is a plain dict with the three tables a generator reads:

    world-generator  settings, noise algorithms, terrain layers, structure switch
    biomes           per-biome surface/subsurface blocks and decorations
    structures       per-kind enabled flag, rarity and size parameters

Every key is optional; readers go through ``lookup`` and fall back to the
defaults in ``procworld.config``.
'''
import copy

from procworld import logutil

DEFAULT = {
    'world-generator': {
        'settings': {
            'sea-level': 62,
            'total-height': 128,
        },
        'algorithms': {
            'terrain': {'octaves': 4, 'persistence': 0.5, 'scale': 0.01, 'curve': 'standard'},
            'biome': {'points': 50, 'scale': 0.005},
            'cave': {'scale': 0.05, 'threshold': 0.4},
        },
        'terrain-layers': [
            {'depth': 1, 'block': 'grass'},
            {'depth': 3, 'block': 'dirt'},
        ],
        'structures': {'enabled': True},
    },
    'biomes': {
        'plains': {
            'blocks': {'surface': 'grass', 'subsurface': 'dirt'},
            'decorations': [
                {'type': 'plant', 'block': 'tall_grass', 'density': 0.08},
                {'type': 'plant', 'block': 'rose', 'density': 0.01},
                {'type': 'tree', 'log': 'oak_log', 'leaves': 'oak_leaves', 'height': [4, 5], 'density': 0.004},
            ],
        },
        'forest': {
            'blocks': {'surface': 'grass', 'subsurface': 'dirt'},
            'decorations': [
                {'type': 'tree', 'log': 'oak_log', 'leaves': 'oak_leaves', 'height': [4, 6], 'density': 0.03},
                {'type': 'tree', 'log': 'birch_log', 'leaves': 'birch_leaves', 'height': [5, 7], 'density': 0.015},
                {'type': 'plant', 'block': 'tall_grass', 'density': 0.05},
            ],
        },
        'desert': {
            'blocks': {'surface': 'sand', 'subsurface': 'sandstone'},
            'decorations': [
                {'type': 'cactus', 'block': 'cactus', 'height': [1, 3], 'density': 0.008},
                {'type': 'plant', 'block': 'dead_bush', 'density': 0.01},
            ],
        },
        'mountains': {
            'blocks': {'surface': 'stone', 'subsurface': 'gravel'},
            'decorations': [
                {'type': 'boulder', 'block': 'cobblestone', 'radius': 1, 'density': 0.004},
                {'type': 'tree', 'log': 'oak_log', 'leaves': 'oak_leaves', 'height': [4, 5], 'density': 0.002},
            ],
        },
        'ocean': {
            'blocks': {'surface': 'sand', 'subsurface': 'gravel'},
            'decorations': [],
        },
    },
    'structures': {
        'village': {
            'enabled': True,
            'rarity': 0.02,
            'min-size': 2,
            'max-size': 5,
            'radius': 6,
            'buildings': {'hut': 3, 'house': 2, 'farm': 2, 'well': 1, 'tower': 1},
        },
        'dungeon': {
            'enabled': True,
            'rarity': 0.05,
            'rooms': {'min': 2, 'max': 5},
        },
        'ruins': {
            'enabled': True,
            'rarity': 0.03,
            'fragments': {'min': 2, 'max': 4},
            'radius': 5,
            'decay': 0.35,
        },
    },
}


def _merge(base, overrides):
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


PRESETS = {
    'default': DEFAULT,
    'mountains': _merge(DEFAULT, {
        'world-generator': {
            'algorithms': {
                'terrain': {'octaves': 5, 'scale': 0.008, 'curve': 'mountains'},
                'cave': {'threshold': 0.35},
            },
            'terrain-layers': [
                {'depth': 1, 'block': 'grass'},
                {'depth': 2, 'block': 'dirt'},
                {'depth': 4, 'block': 'gravel'},
            ],
        },
        'structures': {
            'dungeon': {'rarity': 0.08, 'depth': 10},
            'village': {'rarity': 0.01},
        },
    }),
    'hills': _merge(DEFAULT, {
        'world-generator': {
            'algorithms': {
                'terrain': {'octaves': 3, 'persistence': 0.6, 'scale': 0.015, 'curve': 'hills'},
            },
        },
    }),
    'flat': _merge(DEFAULT, {
        'world-generator': {
            'settings': {'sea-level': 40},
            'algorithms': {
                'terrain': {'octaves': 1, 'persistence': 1.0, 'scale': 0.001, 'curve': 'plains'},
                # normalized noise never exceeds 1
                'cave': {'threshold': 1.1},
            },
            'structures': {'enabled': False},
        },
    }),
}


def get_preset(name):
    """A private copy of the named preset; unknown names fall back to 'default'."""
    key = str(name or 'default').strip().lower()
    if key not in PRESETS:
        logutil.log("CONFIG", f"unknown preset {name!r}, using 'default'", level="WARN")
        key = 'default'
    return copy.deepcopy(PRESETS[key])


_MISSING = object()


def lookup(table, path, default=None):
    '''
    Read a dotted key path ('world-generator.settings.sea-level') from nested
    dicts. Missing keys, non-dict intermediates and explicit None values all
    resolve to ``default``.
    '''
    node = table
    for part in path.split('.'):
        if not isinstance(node, dict):
            node = _MISSING
            break
        node = node.get(part, _MISSING)
        if node is _MISSING:
            break
    if node is _MISSING or node is None:
        logutil.log("CONFIG", f"{path} not set, using default {default!r}", level="DEBUG")
        return default
    return node
