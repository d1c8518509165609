from enum import IntEnum

from procworld import config
from procworld import logutil


class Biome(IntEnum):
    """Closed set of biome tags; values are the ids written to the chunk overlay."""
    OCEAN = 0
    PLAINS = 1
    DESERT = 2
    MOUNTAINS = 3
    FOREST = 4

    @property
    def key(self):
        return self.name.lower()


BIOMES = list(Biome)
DEFAULT_BIOME = Biome[config.DEFAULT_BIOME.upper()]


def classify(temperature, humidity):
    """Map a (temperature, humidity) pair to a biome. First matching branch wins."""
    if temperature > 0.8:
        if humidity < 0.3:
            return Biome.DESERT
        if humidity < 0.6:
            return Biome.PLAINS
        return Biome.FOREST
    elif temperature > 0.5:
        if humidity < 0.4:
            return Biome.PLAINS
        return Biome.FOREST
    else:
        if humidity < 0.5:
            return Biome.MOUNTAINS
        return Biome.OCEAN


def biome_from_name(name, default=DEFAULT_BIOME):
    """Resolve a preset biome key ('desert', 'Forest', ...) to a Biome."""
    if isinstance(name, Biome):
        return name
    try:
        return Biome[str(name).strip().upper()]
    except KeyError:
        fallback = default.key if default is not None else 'nothing'
        logutil.log("CONFIG", f"unknown biome {name!r}, using {fallback}", level="WARN")
        return default


def biome_tables(biomes_config):
    '''
    Preset biome tables keyed by Biome. Keys are matched case-insensitively;
    unknown keys are reported and dropped, and the first spelling of a biome wins.
    '''
    tables = {}
    if not isinstance(biomes_config, dict):
        return tables
    for name, table in biomes_config.items():
        biome = biome_from_name(name, default=None)
        if biome is not None and biome not in tables:
            tables[biome] = table
    return tables


def biome_table(biomes_config, biome, fallback=DEFAULT_BIOME):
    '''
    The preset table for ``biome``; falls back to the ``fallback`` biome's
    table, then to an empty table, when the preset has no entry.
    '''
    tables = biome_tables(biomes_config)
    table = tables.get(biome)
    if table is None:
        table = tables.get(fallback)
    return table or {}
