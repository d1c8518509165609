import math

# Chunk geometry.
CHUNK_SIZE = 16 #width and depth (x and z)
CHUNK_HEIGHT = 128 #height of world (y)

# Terrain defaults, used when a preset leaves a key out.
SEA_LEVEL = 62
TOTAL_HEIGHT = CHUNK_HEIGHT
MIN_HEIGHT = 0
TERRAIN_CURVE = 'standard'

TERRAIN_OCTAVES = 4
TERRAIN_PERSISTENCE = 0.5
TERRAIN_SCALE = 0.01

# Climate: scattered feature points and the periodic temperature/humidity bands.
BIOME_POINTS = 50
BIOME_SCALE = 0.005
FEATURE_POINT_SPREAD = 1000.0
TEMPERATURE_FREQUENCY = 0.01
HUMIDITY_FREQUENCY = 0.008

# Caves use a fixed octave shape; only scale and threshold come from presets.
CAVE_SCALE = 0.05
CAVE_THRESHOLD = 0.4
CAVE_OCTAVES = 3
CAVE_PERSISTENCE = 0.5

# Seed offsets for each seeded subsystem (added to the world seed).
CAVE_SEED_OFFSET = 1
STRUCTURE_STREAM_SALT = 0x5354
DECORATION_STREAM_SALT = 0x4445

# Materials used when a preset names nothing (or something unknown).
DEFAULT_FILL_BLOCK = 'stone'
DEFAULT_FLUID_BLOCK = 'water'
DEFAULT_SURFACE_BLOCK = 'grass'
DEFAULT_SUBSURFACE_BLOCK = 'dirt'
DEFAULT_BIOME = 'plains'

STRUCTURES_ENABLED = True

# Fixed spawn; not derived from terrain.
SPAWN_POINT = (0, CHUNK_HEIGHT, 0)

# Sentinel returned by surface scans on fully empty columns.
NO_SURFACE = -1

# Dungeon layout: later rooms sit this far from the anchor along their direction.
DUNGEON_ROOM_SPACING = 8
DUNGEON_FIRST_ROOM = (5, 5, 3)
DUNGEON_ROOM = (4, 4, 3)

# Hills curve constant.
HILLS_PERIOD = math.pi

# Logging.
# Enable ANSI colors in logs.
LOG_COLOR = True
# Drop messages below this level (DEBUG, INFO, WARN, ERROR).
LOG_LEVEL = 'INFO'
# Log per-stage timings of each generated chunk at DEBUG.
LOG_MAPGEN_TIMINGS = True
