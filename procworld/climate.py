import math
from collections import namedtuple

import numpy

from procworld import config
from procworld.biomes import BIOMES

Climate = namedtuple('Climate', ['temperature', 'humidity', 'nearest_tag', 'distance'])


class ClimateField(object):
    '''
    Voronoi-style climate sampler.

    A fixed set of feature points is scattered once from the seed; queries
    report the tag of (and distance to) the nearest point in scaled space.
    Temperature and humidity are periodic bands over unscaled world
    coordinates and do not depend on the nearest point: the two signals are
    independent, and biome selection only reads temperature and humidity.
    '''
    def __init__(self, seed, points=config.BIOME_POINTS, scale=config.BIOME_SCALE):
        if int(points) < 1:
            raise ValueError(f"points must be positive, got {points}")
        self.seed = int(seed)
        self.points = int(points)
        self.scale = float(scale)
        rng = numpy.random.default_rng(self.seed & 0xFFFFFFFFFFFFFFFF)
        spread = config.FEATURE_POINT_SPREAD
        self.point_x = rng.random(self.points) * spread
        self.point_z = rng.random(self.points) * spread
        self.point_tag = rng.integers(0, len(BIOMES), size=self.points)
        for arr in (self.point_x, self.point_z, self.point_tag):
            arr.flags.writeable = False

    def feature_points(self):
        return [(float(x), float(z), BIOMES[int(t)])
                for x, z, t in zip(self.point_x, self.point_z, self.point_tag)]

    def nearest(self, x, z):
        sx = x * self.scale
        sz = z * self.scale
        dx = sx - self.point_x
        dz = sz - self.point_z
        d2 = dx * dx + dz * dz
        # argmin keeps the first of equally distant points
        i = int(numpy.argmin(d2))
        return BIOMES[int(self.point_tag[i])], math.sqrt(float(d2[i]))

    def temperature(self, x, z):
        return (math.sin(x * config.TEMPERATURE_FREQUENCY) + 1) * 0.5

    def humidity(self, x, z):
        return (math.cos(z * config.HUMIDITY_FREQUENCY) + 1) * 0.5

    def climate_at(self, x, z):
        tag, distance = self.nearest(x, z)
        return Climate(self.temperature(x, z), self.humidity(x, z), tag, distance)
