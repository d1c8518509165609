#
# Classic (improved) gradient noise for 2D and 3D with fractal octave sums.
#
# Lattice hashing, the smootherstep fade and the 16-way gradient selection
# follow Ken Perlin's 2002 reference implementation. Everything is written
# against numpy arrays so a whole chunk can be sampled in one call; scalar
# inputs give back plain floats.
#
import numpy


def permutation_table(seed):
    '''
    Seeded permutation of 0..255, doubled to 512 entries so that
    index + 1 lookups never need wrapping.
    '''
    rng = numpy.random.default_rng(int(seed) & 0xFFFFFFFFFFFFFFFF)
    p = rng.permutation(256).astype(numpy.int64)
    return numpy.concatenate([p, p])


def fade(t):
    # 6t^5 - 15t^4 + 10t^3
    return t * t * t * (t * (t * 6 - 15) + 10)


def lerp(t, a, b):
    return a + t * (b - a)


def grad(h, x, y, z):
    '''
    Dot product of the offset (x, y, z) with one of 12 edge gradients
    (16 slots, 4 repeated) picked by the low four bits of the hash.
    '''
    h = h & 15
    u = numpy.where(h < 8, x, y)
    v = numpy.where(h < 4, y, numpy.where((h == 12) | (h == 14), x, z))
    return numpy.where((h & 1) == 0, u, -u) + numpy.where((h & 2) == 0, v, -v)


def _lattice(c):
    # integer lattice cell (wrapped into the table) and fractional offset
    f = numpy.floor(c)
    return f.astype(numpy.int64) & 255, c - f


def perlin2(perm, x, z):
    X, x = _lattice(x)
    Z, z = _lattice(z)
    u = fade(x)
    v = fade(z)
    A = perm[X]
    B = perm[X + 1]
    aa = perm[A + Z]
    ab = perm[A + Z + 1]
    ba = perm[B + Z]
    bb = perm[B + Z + 1]
    zero = numpy.zeros_like(x)
    x1 = lerp(u, grad(aa, x, z, zero), grad(ba, x - 1, z, zero))
    x2 = lerp(u, grad(ab, x, z - 1, zero), grad(bb, x - 1, z - 1, zero))
    return lerp(v, x1, x2)


def perlin3(perm, x, y, z):
    X, x = _lattice(x)
    Y, y = _lattice(y)
    Z, z = _lattice(z)
    u = fade(x)
    v = fade(y)
    w = fade(z)
    # Hash coordinates of the 8 cube corners
    A = perm[X] + Y
    AA = perm[A] + Z
    AB = perm[A + 1] + Z
    B = perm[X + 1] + Y
    BA = perm[B] + Z
    BB = perm[B + 1] + Z
    near = lerp(v,
        lerp(u, grad(perm[AA], x, y, z), grad(perm[BA], x - 1, y, z)),
        lerp(u, grad(perm[AB], x, y - 1, z), grad(perm[BB], x - 1, y - 1, z)))
    far = lerp(v,
        lerp(u, grad(perm[AA + 1], x, y, z - 1), grad(perm[BA + 1], x - 1, y, z - 1)),
        lerp(u, grad(perm[AB + 1], x, y - 1, z - 1), grad(perm[BB + 1], x - 1, y - 1, z - 1)))
    return lerp(w, near, far)


class PerlinNoise(object):
    '''
    Fractal sum of gradient noise. Octave i samples at frequency
    scale * 2**i with amplitude persistence**i. In normalized mode the sum
    is divided by the total amplitude used and clipped to [-1, 1].

    Instances are immutable after construction and safe to share between
    threads.
    '''
    def __init__(self, seed, octaves=4, persistence=0.5, scale=0.01):
        if int(octaves) < 1:
            raise ValueError(f"octaves must be positive, got {octaves}")
        if not 0.0 < persistence <= 1.0:
            raise ValueError(f"persistence must be in (0, 1], got {persistence}")
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")
        self.seed = int(seed)
        self.octaves = int(octaves)
        self.persistence = float(persistence)
        self.scale = float(scale)
        self.perm = permutation_table(self.seed)
        self.perm.flags.writeable = False
        self.max_amplitude = sum(self.persistence ** i for i in range(self.octaves))

    def _fractal(self, base, coords, normalized):
        scalar = all(numpy.ndim(c) == 0 for c in coords)
        coords = [numpy.asarray(c, dtype=numpy.float64) for c in coords]
        total = 0.0
        frequency = self.scale
        amplitude = 1.0
        for _ in range(self.octaves):
            total = total + base(self.perm, *[c * frequency for c in coords]) * amplitude
            amplitude *= self.persistence
            frequency *= 2
        if normalized:
            total = numpy.clip(total / self.max_amplitude, -1.0, 1.0)
        if scalar:
            return float(total)
        return total

    def noise2(self, x, z, normalized=False):
        return self._fractal(perlin2, (x, z), normalized)

    def noise3(self, x, y, z, normalized=False):
        return self._fractal(perlin3, (x, y, z), normalized)


if __name__ == '__main__':
    import time

    n = PerlinNoise(seed=3332, octaves=4, persistence=0.5, scale=0.05)
    arr2 = numpy.mgrid[0:80, 0:80].astype(float)
    t = time.time()
    n2 = n.noise2(arr2[0], arr2[1], normalized=True)
    print('arr2 noise', time.time() - t)
    arr3 = numpy.mgrid[0:16, 0:128, 0:16].astype(float)
    t = time.time()
    n3 = n.noise3(arr3[0], arr3[1], arr3[2], normalized=True)
    print('arr3 noise', time.time() - t)
    print('STATS')
    print('######')
    print(n2.min(), n2.max(), numpy.average(n2))
    print(n3.min(), n3.max(), numpy.average(n3))
