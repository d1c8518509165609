import os
import sys

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from procworld.noise import PerlinNoise, permutation_table, perlin2, perlin3, fade


def _grid2(n=64, step=1.7):
    X, Z = np.mgrid[0:n, 0:n].astype(float) * step
    return X - 40.0, Z + 13.0


def test_permutation_table_is_mirrored_permutation():
    perm = permutation_table(1234)
    assert perm.shape == (512,)
    assert sorted(perm[:256].tolist()) == list(range(256))
    assert np.array_equal(perm[:256], perm[256:])
    assert np.array_equal(perm, permutation_table(1234))
    assert not np.array_equal(perm, permutation_table(1235))


def test_table_is_read_only():
    n = PerlinNoise(5)
    with pytest.raises(ValueError):
        n.perm[0] = 1


def test_fade_endpoints():
    assert fade(0.0) == 0.0
    assert fade(1.0) == 1.0
    assert fade(0.5) == pytest.approx(0.5)


def test_lattice_points_are_zero():
    perm = permutation_table(99)
    assert perlin2(perm, np.float64(3.0), np.float64(-7.0)) == 0.0
    assert perlin3(perm, np.float64(2.0), np.float64(5.0), np.float64(-1.0)) == 0.0


def test_same_seed_same_values():
    a = PerlinNoise(42, octaves=4, persistence=0.5, scale=0.05)
    b = PerlinNoise(42, octaves=4, persistence=0.5, scale=0.05)
    X, Z = _grid2()
    assert np.array_equal(a.noise2(X, Z), b.noise2(X, Z))
    assert a.noise2(10.5, -3.25) == b.noise2(10.5, -3.25)
    assert a.noise3(1.5, 2.5, 3.5) == b.noise3(1.5, 2.5, 3.5)


def test_different_seeds_differ():
    X, Z = _grid2()
    a = PerlinNoise(1, scale=0.05).noise2(X, Z)
    b = PerlinNoise(2, scale=0.05).noise2(X, Z)
    assert not np.allclose(a, b)


def test_scalar_in_float_out():
    n = PerlinNoise(7, scale=0.05)
    assert isinstance(n.noise2(3.3, 4.4), float)
    assert isinstance(n.noise3(3.3, 4.4, 5.5, normalized=True), float)


def test_scalar_matches_vector():
    n = PerlinNoise(7, scale=0.05)
    X, Z = _grid2(8)
    values = n.noise2(X, Z)
    assert values[3, 5] == pytest.approx(n.noise2(X[3, 5], Z[3, 5]))


def test_normalized_range():
    n = PerlinNoise(11, octaves=5, persistence=0.8, scale=0.03)
    X, Z = _grid2(96)
    values = n.noise2(X, Z, normalized=True)
    assert values.min() >= -1.0
    assert values.max() <= 1.0
    X, Y, Z = np.mgrid[0:16, 0:32, 0:16].astype(float)
    values3 = n.noise3(X, Y, Z, normalized=True)
    assert values3.min() >= -1.0
    assert values3.max() <= 1.0


def test_noise3_varies():
    n = PerlinNoise(3, octaves=3, persistence=0.5, scale=0.05)
    X, Y, Z = np.mgrid[0:16, 1:40, 0:16].astype(float)
    values = n.noise3(X, Y, Z, normalized=True)
    assert np.ptp(values) > 0.05
    assert n.noise3(10.3, 20.7, 30.1) != n.noise3(11.3, 20.7, 30.1)


def test_noise3_varies_along_y():
    n = PerlinNoise(3, octaves=3, persistence=0.5, scale=0.05)
    assert n.noise3(10.3, 20.7, 30.1) != n.noise3(10.3, 21.9, 30.1)
    ys = np.arange(1.0, 128.0)
    column = n.noise3(np.full_like(ys, 10.3), ys, np.full_like(ys, 30.1), normalized=True)
    assert np.ptp(column) > 0.05


def test_single_octave_normalized_equals_raw():
    n = PerlinNoise(8, octaves=1, persistence=1.0, scale=0.1)
    assert n.noise2(12.3, 45.6, normalized=True) == pytest.approx(n.noise2(12.3, 45.6))


@pytest.mark.parametrize("kwargs", [
    {"octaves": 0},
    {"persistence": 0.0},
    {"persistence": 1.5},
    {"scale": 0.0},
    {"scale": -1.0},
])
def test_invalid_configuration_rejected(kwargs):
    with pytest.raises(ValueError):
        PerlinNoise(1, **kwargs)
