import math

import numpy as np

from portfolio_projection.sampling.normal import RandomNormalGenerator


class ScriptedUniform:
    def __init__(self, values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


def test_same_seed_same_draws():
    a = RandomNormalGenerator(7).samples(100)
    b = RandomNormalGenerator(7).samples(100)
    assert np.array_equal(a, b)
    assert not np.array_equal(a, RandomNormalGenerator(8).samples(100))


def test_draws_are_clipped_standard_normal():
    x = RandomNormalGenerator(2024).samples(20_000)
    assert np.all(np.abs(x) <= 3.5)
    assert abs(x.mean()) < 0.05
    assert abs(x.std() - 1.0) < 0.05


def test_zero_uniforms_are_redrawn():
    gen = RandomNormalGenerator(0)
    gen.rng = ScriptedUniform([0.0, 0.5, 0.0, 0.25])
    z = gen.sample()
    expected = math.sqrt(-2.0 * math.log(0.5)) * math.cos(2.0 * math.pi * 0.25)
    assert z == expected


def test_extreme_draw_clipped():
    gen = RandomNormalGenerator(0)
    gen.rng = ScriptedUniform([1e-300, 1e-12])
    assert gen.sample() == 3.5
    gen.rng = ScriptedUniform([1e-300, 0.5])
    assert gen.sample() == -3.5


def test_accepts_numpy_generator():
    rng = np.random.default_rng(5)
    gen = RandomNormalGenerator(rng)
    assert gen.rng is rng
