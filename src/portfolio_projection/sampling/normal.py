import math

import numpy as np

from ..config import CLIP_SIGMA


class RandomNormalGenerator:
    """Clipped standard-normal draws via the Box-Muller transform.

    Each instance owns its uniform source, so two simulations never
    interleave draws. Pass a seed (or a numpy Generator) for reproducible runs.
    """

    def __init__(self, seed=None, clip: float = CLIP_SIGMA):
        if isinstance(seed, np.random.Generator):
            self.rng = seed
        else:
            self.rng = np.random.default_rng(seed)
        self.clip = float(clip)

    def _uniform_open(self):
        # rng.random() is on [0, 1); log(0) is undefined so redraw
        u = 0.0
        while u == 0.0:
            u = float(self.rng.random())
        return u

    def sample(self) -> float:
        u = self._uniform_open()
        v = self._uniform_open()
        z = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
        return max(-self.clip, min(self.clip, z))

    def samples(self, n: int):
        return np.array([self.sample() for _ in range(int(n))], dtype=float)
