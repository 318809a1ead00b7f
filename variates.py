import math
import random


class ExponentialVariates:
    """Exponential inter-event samples drawn from one seeded uniform stream.

    Samples are -ln(x) / rate with x taken from (0, 1]: the stream yields
    u in [0, 1) and we use x = 1 - u, so ln(0) can never happen.
    """

    def __init__(self, seed=None):
        self.rng = random.Random(seed)
        self.draws = 0  # number of uniforms consumed so far

    def uniform(self):
        self.draws += 1
        return 1.0 - self.rng.random()  # (0, 1]

    def sample(self, rate):
        if not rate > 0:
            raise ValueError(f"exponential rate must be positive, got {rate!r}")
        return -math.log(self.uniform()) / rate

    def index(self, n):
        # uniform pick in range(n), one draw regardless of n
        if n < 1:
            raise ValueError(f"cannot pick from {n} candidates")
        u = self.rng.random()
        self.draws += 1
        return min(int(u * n), n - 1)
