"""Sampling gate for the "sampled" run policy."""

import random


class SamplingDecider:
    """
    Probabilistic accept/skip decision.

    One uniform draw in [0, 100) per call; accept iff the draw is strictly
    below the rate, so 0 never accepts and 100 always does. Pass a seeded
    ``random.Random`` to make decisions reproducible.
    """

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def decide(self, sample_rate_pct: int) -> bool:
        if not 0 <= sample_rate_pct <= 100:
            raise ValueError(f"sample_rate_pct must be in [0, 100], got {sample_rate_pct}")
        return self._rng.random() * 100 < sample_rate_pct
