# dice.py
import random


class Dice:
    """
    Game-flavour randomness behind a single `next_int(bound)` call.
    Not for keys or anything the ledger relies on.
    Anything exposing `next_int` can stand in for it (fixed rolls in tests).
    """

    def __init__(self, seed=None):
        self._random = random.Random(seed)

    def next_int(self, bound: int) -> int:
        """Uniform int in [0, bound)."""
        return self._random.randrange(bound)
