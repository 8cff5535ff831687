class FixedDice:
    """Every roll returns `value`, clamped to the bound."""

    def __init__(self, value: int = 0):
        self.value = value

    def next_int(self, bound: int) -> int:
        return min(self.value, bound - 1)


class MaxDefenseDice:
    """Attack rolls at their minimum, defense rolls at their maximum."""

    def next_int(self, bound: int) -> int:
        return bound - 1 if bound == 10 else 0
