# =========================================================
# --- core_dice.py ---
# =========================================================

from typing import List, Tuple

from .errors import InvariantViolation

# =========================================================

#: Non-double rolls in chance-outcome order, each with probability 1/18
NON_DOUBLE_ROLLS: List[Tuple[int, int]] = [
    (lo, hi) for lo in range(1, 7) for hi in range(lo + 1, 7)
]

#: Double rolls 1-1 .. 6-6, each with probability 1/36
DOUBLE_ROLLS: List[Tuple[int, int]] = [(d, d) for d in range(1, 7)]

#: All 21 chance outcomes as (roll, probability)
CHANCE_OUTCOMES: List[Tuple[Tuple[int, int], float]] = (
    [(roll, 1.0 / 18.0) for roll in NON_DOUBLE_ROLLS] +
    [(roll, 1.0 / 36.0) for roll in DOUBLE_ROLLS]
)

NUM_CHANCE_OUTCOMES = len(CHANCE_OUTCOMES)


def outcome_from_roll(die0: int, die1: int) -> int:
    """Return the chance outcome id of two rolled dice, in any order."""
    lo, hi = sorted((die0, die1))
    if lo == hi:
        return len(NON_DOUBLE_ROLLS) + lo - 1
    return NON_DOUBLE_ROLLS.index((lo, hi))


class Dice:
    """
    The two dice of a turn together with how often each may still be used.

    Values stay in place once used, only the remaining-use counters change,
    so a use can always be released again during undo.

    Attributes:
        values (Tuple[int, int]): Die values as rolled, (0, 0) when not rolled.
        remaining (List[int]): Remaining uses per die (2 each for doubles).
    """

    def __init__(self, die0: int = 0, die1: int = 0) -> None:
        if (die0 == 0) != (die1 == 0):
            raise ValueError("Dice must be rolled together")
        for die in (die0, die1):
            if die != 0 and not 1 <= die <= 6:
                raise ValueError(f"Invalid die value: {die}")
        self.values: Tuple[int, int] = (die0, die1)
        self.remaining: List[int] = [self.capacity, self.capacity] if die0 else [0, 0]

    @classmethod
    def from_outcome(cls, outcome: int) -> "Dice":
        """
        Build dice from a chance outcome id, higher die first.

        Args:
            outcome: Chance outcome id 0-20.

        Returns:
            Dice: Fresh, unused dice.
        """
        if not 0 <= outcome < NUM_CHANCE_OUTCOMES:
            raise ValueError(f"Chance outcome out of range: {outcome}")
        lo, hi = CHANCE_OUTCOMES[outcome][0]
        return cls(hi, lo)

    # ---------- Properties ----------
    @property
    def is_rolled(self) -> bool:
        return self.values[0] != 0

    @property
    def is_double(self) -> bool:
        return self.is_rolled and self.values[0] == self.values[1]

    @property
    def capacity(self) -> int:
        """Uses granted to each die: two per die for doubles."""
        return 2 if self.values[0] == self.values[1] else 1

    @property
    def max_moves(self) -> int:
        """Half-moves a full turn may contain."""
        if not self.is_rolled:
            return 0
        return 4 if self.is_double else 2

    @property
    def low_first(self) -> bool:
        """True if the lower die is stored first."""
        return self.values[0] < self.values[1]

    @property
    def high(self) -> int:
        return max(self.values)

    @property
    def low(self) -> int:
        return min(self.values)

    @property
    def num_used(self) -> int:
        if not self.is_rolled:
            return 0
        return 2 * self.capacity - sum(self.remaining)

    @property
    def exhausted(self) -> bool:
        return sum(self.remaining) == 0

    # ---------- Use / release ----------
    def is_usable(self, die: int) -> bool:
        """Return True if a die with this value can still be used."""
        return any(v == die and r > 0 for v, r in zip(self.values, self.remaining))

    def usable_values(self) -> List[int]:
        """Distinct die values that can still be used, highest first."""
        return sorted({v for v, r in zip(self.values, self.remaining) if r > 0}, reverse=True)

    def use(self, die: int) -> None:
        """
        Consume one use of a die with the given value.

        Raises:
            InvariantViolation: If no die with this value is usable.
        """
        for idx, (value, left) in enumerate(zip(self.values, self.remaining)):
            if value == die and left > 0:
                self.remaining[idx] -= 1
                return
        raise InvariantViolation(f"[DICE] die {die} is not usable", dice=repr(self))

    def release(self, die: int) -> None:
        """
        Give back one use of a die, the inverse of use().

        Raises:
            InvariantViolation: If no use of this value was consumed.
        """
        for idx in (1, 0):
            if self.values[idx] == die and self.remaining[idx] < self.capacity:
                self.remaining[idx] += 1
                return
        raise InvariantViolation(f"[DICE] die {die} was not used", dice=repr(self))

    # ---------- Copy ----------
    def copy(self) -> "Dice":
        new_dice = Dice.__new__(Dice)
        new_dice.values = self.values
        new_dice.remaining = list(self.remaining)
        return new_dice

    def fresh(self) -> "Dice":
        """Return the same roll with every use restored."""
        return Dice(*self.values)

    def as_list(self) -> List[int]:
        """Die values as a list, doubles expanded to four."""
        if not self.is_rolled:
            return []
        if self.is_double:
            return [self.values[0]] * 4
        return list(self.values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dice):
            return NotImplemented
        return self.values == other.values and self.remaining == other.remaining

    def __repr__(self) -> str:
        return f"Dice(values={self.values}, remaining={self.remaining})"
