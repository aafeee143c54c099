import pytest

from narde.core.dice import CHANCE_OUTCOMES, NUM_CHANCE_OUTCOMES, Dice, outcome_from_roll
from narde.core.errors import InvariantViolation


def test_chance_outcomes_sum_to_one():
    assert NUM_CHANCE_OUTCOMES == 21
    assert sum(prob for _, prob in CHANCE_OUTCOMES) == pytest.approx(1.0)
    assert sum(1 for (lo, hi), _ in CHANCE_OUTCOMES if lo == hi) == 6


def test_from_outcome_puts_higher_die_first():
    outcome = outcome_from_roll(2, 5)
    assert outcome == outcome_from_roll(5, 2)
    dice = Dice.from_outcome(outcome)
    assert dice.values == (5, 2)
    assert not dice.low_first
    assert Dice.from_outcome(outcome_from_roll(4, 4)).values == (4, 4)


def test_from_outcome_rejects_out_of_range():
    with pytest.raises(ValueError):
        Dice.from_outcome(21)


def test_doubles_allow_four_uses():
    dice = Dice(3, 3)
    assert dice.max_moves == 4
    assert dice.as_list() == [3, 3, 3, 3]
    for _ in range(4):
        assert dice.is_usable(3)
        dice.use(3)
    assert dice.exhausted
    with pytest.raises(InvariantViolation):
        dice.use(3)


def test_use_and_release_are_inverse():
    dice = Dice(2, 6)
    assert dice.low_first
    assert dice.usable_values() == [6, 2]
    dice.use(6)
    assert dice.usable_values() == [2]
    assert dice.num_used == 1
    dice.release(6)
    assert dice == Dice(2, 6)
    with pytest.raises(InvariantViolation):
        dice.release(2)


def test_invalid_values_rejected():
    with pytest.raises(ValueError):
        Dice(7, 1)
    with pytest.raises(ValueError):
        Dice(0, 3)
    assert not Dice().is_rolled
