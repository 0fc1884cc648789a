"""
Farkle Engine - Farkle Detector Tests
"""

import pytest
from hypothesis import given, strategies as st

from src.engine.base import Die, DiceRoll
from src.engine.farkle import has_no_scoring_dice
from src.engine.scoring import FarkleScorer


class TestHasNoScoringDice:
    """Tests for farkle detection."""

    def test_spec_farkle_roll(self):
        assert has_no_scoring_dice((2, 3, 4, 6, 2, 3)) is True

    def test_triple_twos_is_not_farkle(self):
        assert has_no_scoring_dice((2, 2, 2, 3, 4, 6)) is False

    def test_farkle_rolls(self, farkle_rolls):
        for roll in farkle_rolls:
            assert has_no_scoring_dice(roll) is True, roll

    @pytest.mark.parametrize("roll", [
        (1,),
        (5,),
        (2, 3, 4, 6, 6, 1),
        (2, 3, 4, 6, 6, 5),
        (6, 6, 6),
        (1, 2, 3, 4, 5, 6),
        (2, 3, 4, 5, 6),
    ])
    def test_scoring_rolls(self, roll):
        assert has_no_scoring_dice(roll) is False

    def test_small_rolls(self):
        """Late-turn rolls of one or two dice use the same rules."""
        assert has_no_scoring_dice((3, 4)) is True
        assert has_no_scoring_dice((3, 5)) is False

    def test_accepts_dice_roll_and_dice(self):
        assert has_no_scoring_dice(DiceRoll((2, 4, 6))) is True
        assert has_no_scoring_dice([Die(0, 1), Die(1, 2)]) is False

    def test_empty_roll_has_no_scoring_dice(self):
        assert has_no_scoring_dice(()) is True

    def test_invalid_face_raises(self):
        with pytest.raises(ValueError):
            has_no_scoring_dice((0, 2))

    @given(st.lists(st.integers(min_value=1, max_value=6), min_size=1, max_size=6))
    def test_agrees_with_live_dice(self, roll):
        any_live = any(FarkleScorer.is_live(face, roll) for face in roll)
        assert has_no_scoring_dice(roll) is (not any_live)
