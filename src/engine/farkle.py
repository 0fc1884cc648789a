"""
Farkle Engine - Farkle Detector

Decides whether a freshly generated roll has no scoring dice at all.
"""

from collections import Counter
from typing import Sequence

from src.engine.base import Die, DiceRoll
from src.engine.scoring import FarkleScorer
from src.engine.validators import validate_dice_values


def has_no_scoring_dice(roll: Sequence[int] | Sequence[Die] | DiceRoll) -> bool:
    """
    Check if a roll is a farkle.

    A roll farkles when it holds no 1 or 5, no face three or more times, and
    no straight. Works for any roll size, so a two-die roll late in a turn
    is judged by the same rules as a full six-die roll.

    Args:
        roll: Dice values to check

    Returns:
        True if no die in the roll can score
    """
    values = validate_dice_values(roll)
    counts = Counter(values)

    if counts[1] or counts[5]:
        return False

    if any(count >= 3 for count in counts.values()):
        return False

    return not FarkleScorer.straight_patterns(values)
