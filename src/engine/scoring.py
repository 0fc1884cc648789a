"""
Farkle Engine - Scoring Evaluator

The one authoritative implementation of the Farkle scoring rules. All methods
are stateless class methods that operate on immutable inputs; the turn engine,
the farkle detector and the broadcast views all call into this class.

Scoring Rules:
    - 1-2-3-4-5-6 (Full Straight, exactly six dice): 1,500 points
    - 1-2-3-4-5 (Low Straight, exactly five dice): 500 points
    - 2-3-4-5-6 (High Straight, exactly five dice): 750 points
    - Three 1s: 1,000 points
    - Three of X (2-6): X × 100 points
    - Four+ of a kind: previous tier × 2
    - Single 1: 100 points
    - Single 5: 50 points

A selection containing any die that no rule consumes scores nothing.
"""

from collections import Counter
from typing import Sequence

from src.engine.base import (
    NUM_DICE,
    Die,
    DiceRoll,
    ScoringBreakdown,
    ScoringCategory,
    ScoringResult,
)
from src.engine.validators import validate_dice_values, validate_die_face

FULL_STRAIGHT = (1, 2, 3, 4, 5, 6)
LOW_STRAIGHT = (1, 2, 3, 4, 5)
HIGH_STRAIGHT = (2, 3, 4, 5, 6)

_SET_CATEGORIES = {
    3: ScoringCategory.THREE_OF_A_KIND,
    4: ScoringCategory.FOUR_OF_A_KIND,
    5: ScoringCategory.FIVE_OF_A_KIND,
    6: ScoringCategory.SIX_OF_A_KIND,
}


class FarkleScorer:
    """
    Stateless scoring evaluator.

    All methods are class methods operating on immutable data.
    """

    # Scoring values
    SINGLE_ONE_POINTS = 100
    SINGLE_FIVE_POINTS = 50
    THREE_ONES_POINTS = 1000
    LOW_STRAIGHT_POINTS = 500
    HIGH_STRAIGHT_POINTS = 750
    FULL_STRAIGHT_POINTS = 1500

    @classmethod
    def calculate_score(
        cls,
        dice: Sequence[int] | Sequence[Die] | DiceRoll
    ) -> ScoringResult:
        """
        Score a selection of dice.

        Straights are checked first and, when matched, consume the whole
        selection. Otherwise sets of three or more are scored per face, then
        leftover 1s and 5s. If any die is left unconsumed the selection is
        invalid and worth nothing.

        Args:
            dice: Faces to score (ints, Die objects, or a DiceRoll)

        Returns:
            ScoringResult with total points and breakdown
        """
        values = validate_dice_values(dice, max_count=NUM_DICE)

        if not values:
            return ScoringResult(points=0, is_valid=False)

        straight = cls._check_straight(values)
        if straight is not None:
            return ScoringResult(points=straight.points, breakdown=(straight,))

        remaining = Counter(values)
        breakdown = cls._check_sets(remaining)
        breakdown.extend(cls._check_singles(remaining))

        unscored = tuple(sorted(remaining.elements()))
        if unscored:
            return ScoringResult(points=0, is_valid=False, unscored=unscored)

        return ScoringResult(
            points=sum(item.points for item in breakdown),
            breakdown=tuple(breakdown),
        )

    @classmethod
    def score(cls, dice: Sequence[int] | Sequence[Die] | DiceRoll) -> int:
        """Points for a selection, 0 when the selection is invalid."""
        return cls.calculate_score(dice).points

    @classmethod
    def _check_straight(cls, values: tuple[int, ...]) -> ScoringBreakdown | None:
        """
        Check for a straight covering the entire selection.

        Straights only count when they use every die selected, so a
        six-die selection can only be a full straight and a five-die
        selection a low or high one.
        """
        ordered = tuple(sorted(values))

        if ordered == FULL_STRAIGHT:
            return ScoringBreakdown(
                category=ScoringCategory.FULL_STRAIGHT,
                dice_values=FULL_STRAIGHT,
                points=cls.FULL_STRAIGHT_POINTS,
                description="Full Straight (1-2-3-4-5-6)"
            )

        if ordered == LOW_STRAIGHT:
            return ScoringBreakdown(
                category=ScoringCategory.LOW_STRAIGHT,
                dice_values=LOW_STRAIGHT,
                points=cls.LOW_STRAIGHT_POINTS,
                description="Low Straight (1-2-3-4-5)"
            )

        if ordered == HIGH_STRAIGHT:
            return ScoringBreakdown(
                category=ScoringCategory.HIGH_STRAIGHT,
                dice_values=HIGH_STRAIGHT,
                points=cls.HIGH_STRAIGHT_POINTS,
                description="High Straight (2-3-4-5-6)"
            )

        return None

    @classmethod
    def set_points(cls, face: int, count: int) -> int:
        """
        Points for `count` (3-6) dice of the same face.

        Three 1s are worth 1000, three of any other face are worth
        face × 100, and every die beyond the third doubles the value.
        """
        base_points = cls.THREE_ONES_POINTS if face == 1 else face * 100
        return base_points * 2 ** (count - 3)

    @classmethod
    def _check_sets(cls, remaining: Counter[int]) -> list[ScoringBreakdown]:
        """Score three or more of a kind, consuming every die of that face."""
        breakdown: list[ScoringBreakdown] = []

        for face_value in range(1, 7):
            count = remaining[face_value]
            if count < 3:
                continue

            breakdown.append(ScoringBreakdown(
                category=_SET_CATEGORIES[count],
                dice_values=tuple([face_value] * count),
                points=cls.set_points(face_value, count),
                description=f"{count}x {face_value}s"
            ))
            del remaining[face_value]

        return breakdown

    @classmethod
    def _check_singles(cls, remaining: Counter[int]) -> list[ScoringBreakdown]:
        """Score leftover 1s and 5s."""
        breakdown: list[ScoringBreakdown] = []

        ones_count = remaining.pop(1, 0)
        if ones_count:
            breakdown.append(ScoringBreakdown(
                category=ScoringCategory.SINGLE_ONE,
                dice_values=tuple([1] * ones_count),
                points=ones_count * cls.SINGLE_ONE_POINTS,
                description=f"{ones_count}x Single 1{'s' if ones_count > 1 else ''}"
            ))

        fives_count = remaining.pop(5, 0)
        if fives_count:
            breakdown.append(ScoringBreakdown(
                category=ScoringCategory.SINGLE_FIVE,
                dice_values=tuple([5] * fives_count),
                points=fives_count * cls.SINGLE_FIVE_POINTS,
                description=f"{fives_count}x Single 5{'s' if fives_count > 1 else ''}"
            ))

        return breakdown

    @classmethod
    def is_live(
        cls,
        face: int,
        full_roll: Sequence[int] | Sequence[Die] | DiceRoll
    ) -> bool:
        """
        Check whether a face can take part in a scoring combination.

        The check is made against the whole roll the die came from: a 4 is
        live only when the roll holds three or more 4s or a straight that
        uses it.

        Args:
            face: Face of the candidate die
            full_roll: Every die currently on the table

        Returns:
            True if the face belongs to at least one scoring combination
        """
        validate_die_face(face)
        values = validate_dice_values(full_roll, max_count=NUM_DICE)
        counts = Counter(values)

        if counts[face] == 0:
            return False

        if face in (1, 5):
            return True

        if counts[face] >= 3:
            return True

        return any(face in pattern for pattern in cls.straight_patterns(values))

    @classmethod
    def straight_patterns(cls, values: Sequence[int]) -> list[tuple[int, ...]]:
        """Straights that can be selected out of a roll."""
        faces = set(values)
        return [
            pattern for pattern in (FULL_STRAIGHT, LOW_STRAIGHT, HIGH_STRAIGHT)
            if faces.issuperset(pattern)
        ]

    @classmethod
    def live_die_ids(cls, dice: Sequence[Die]) -> frozenset[int]:
        """Ids of the dice in a roll that may be selected toward a score."""
        return frozenset(die.id for die in dice if cls.is_live(die.face, dice))
