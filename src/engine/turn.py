"""
Farkle Engine - Turn Transitions

Stateless transitions over immutable Turn values. Each method checks the
phase guard, then returns a new Turn; the caller swaps it in. Actor checks
belong to FarkleGame, which owns the roster.
"""

import random
from dataclasses import replace

from src.engine.base import NUM_DICE, Die, DiceRoll, ScoringResult, Turn, TurnPhase
from src.engine.errors import (
    InvalidSelectionError,
    NothingToBankError,
    UnknownDieError,
    WrongPhaseError,
)
from src.engine.farkle import has_no_scoring_dice
from src.engine.scoring import FarkleScorer


def _require_phase(turn: Turn, *phases: TurnPhase) -> None:
    if turn.phase not in phases:
        allowed = ", ".join(phase.value for phase in phases)
        raise WrongPhaseError(
            f"Action not allowed during {turn.phase.value}; requires {allowed}."
        )


class TurnEngine:
    """
    Turn state machine transitions.

    All methods are class methods operating on immutable data.
    State is passed in and returned, never stored.
    """

    @classmethod
    def start_turn(cls, player_id: str) -> Turn:
        """Fresh turn for a player: nothing rolled, nothing kept."""
        return Turn(active_player_id=player_id, phase=TurnPhase.PLAYER_TURN)

    @classmethod
    def roll_dice(cls, count: int = NUM_DICE, rng: random.Random | None = None) -> DiceRoll:
        """
        Roll the specified number of dice.

        Args:
            count: Number of dice to roll (default: 6)
            rng: Random source (default: the module-level generator)

        Returns:
            DiceRoll with random values
        """
        source = rng or random
        return DiceRoll(values=tuple(source.randint(1, 6) for _ in range(count)))

    @classmethod
    def process_roll(
        cls,
        turn: Turn,
        roll: DiceRoll | None = None,
        rng: random.Random | None = None,
    ) -> tuple[Turn, bool]:
        """
        Roll the dice not yet kept this turn.

        A farkled roll stays on the table for display while the turn score
        and kept dice are discarded.

        Args:
            turn: Current turn (must be in PLAYER_TURN)
            roll: Roll to use (or None to generate one)
            rng: Random source for generated rolls

        Returns:
            Tuple of (new_turn, farkled)
        """
        _require_phase(turn, TurnPhase.PLAYER_TURN)

        count = turn.dice_to_roll
        if roll is None:
            roll = cls.roll_dice(count, rng)
        elif len(roll) != count:
            raise ValueError(f"Expected a roll of {count} dice, got {len(roll)}.")

        kept_ids = {die.id for die in turn.kept_dice}
        free_ids = [die_id for die_id in range(NUM_DICE) if die_id not in kept_ids]
        dice = tuple(
            Die(id=die_id, face=face)
            for die_id, face in zip(free_ids, roll.values)
        )

        if has_no_scoring_dice(roll):
            return replace(
                turn,
                live_roll=dice,
                kept_dice=tuple(),
                turn_score=0,
                phase=TurnPhase.TURN_ENDED_FARKLE,
                roll_count=turn.roll_count + 1,
            ), True

        return replace(
            turn,
            live_roll=dice,
            phase=TurnPhase.DICE_ROLLED,
            roll_count=turn.roll_count + 1,
        ), False

    @classmethod
    def process_selection(
        cls,
        turn: Turn,
        die_id: int,
        held: bool | None = None,
    ) -> Turn:
        """
        Toggle a live die's selection flag, or set it when `held` is given.

        Selection never changes the turn score.
        """
        _require_phase(turn, TurnPhase.DICE_ROLLED)

        if not any(die.id == die_id for die in turn.live_roll):
            raise UnknownDieError(f"No live die with id {die_id}.")

        live_roll = tuple(
            replace(die, is_held=(not die.is_held if held is None else held))
            if die.id == die_id else die
            for die in turn.live_roll
        )
        return replace(turn, live_roll=live_roll)

    @classmethod
    def selection_score(cls, turn: Turn) -> int:
        """Score of the currently selected dice (0 outside DICE_ROLLED)."""
        if turn.phase != TurnPhase.DICE_ROLLED or not turn.selected_dice:
            return 0
        return FarkleScorer.score(turn.selected_faces)

    @classmethod
    def process_keep(cls, turn: Turn) -> tuple[Turn, ScoringResult, bool]:
        """
        Commit the selected dice to the turn score.

        The unselected dice leave the table. When all six dice of the turn
        have been kept the kept set is cleared so the next roll uses six
        fresh dice (hot dice).

        Returns:
            Tuple of (new_turn, scoring result for kept dice, hot_dice)
        """
        _require_phase(turn, TurnPhase.DICE_ROLLED)

        selected = turn.selected_dice
        if not selected:
            raise InvalidSelectionError("Select at least one scoring die to keep.")

        result = FarkleScorer.calculate_score(selected)
        if result.points == 0:
            faces = ", ".join(str(face) for face in result.unscored)
            raise InvalidSelectionError(f"Selection does not score (unscored dice: {faces}).")

        kept = turn.kept_dice + tuple(replace(die, is_held=False) for die in selected)
        hot_dice = len(kept) >= NUM_DICE

        new_turn = replace(
            turn,
            live_roll=tuple(),
            kept_dice=tuple() if hot_dice else kept,
            turn_score=turn.turn_score + result.points,
            phase=TurnPhase.PLAYER_TURN,
        )
        return new_turn, result, hot_dice

    @classmethod
    def bankable_score(cls, turn: Turn) -> int:
        """Turn score plus the score of any selected but unkept dice."""
        if turn.phase not in (TurnPhase.PLAYER_TURN, TurnPhase.DICE_ROLLED):
            return 0
        return turn.turn_score + cls.selection_score(turn)

    @classmethod
    def process_bank(cls, turn: Turn) -> int:
        """
        Validate a bank and return the points it credits.

        Raises:
            WrongPhaseError: Outside PLAYER_TURN / DICE_ROLLED
            NothingToBankError: When there is nothing to bank
        """
        _require_phase(turn, TurnPhase.PLAYER_TURN, TurnPhase.DICE_ROLLED)

        points = cls.bankable_score(turn)
        if points <= 0:
            raise NothingToBankError("Nothing to bank this turn.")
        return points
