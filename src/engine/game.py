"""
Farkle Engine - Game State Machine

One FarkleGame per started session. It owns the live Turn, checks that the
actor is the active player, applies TurnEngine transitions, credits banked
points and rotates play around the roster.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Sequence

from src.engine.base import DiceRoll, Player, ScoringResult, Turn, TurnPhase
from src.engine.errors import (
    GameOverError,
    NotYourTurnError,
    PlayerNotFoundError,
    WrongPhaseError,
)
from src.engine.turn import TurnEngine
from src.engine.validators import validate_target_score

logger = logging.getLogger(__name__)


def next_player_id(roster_ids: Sequence[str], current_id: str) -> str:
    """
    Player after `current_id` in roster order, wrapping at the end.

    The position is looked up from the identity every time, so roster
    changes never leave a stale index behind.
    """
    ids = list(roster_ids)
    if not ids:
        raise ValueError("Roster is empty.")
    try:
        index = ids.index(current_id)
    except ValueError:
        raise ValueError(f"Player {current_id} is not in the roster.") from None
    return ids[(index + 1) % len(ids)]


class FarkleGame:
    """Live game state for one session.

    The roster list is shared with the owning session: order is turn order,
    and departures are applied here so rotation sees the roster before the
    player is removed.
    """

    def __init__(
        self,
        players: list[Player],
        winning_score: int,
        *,
        rng: random.Random | None = None,
    ) -> None:
        if not players:
            raise ValueError("A game needs at least one player.")
        self.players = players
        self.winning_score = validate_target_score(winning_score)
        self.rng = rng
        self.winner_id: str | None = None
        self.turn: Turn = TurnEngine.start_turn(players[0].id)

    # -- Queries -----------------------------------------------------------

    @property
    def phase(self) -> TurnPhase:
        return self.turn.phase

    @property
    def is_over(self) -> bool:
        return self.turn.phase == TurnPhase.GAME_OVER

    @property
    def active_player_id(self) -> str:
        return self.turn.active_player_id

    @property
    def roster_ids(self) -> list[str]:
        return [player.id for player in self.players]

    def get_player(self, player_id: str) -> Player:
        for player in self.players:
            if player.id == player_id:
                return player
        raise PlayerNotFoundError(f"Player {player_id} is not in this game.")

    # -- Transitions -------------------------------------------------------

    def roll(
        self,
        actor: str,
        roll: DiceRoll | Sequence[int] | None = None,
    ) -> bool:
        """
        Roll for the active player.

        Args:
            actor: Player issuing the roll
            roll: Pre-determined faces (or None to generate them)

        Returns:
            True if the roll farkled
        """
        self._require_active(actor)
        if roll is not None and not isinstance(roll, DiceRoll):
            roll = DiceRoll.from_sequence(roll)

        self.turn, farkled = TurnEngine.process_roll(self.turn, roll, self.rng)
        if farkled:
            logger.info(
                "Player %s farkled on %s", actor, list(self.turn.live_faces)
            )
        else:
            logger.info("Player %s rolled %s", actor, list(self.turn.live_faces))
        return farkled

    def select(self, actor: str, die_id: int, held: bool | None = None) -> Turn:
        """Toggle a die's selection (or set it when `held` is given)."""
        self._require_active(actor)
        self.turn = TurnEngine.process_selection(self.turn, die_id, held)
        logger.debug("Player %s set die %s, selection %s", actor, die_id, self.turn.selected_faces)
        return self.turn

    def deselect(self, actor: str, die_id: int) -> Turn:
        return self.select(actor, die_id, held=False)

    def keep(self, actor: str) -> ScoringResult:
        """Commit the selected dice; raises if the selection does not score."""
        self._require_active(actor)
        self.turn, result, hot_dice = TurnEngine.process_keep(self.turn)
        logger.info(
            "Player %s kept %d points (turn score %d)%s",
            actor, result.points, self.turn.turn_score, " - hot dice" if hot_dice else "",
        )
        return result

    def bank(self, actor: str) -> int:
        """
        Bank the turn score (plus any selected, unkept dice).

        Ends the game when the player reaches the winning score, otherwise
        hands the turn to the next player.

        Returns:
            Points credited
        """
        self._require_active(actor)
        points = TurnEngine.process_bank(self.turn)

        player = self.get_player(actor)
        player.total_score += points
        logger.info(
            "Player %s banked %d points (total %d)", actor, points, player.total_score
        )

        if player.total_score >= self.winning_score:
            self.winner_id = player.id
            self.turn = replace(
                TurnEngine.start_turn(player.id), phase=TurnPhase.GAME_OVER
            )
            logger.info("Player %s won with %d points", actor, player.total_score)
        else:
            self._advance_turn()
        return points

    def acknowledge_farkle(self, actor: str) -> str:
        """
        Close a farkled turn and hand play to the next player.

        Returns:
            Id of the player whose turn it now is
        """
        self._require_active(actor)
        if self.turn.phase != TurnPhase.TURN_ENDED_FARKLE:
            raise WrongPhaseError("There is no farkle to acknowledge.")
        self._advance_turn()
        return self.turn.active_player_id

    def handle_departure(self, player_id: str) -> bool:
        """
        Remove a player from the roster.

        If it was their turn, play passes to whoever followed them, with no
        score credited.

        Returns:
            True if the turn moved to another player
        """
        player = self.get_player(player_id)
        turn_advanced = False

        if not self.is_over and self.turn.active_player_id == player_id:
            successor = next_player_id(self.roster_ids, player_id)
            if successor != player_id:
                self.turn = TurnEngine.start_turn(successor)
                turn_advanced = True

        self.players.remove(player)
        logger.info("Player %s left the game (turn advanced: %s)", player_id, turn_advanced)
        return turn_advanced

    # -- Internals ---------------------------------------------------------

    def _require_active(self, actor: str) -> None:
        if self.is_over:
            raise GameOverError("The game is over.")
        if actor != self.turn.active_player_id:
            raise NotYourTurnError(f"It is not player {actor}'s turn.")

    def _advance_turn(self) -> None:
        successor = next_player_id(self.roster_ids, self.turn.active_player_id)
        self.turn = TurnEngine.start_turn(successor)
        logger.info("Turn passed to player %s", successor)
