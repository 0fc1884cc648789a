"""
Farkle Engine - Broadcast Models

Pydantic views of a session that the synchronization layer sends to every
participant after a visible state change.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from src.engine.base import Die, GameMode, Turn, TurnPhase
from src.engine.scoring import FarkleScorer
from src.engine.turn import TurnEngine
from src.engine.validators import MAX_NICKNAME_LENGTH
from src.lobby.session import Session


class DieView(BaseModel):
    """A die on the table or in the kept set."""

    id: int
    face: int = Field(ge=1, le=6)
    is_held: bool = False
    is_live: bool = False

    model_config = {"from_attributes": True, "frozen": True}


class PlayerView(BaseModel):
    """A roster entry."""

    id: str
    nickname: str = Field(max_length=MAX_NICKNAME_LENGTH)
    avatar: str | None = None
    total_score: int = 0
    is_connected: bool = True
    is_host: bool = False
    is_active: bool = False

    model_config = {"from_attributes": True, "frozen": True}


class TurnView(BaseModel):
    """The active player's turn, with score previews from the scorer."""

    active_player_id: str
    phase: TurnPhase
    live_roll: list[DieView] = Field(default_factory=list)
    kept_dice: list[DieView] = Field(default_factory=list)
    turn_score: int = 0
    roll_count: int = 0
    dice_to_roll: int = 6
    selection_score: int = 0
    bankable_score: int = 0

    model_config = {"frozen": True}

    @classmethod
    def from_turn(cls, turn: Turn) -> TurnView:
        live_ids = FarkleScorer.live_die_ids(turn.live_roll)
        return cls(
            active_player_id=turn.active_player_id,
            phase=turn.phase,
            live_roll=[_die_view(die, die.id in live_ids) for die in turn.live_roll],
            kept_dice=[_die_view(die, False) for die in turn.kept_dice],
            turn_score=turn.turn_score,
            roll_count=turn.roll_count,
            dice_to_roll=turn.dice_to_roll,
            selection_score=TurnEngine.selection_score(turn),
            bankable_score=TurnEngine.bankable_score(turn),
        )


class SessionSnapshot(BaseModel):
    """Full session view: roster, scores and the current turn."""

    code: str
    host_id: str
    players: list[PlayerView]
    started: bool = False
    solo: bool = False
    game_mode: GameMode = GameMode.STANDARD
    winning_score: int
    turn: TurnView | None = None
    winner_id: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def from_session(cls, session: Session) -> SessionSnapshot:
        turn = session.turn
        active_id = turn.active_player_id if turn else None
        players = [
            PlayerView(
                id=player.id,
                nickname=player.nickname,
                avatar=player.avatar,
                total_score=player.total_score,
                is_connected=player.is_connected,
                is_host=player.id == session.host_id,
                is_active=player.id == active_id,
            )
            for player in session.players
        ]
        return cls(
            code=session.code,
            host_id=session.host_id,
            players=players,
            started=session.started,
            solo=session.solo,
            game_mode=session.game_mode,
            winning_score=session.winning_score,
            turn=TurnView.from_turn(turn) if turn else None,
            winner_id=session.winner_id,
        )


def _die_view(die: Die, is_live: bool) -> DieView:
    return DieView(id=die.id, face=die.face, is_held=die.is_held, is_live=is_live)
