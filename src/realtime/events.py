"""
Farkle Engine - Realtime Event Definitions

Event types and payloads handed to the synchronization layer after each
intent is applied or rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from src.engine.errors import FarkleError


class GameEvent(Enum):
    """Events that can occur during a session."""

    PLAYER_JOINED = auto()
    PLAYER_LEFT = auto()
    GAME_STARTED = auto()
    GAME_RESTARTED = auto()
    DICE_ROLLED = auto()
    DICE_SELECTED = auto()
    DICE_KEPT = auto()
    TURN_BANKED = auto()
    PLAYER_FARKLED = auto()
    TURN_ADVANCED = auto()
    GAME_WON = auto()
    CONNECTION_CHANGED = auto()
    SESSION_CLOSED = auto()
    INTENT_REJECTED = auto()


@dataclass
class EventPayload:
    """Outbound message and the participants it is addressed to."""

    event: GameEvent
    lobby_code: str | None
    player_id: str | None = None
    recipients: tuple[str, ...] = field(default_factory=tuple)
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def is_rejection(self) -> bool:
        return self.event == GameEvent.INTENT_REJECTED


def rejection_payload(
    actor_id: str | None,
    error: FarkleError,
    lobby_code: str | None = None,
) -> EventPayload:
    """Rejection addressed to the violating actor only, never broadcast."""
    return EventPayload(
        event=GameEvent.INTENT_REJECTED,
        lobby_code=lobby_code,
        player_id=actor_id,
        recipients=(actor_id,) if actor_id else tuple(),
        data={"error": error.kind, "message": str(error)},
    )
