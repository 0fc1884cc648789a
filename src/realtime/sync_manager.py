"""
Farkle Engine - Sync Manager

Applies participant intents to the registry and the session games, and
turns every outcome into outbound payloads: a broadcast with a full session
snapshot after a visible change, or a rejection addressed to the actor
alone. Intents are applied one at a time, synchronously.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from src.config.settings import Settings, configure_logging, get_settings
from src.engine.errors import FarkleError, InvalidIntentError, WrongPhaseError
from src.engine.game import FarkleGame
from src.lobby.models import SessionSnapshot
from src.lobby.registry import SessionRegistry
from src.lobby.session import Session
from src.realtime.events import EventPayload, GameEvent, rejection_payload
from src.realtime.intents import (
    AcknowledgeFarkleIntent,
    BankIntent,
    Intent,
    JoinIntent,
    KeepIntent,
    LeaveIntent,
    RestartIntent,
    RollIntent,
    SelectIntent,
    SoloIntent,
    StartIntent,
    parse_intent,
)
from src.realtime.subscriptions import ChannelManager

logger = logging.getLogger(__name__)


class SyncManager:
    """Dispatches intents and fans the results out to participants.

    The registry is passed in explicitly; every manager works on its own
    registry.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        channels: ChannelManager | None = None,
    ) -> None:
        self.registry = registry
        self.channels = channels
        self._handlers: dict[type, Callable[[Any], list[EventPayload]]] = {
            JoinIntent: self._on_join,
            SoloIntent: self._on_solo,
            StartIntent: self._on_start,
            RestartIntent: self._on_restart,
            RollIntent: self._on_roll,
            SelectIntent: self._on_select,
            KeepIntent: self._on_keep,
            BankIntent: self._on_bank,
            AcknowledgeFarkleIntent: self._on_acknowledge_farkle,
            LeaveIntent: self._on_leave,
        }

    def handle(self, intent: Intent | Mapping[str, Any]) -> list[EventPayload]:
        """
        Apply one intent.

        Args:
            intent: A parsed intent model or a raw mapping from the wire.

        Returns:
            The payloads produced (already published when channels are set).
        """
        try:
            if isinstance(intent, Mapping):
                intent = parse_intent(intent)
            handler = self._handlers.get(type(intent))
            if handler is None:
                raise InvalidIntentError(f"Unsupported intent {type(intent).__name__}.")
            payloads = handler(intent)
        except FarkleError as exc:
            actor = _actor_of(intent)
            lobby_code = self._lobby_code_of(actor)
            logger.info(
                "Rejected %s from %s: %s (%s)",
                getattr(intent, "kind", "intent"), actor, exc.kind, exc,
            )
            payloads = [rejection_payload(actor, exc, lobby_code)]

        self._publish(payloads)
        return payloads

    def get_snapshot(self, code: str) -> SessionSnapshot:
        """Current full view of a session."""
        return SessionSnapshot.from_session(self.registry.get(code))

    def set_connected(self, player_id: str, is_connected: bool) -> list[EventPayload]:
        """Record a connection change and broadcast it."""
        try:
            session = self.registry.set_connected(player_id, is_connected)
        except FarkleError as exc:
            payloads = [rejection_payload(player_id, exc)]
        else:
            payloads = [self._broadcast(
                GameEvent.CONNECTION_CHANGED, session, player_id,
                is_connected=is_connected,
            )]
        self._publish(payloads)
        return payloads

    # -- Intent handlers ---------------------------------------------------

    def _on_join(self, intent: JoinIntent) -> list[EventPayload]:
        handle = self.registry.create_or_join(
            intent.actor_id, intent.nickname, intent.avatar, intent.code
        )
        session = self.registry.get(handle.code)
        return [self._broadcast(
            GameEvent.PLAYER_JOINED, session, intent.actor_id,
            is_host=handle.is_host,
            is_new_session=handle.is_new_session,
        )]

    def _on_solo(self, intent: SoloIntent) -> list[EventPayload]:
        handle = self.registry.create_solo(
            intent.actor_id, intent.nickname, intent.avatar, intent.mode
        )
        session = self.registry.get(handle.code)
        return [self._broadcast(GameEvent.GAME_STARTED, session, intent.actor_id, solo=True)]

    def _on_start(self, intent: StartIntent) -> list[EventPayload]:
        session = self.registry.start_session(intent.actor_id, intent.mode)
        return [self._broadcast(GameEvent.GAME_STARTED, session, intent.actor_id)]

    def _on_restart(self, intent: RestartIntent) -> list[EventPayload]:
        session = self.registry.restart_session(intent.actor_id, intent.mode)
        return [self._broadcast(GameEvent.GAME_RESTARTED, session, intent.actor_id)]

    def _on_roll(self, intent: RollIntent) -> list[EventPayload]:
        session, game = self._game_for(intent.actor_id)
        farkled = game.roll(intent.actor_id)
        event = GameEvent.PLAYER_FARKLED if farkled else GameEvent.DICE_ROLLED
        return [self._broadcast(event, session, intent.actor_id)]

    def _on_select(self, intent: SelectIntent) -> list[EventPayload]:
        session, game = self._game_for(intent.actor_id)
        game.select(intent.actor_id, intent.die_id, intent.held)
        return [self._broadcast(
            GameEvent.DICE_SELECTED, session, intent.actor_id, die_id=intent.die_id
        )]

    def _on_keep(self, intent: KeepIntent) -> list[EventPayload]:
        session, game = self._game_for(intent.actor_id)
        result = game.keep(intent.actor_id)
        return [self._broadcast(
            GameEvent.DICE_KEPT, session, intent.actor_id,
            points=result.points,
            breakdown=[item.description for item in result.breakdown],
            hot_dice=not game.turn.kept_dice,
        )]

    def _on_bank(self, intent: BankIntent) -> list[EventPayload]:
        session, game = self._game_for(intent.actor_id)
        points = game.bank(intent.actor_id)
        if game.is_over:
            return [self._broadcast(
                GameEvent.GAME_WON, session, intent.actor_id,
                points=points, winner_id=game.winner_id,
            )]
        return [self._broadcast(
            GameEvent.TURN_BANKED, session, intent.actor_id,
            points=points, next_player_id=game.active_player_id,
        )]

    def _on_acknowledge_farkle(self, intent: AcknowledgeFarkleIntent) -> list[EventPayload]:
        session, game = self._game_for(intent.actor_id)
        next_id = game.acknowledge_farkle(intent.actor_id)
        return [self._broadcast(
            GameEvent.TURN_ADVANCED, session, intent.actor_id, next_player_id=next_id
        )]

    def _on_leave(self, intent: LeaveIntent) -> list[EventPayload]:
        session = self.registry.session_for(intent.actor_id)
        result = self.registry.leave(intent.actor_id)

        if result.session_closed:
            if not result.remaining_ids:
                return []
            return [EventPayload(
                event=GameEvent.SESSION_CLOSED,
                lobby_code=result.code,
                player_id=intent.actor_id,
                recipients=result.remaining_ids,
                data={"reason": "host_left"},
            )]

        return [self._broadcast(
            GameEvent.PLAYER_LEFT, session, intent.actor_id,
            turn_advanced=result.turn_advanced,
        )]

    # -- Helpers -----------------------------------------------------------

    def _game_for(self, actor: str) -> tuple[Session, FarkleGame]:
        session = self.registry.session_for(actor)
        if session.game is None:
            raise WrongPhaseError("The game has not started.")
        return session, session.game

    def _broadcast(
        self,
        event: GameEvent,
        session: Session,
        actor: str,
        **data: Any,
    ) -> EventPayload:
        data["snapshot"] = SessionSnapshot.from_session(session).model_dump(mode="json")
        return EventPayload(
            event=event,
            lobby_code=session.code,
            player_id=actor,
            recipients=tuple(session.player_ids),
            data=data,
        )

    def _lobby_code_of(self, actor: str | None) -> str | None:
        if actor is None:
            return None
        try:
            return self.registry.session_for(actor).code
        except FarkleError:
            return None

    def _publish(self, payloads: list[EventPayload]) -> None:
        if self.channels is None:
            return
        for payload in payloads:
            self.channels.publish(payload)


def _actor_of(intent: Any) -> str | None:
    if isinstance(intent, Mapping):
        actor = intent.get("actor_id")
        return actor if isinstance(actor, str) and actor else None
    return getattr(intent, "actor_id", None)


def create_sync_manager(settings: Settings | None = None) -> SyncManager:
    """Build a manager with a fresh registry and channel manager."""
    settings = settings or get_settings()
    configure_logging(settings)
    return SyncManager(SessionRegistry(settings), ChannelManager())
