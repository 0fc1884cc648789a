"""
Farkle Engine - Session Registry

Owns every active session, its roster and its join code. Intents reach a
session's game only through a registry instance; nothing here is global, so
independent registries can coexist (one per process, one per test).
"""

from __future__ import annotations

import logging
import random
import secrets
import string
from dataclasses import dataclass

from src.config.settings import Settings, get_settings
from src.engine.base import GameMode, Player
from src.engine.errors import (
    AlreadyInSessionError,
    InvalidNicknameError,
    NotEnoughPlayersError,
    NotHostError,
    PlayerNotFoundError,
    SessionAlreadyStartedError,
    SessionFullError,
    SessionNotFoundError,
    WrongPhaseError,
)
from src.engine.game import FarkleGame
from src.engine.validators import (
    validate_lobby_code,
    validate_nickname,
    validate_player_count,
)
from src.lobby.session import Session

logger = logging.getLogger(__name__)

_CODE_ALPHABET = (
    string.ascii_uppercase.replace("O", "").replace("I", "")
    + string.digits.replace("0", "").replace("1", "")
)


def _generate_code(length: int = 6) -> str:
    """Generate an alphanumeric lobby code, avoiding ambiguous characters."""
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class SessionHandle:
    """What a participant learns after creating or joining a session."""

    code: str
    player_id: str
    is_host: bool
    is_new_session: bool


@dataclass(frozen=True)
class LeaveResult:
    """Outcome of a player leaving."""

    code: str
    player_id: str
    session_closed: bool
    remaining_ids: tuple[str, ...]
    turn_advanced: bool = False


class SessionRegistry:
    """Manages session lifecycle: create/join, solo, start, restart, leave."""

    def __init__(
        self,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.rng = rng
        self._sessions: dict[str, Session] = {}
        self._player_sessions: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper() in self._sessions

    @property
    def active_codes(self) -> list[str]:
        return list(self._sessions.keys())

    # -- Lookups -----------------------------------------------------------

    def get(self, code: str) -> Session:
        """Look up a session by its join code (case-insensitive)."""
        try:
            normalized = validate_lobby_code(code, self.settings.lobby_code_length)
        except ValueError as exc:
            raise SessionNotFoundError(f"Lobby not found: {exc}") from exc

        session = self._sessions.get(normalized)
        if session is None:
            raise SessionNotFoundError(f"Lobby {normalized} not found.")
        return session

    def session_for(self, player_id: str) -> Session:
        """The session a player is seated in."""
        code = self._player_sessions.get(player_id)
        if code is None:
            raise PlayerNotFoundError(f"Player {player_id} is not in a lobby.")
        return self._sessions[code]

    # -- Lifecycle ---------------------------------------------------------

    def create_or_join(
        self,
        player_id: str,
        nickname: str,
        avatar: str | None = None,
        code: str | None = None,
    ) -> SessionHandle:
        """
        Seat a player in a session.

        Without a code a new session is created with the caller as host.
        With a code the session must exist, be waiting and have a free seat.

        Raises:
            InvalidNicknameError, AlreadyInSessionError, SessionNotFoundError,
            SessionAlreadyStartedError, SessionFullError
        """
        nickname = self._check_newcomer(player_id, nickname)

        is_new = not code
        if is_new:
            session = Session(
                code=self._create_code(),
                host_id=player_id,
                game_mode=self.settings.default_game_mode,
            )
        else:
            session = self.get(code)
            if session.solo:
                raise SessionFullError("Lobby is full.")
            if session.started:
                raise SessionAlreadyStartedError("Game already in progress.")
            if len(session.players) >= self.settings.max_players:
                raise SessionFullError("Lobby is full.")

        self._seat(session, player_id, nickname, avatar)

        if is_new:
            logger.info("Lobby %s created by %s", session.code, nickname)
        logger.info("Player %s (%s) joined lobby %s", nickname, player_id, session.code)

        return SessionHandle(
            code=session.code,
            player_id=player_id,
            is_host=session.host_id == player_id,
            is_new_session=is_new,
        )

    def create_solo(
        self,
        player_id: str,
        nickname: str,
        avatar: str | None = None,
        mode: GameMode | str | None = None,
    ) -> SessionHandle:
        """
        Create a one-player session and start its game at once.

        Solo sessions skip the lobby: nobody else can join them and the
        minimum player count does not apply.

        Raises:
            InvalidNicknameError, AlreadyInSessionError
        """
        nickname = self._check_newcomer(player_id, nickname)

        session = Session(
            code=self._create_code(),
            host_id=player_id,
            game_mode=GameMode(mode) if mode is not None else self.settings.default_game_mode,
            solo=True,
        )
        self._seat(session, player_id, nickname, avatar)
        self._start_game(session)

        logger.info(
            "Solo game %s started by %s (%s)", session.code, nickname, session.game_mode.value
        )
        return SessionHandle(
            code=session.code,
            player_id=player_id,
            is_host=True,
            is_new_session=True,
        )

    def start_session(
        self,
        actor: str,
        mode: GameMode | str | None = None,
    ) -> Session:
        """
        Start the actor's session with the chosen win condition.

        Raises:
            NotHostError: If the actor is not the host
            SessionAlreadyStartedError: If the game is already running
            NotEnoughPlayersError: With fewer than min_players seated
        """
        session = self.session_for(actor)

        if session.host_id != actor:
            raise NotHostError("Only the host can start the game.")
        if session.started:
            raise SessionAlreadyStartedError("Game already in progress.")
        self._check_player_count(session)

        if mode is not None:
            session.game_mode = GameMode(mode)
        self._start_game(session)

        logger.info(
            "Game started in lobby %s (%s, %d points, %d players)",
            session.code,
            session.game_mode.value,
            session.winning_score,
            len(session.players),
        )
        return session

    def restart_session(
        self,
        actor: str,
        mode: GameMode | str | None = None,
    ) -> Session:
        """
        Start a new game in a session whose game is over.

        Totals are reset to zero and the first roster player opens. The
        roster is kept as it is, so players who left stay gone.

        Raises:
            NotHostError: If the actor is not the host
            WrongPhaseError: If the session has no finished game
            NotEnoughPlayersError: If a multiplayer roster shrank below min_players
        """
        session = self.session_for(actor)

        if session.host_id != actor:
            raise NotHostError("Only the host can start a new game.")
        if session.game is None or not session.game.is_over:
            raise WrongPhaseError("A new game can only start once the game is over.")
        if not session.solo:
            self._check_player_count(session)

        for player in session.players:
            player.total_score = 0
        if mode is not None:
            session.game_mode = GameMode(mode)
        self._start_game(session)

        logger.info(
            "New game in lobby %s (%s, %d points)",
            session.code, session.game_mode.value, session.winning_score,
        )
        return session

    def leave(self, actor: str) -> LeaveResult:
        """
        Remove a player from their session.

        A host leaving before the game is decided closes the session for
        everyone. A session left empty is destroyed.
        """
        session = self.session_for(actor)
        game_decided = session.game is not None and session.game.is_over

        if actor == session.host_id and not game_decided:
            remaining = tuple(pid for pid in session.player_ids if pid != actor)
            self._close(session)
            logger.info("Host %s left, lobby %s closed", actor, session.code)
            return LeaveResult(
                code=session.code,
                player_id=actor,
                session_closed=True,
                remaining_ids=remaining,
            )

        turn_advanced = session.remove_player(actor)
        del self._player_sessions[actor]
        logger.info("Player %s left lobby %s", actor, session.code)

        if not session.players:
            self._close(session)
            logger.info("Lobby %s is empty, deleted", session.code)
            return LeaveResult(
                code=session.code,
                player_id=actor,
                session_closed=True,
                remaining_ids=tuple(),
                turn_advanced=turn_advanced,
            )

        if actor == session.host_id:
            session.host_id = session.players[0].id
            logger.info("Lobby %s host passed to %s", session.code, session.host_id)

        return LeaveResult(
            code=session.code,
            player_id=actor,
            session_closed=False,
            remaining_ids=tuple(session.player_ids),
            turn_advanced=turn_advanced,
        )

    def set_connected(self, actor: str, is_connected: bool) -> Session:
        """Record a player's connection state."""
        session = self.session_for(actor)
        player = session.get_player(actor)
        player.is_connected = is_connected
        logger.info(
            "Player %s %s in lobby %s",
            actor, "reconnected" if is_connected else "disconnected", session.code,
        )
        return session

    # -- Internals ---------------------------------------------------------

    def _create_code(self) -> str:
        code = _generate_code(self.settings.lobby_code_length)
        while code in self._sessions:
            code = _generate_code(self.settings.lobby_code_length)
        return code

    def _close(self, session: Session) -> None:
        self._sessions.pop(session.code, None)
        for player_id in session.player_ids:
            self._player_sessions.pop(player_id, None)

    def _check_newcomer(self, player_id: str, nickname: str) -> str:
        try:
            nickname = validate_nickname(nickname)
        except ValueError as exc:
            raise InvalidNicknameError(str(exc)) from exc

        if player_id in self._player_sessions:
            raise AlreadyInSessionError(
                f"Player {player_id} is already in lobby {self._player_sessions[player_id]}."
            )
        return nickname

    def _seat(
        self,
        session: Session,
        player_id: str,
        nickname: str,
        avatar: str | None,
    ) -> None:
        session.players.append(Player(id=player_id, nickname=nickname, avatar=avatar))
        self._sessions[session.code] = session
        self._player_sessions[player_id] = session.code

    def _check_player_count(self, session: Session) -> None:
        try:
            validate_player_count(
                len(session.players),
                self.settings.min_players,
                self.settings.max_players,
            )
        except ValueError as exc:
            raise NotEnoughPlayersError(str(exc)) from exc

    def _start_game(self, session: Session) -> None:
        session.game = FarkleGame(
            session.players,
            session.game_mode.winning_score,
            rng=self.rng,
        )
