"""
Farkle Engine - Session Record

In-memory lobby/session state owned by the SessionRegistry.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.engine.base import GameMode, Player, Turn
from src.engine.game import FarkleGame


@dataclass
class Session:
    """
    One lobby and, once started, its game.

    Attributes:
        code: Shareable join code, unique among active sessions
        host_id: Player allowed to start the game
        players: Ordered roster; order is turn order once started
        game_mode: Win-condition preset
        game: Live game, created when the host starts the session
        solo: One-player session that skipped the lobby
    """
    code: str
    host_id: str
    players: list[Player] = field(default_factory=list)
    game_mode: GameMode = GameMode.STANDARD
    game: FarkleGame | None = None
    solo: bool = False

    @property
    def started(self) -> bool:
        return self.game is not None

    @property
    def turn(self) -> Turn | None:
        return self.game.turn if self.game else None

    @property
    def winning_score(self) -> int:
        if self.game:
            return self.game.winning_score
        return self.game_mode.winning_score

    @property
    def winner_id(self) -> str | None:
        return self.game.winner_id if self.game else None

    @property
    def player_ids(self) -> list[str]:
        return [player.id for player in self.players]

    def get_player(self, player_id: str) -> Player | None:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def has_player(self, player_id: str) -> bool:
        return self.get_player(player_id) is not None

    def remove_player(self, player_id: str) -> bool:
        """Drop a player from the roster; returns True if the turn moved on."""
        if self.game:
            return self.game.handle_departure(player_id)

        player = self.get_player(player_id)
        if player is not None:
            self.players.remove(player)
        return False
