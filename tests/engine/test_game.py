"""
Farkle Engine - Game State Machine Tests

Tests for FarkleGame: actor checks, rotation, farkles, hot dice,
winning and departures.
"""

import random

import pytest

from src.engine.base import Player, TurnPhase
from src.engine.errors import (
    GameOverError,
    InvalidSelectionError,
    NothingToBankError,
    NotYourTurnError,
    PlayerNotFoundError,
    WrongPhaseError,
)
from src.engine.game import FarkleGame, next_player_id

FARKLE_ROLL = (2, 3, 4, 6, 2, 3)


def _bank_three_fives(game: FarkleGame, actor: str) -> int:
    assert not game.roll(actor, (5, 5, 5, 2, 3, 4))
    for die_id in (0, 1, 2):
        game.select(actor, die_id)
    return game.bank(actor)


def _farkle_and_pass(game: FarkleGame, actor: str) -> str:
    assert game.roll(actor, FARKLE_ROLL)
    return game.acknowledge_farkle(actor)


class TestNextPlayerId:
    def test_advances_in_order(self):
        assert next_player_id(["a", "b", "c"], "a") == "b"
        assert next_player_id(["a", "b", "c"], "b") == "c"

    def test_wraps_around(self):
        assert next_player_id(["a", "b", "c"], "c") == "a"

    def test_single_player_returns_self(self):
        assert next_player_id(["a"], "a") == "a"

    def test_missing_player_raises(self):
        with pytest.raises(ValueError, match="not in the roster"):
            next_player_id(["a", "b"], "z")

    def test_empty_roster_raises(self):
        with pytest.raises(ValueError, match="empty"):
            next_player_id([], "a")


class TestGameSetup:
    def test_first_player_acts_first(self, game: FarkleGame):
        assert game.active_player_id == "alice"
        assert game.phase == TurnPhase.PLAYER_TURN
        assert game.turn.turn_score == 0
        assert game.winner_id is None

    def test_empty_roster_rejected(self):
        with pytest.raises(ValueError):
            FarkleGame([], 2000)

    def test_non_positive_target_rejected(self, players: list[Player]):
        with pytest.raises(ValueError):
            FarkleGame(players, 0)

    def test_get_player(self, game: FarkleGame):
        assert game.get_player("bob").nickname == "Bob"
        with pytest.raises(PlayerNotFoundError):
            game.get_player("carol")

    def test_generated_roll(self, game: FarkleGame):
        game.roll("alice")
        assert len(game.turn.live_roll) == 6


class TestActorChecks:
    def test_not_your_turn(self, game: FarkleGame):
        with pytest.raises(NotYourTurnError):
            game.roll("bob", (1, 2, 3, 4, 5, 6))
        assert game.phase == TurnPhase.PLAYER_TURN

    def test_rejected_intent_changes_nothing(self, game: FarkleGame):
        game.roll("alice", (1, 2, 3, 4, 6, 6))
        before = game.turn
        with pytest.raises(NotYourTurnError):
            game.select("bob", 0)
        assert game.turn == before

    def test_bank_on_fresh_turn_is_rejected(self, game: FarkleGame):
        with pytest.raises(NothingToBankError) as exc_info:
            game.bank("alice")
        assert exc_info.value.kind == "nothing_to_bank"

    def test_keep_before_roll(self, game: FarkleGame):
        with pytest.raises(WrongPhaseError):
            game.keep("alice")

    def test_acknowledge_without_farkle(self, game: FarkleGame):
        with pytest.raises(WrongPhaseError):
            game.acknowledge_farkle("alice")

    def test_only_farkled_player_acknowledges(self, game: FarkleGame):
        game.roll("alice", FARKLE_ROLL)
        with pytest.raises(NotYourTurnError):
            game.acknowledge_farkle("bob")

    def test_invalid_keep_leaves_state(self, game: FarkleGame):
        game.roll("alice", (1, 2, 3, 4, 6, 6))
        game.select("alice", 0)
        game.select("alice", 1)
        with pytest.raises(InvalidSelectionError):
            game.keep("alice")
        assert game.phase == TurnPhase.DICE_ROLLED
        assert game.turn.selected_faces == (1, 2)

    def test_deselect(self, game: FarkleGame):
        game.roll("alice", (1, 2, 3, 4, 6, 6))
        game.select("alice", 0)
        game.deselect("alice", 0)
        assert game.turn.selected_faces == ()


class TestTurnFlow:
    def test_bank_passes_turn(self, game: FarkleGame):
        assert _bank_three_fives(game, "alice") == 500
        assert game.get_player("alice").total_score == 500
        assert game.active_player_id == "bob"
        assert game.phase == TurnPhase.PLAYER_TURN
        assert game.turn.turn_score == 0

    def test_farkle_after_keeping(self, game: FarkleGame):
        assert not game.roll("alice", (5, 5, 5, 1, 2, 3))
        for die_id in (0, 1, 2, 3):
            game.select("alice", die_id)
        assert game.keep("alice").points == 600

        assert not game.roll("alice", (5, 2))
        game.select("alice", 4)
        game.keep("alice")
        assert game.turn.turn_score == 650

        assert game.roll("alice", (3,))
        assert game.phase == TurnPhase.TURN_ENDED_FARKLE
        assert game.turn.turn_score == 0
        assert game.turn.live_faces == (3,)

        assert game.acknowledge_farkle("alice") == "bob"
        assert game.get_player("alice").total_score == 0
        assert game.phase == TurnPhase.PLAYER_TURN

    def test_six_dice_farkle_after_650_kept(self, game: FarkleGame):
        game.roll("alice", (5, 5, 5, 2, 3, 4))
        for die_id in (0, 1, 2):
            game.select("alice", die_id)
        game.keep("alice")

        game.roll("alice", (5, 5, 2))
        game.select("alice", 3)
        game.select("alice", 4)
        game.keep("alice")

        game.roll("alice", (5,))
        game.select("alice", 5)
        game.keep("alice")
        assert game.turn.turn_score == 650
        assert game.turn.kept_dice == ()
        assert game.turn.dice_to_roll == 6

        assert game.roll("alice", FARKLE_ROLL)
        assert len(game.turn.live_roll) == 6
        assert game.turn.turn_score == 0
        assert game.phase == TurnPhase.TURN_ENDED_FARKLE

        assert game.acknowledge_farkle("alice") == "bob"
        assert game.get_player("alice").total_score == 0

    def test_hot_dice(self, game: FarkleGame):
        game.roll("alice", (1, 1, 1, 2, 3, 4))
        for die_id in (0, 1, 2):
            game.select("alice", die_id)
        game.keep("alice")

        game.roll("alice", (5, 5, 5))
        assert [die.id for die in game.turn.live_roll] == [3, 4, 5]
        for die_id in (3, 4, 5):
            game.select("alice", die_id)
        game.keep("alice")

        assert game.turn.kept_dice == ()
        assert game.turn.turn_score == 1500
        assert game.turn.dice_to_roll == 6
        assert game.active_player_id == "alice"

    def test_rotation_wraps(self):
        roster = [Player(id=pid, nickname=pid.title()) for pid in ("a", "b", "c")]
        game = FarkleGame(roster, 5000)
        assert _farkle_and_pass(game, "a") == "b"
        assert _farkle_and_pass(game, "b") == "c"
        assert _farkle_and_pass(game, "c") == "a"


class TestWinning:
    def test_win_on_third_bank(self, players: list[Player]):
        game = FarkleGame(players, 1500, rng=random.Random(0))
        for _ in range(2):
            _bank_three_fives(game, "alice")
            _farkle_and_pass(game, "bob")
        assert game.winner_id is None

        _bank_three_fives(game, "alice")
        assert game.get_player("alice").total_score == 1500
        assert game.winner_id == "alice"
        assert game.is_over
        assert game.phase == TurnPhase.GAME_OVER

    def test_no_intent_after_game_over(self, players: list[Player]):
        game = FarkleGame(players, 500)
        _bank_three_fives(game, "alice")
        with pytest.raises(GameOverError):
            game.roll("bob", (1, 1, 1, 1, 1, 1))
        with pytest.raises(GameOverError):
            game.roll("alice", (1, 1, 1, 1, 1, 1))

    def test_below_target_keeps_playing(self, players: list[Player]):
        game = FarkleGame(players, 501)
        _bank_three_fives(game, "alice")
        assert not game.is_over
        assert game.active_player_id == "bob"


class TestDeparture:
    def test_active_player_leaves(self):
        roster = [Player(id=pid, nickname=pid.title()) for pid in ("a", "b", "c")]
        game = FarkleGame(roster, 2000)
        game.roll("a", (1, 2, 3, 4, 6, 6))

        assert game.handle_departure("a") is True
        assert game.active_player_id == "b"
        assert game.phase == TurnPhase.PLAYER_TURN
        assert game.roster_ids == ["b", "c"]

    def test_last_in_order_leaves_on_turn(self):
        roster = [Player(id=pid, nickname=pid.title()) for pid in ("a", "b", "c")]
        game = FarkleGame(roster, 2000)
        _farkle_and_pass(game, "a")
        _farkle_and_pass(game, "b")

        assert game.handle_departure("c") is True
        assert game.active_player_id == "a"

    def test_waiting_player_leaves(self, game: FarkleGame):
        assert game.handle_departure("bob") is False
        assert game.active_player_id == "alice"
        assert game.roster_ids == ["alice"]

    def test_shared_roster_is_updated(self, players: list[Player], game: FarkleGame):
        game.handle_departure("bob")
        assert [player.id for player in players] == ["alice"]

    def test_single_player_continues(self, game: FarkleGame):
        game.handle_departure("bob")
        assert _farkle_and_pass(game, "alice") == "alice"

    def test_unknown_player(self, game: FarkleGame):
        with pytest.raises(PlayerNotFoundError):
            game.handle_departure("carol")
