"""
Farkle Engine - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

import random

import pytest

from src.config.settings import Settings
from src.engine.base import GameMode, Player
from src.engine.game import FarkleGame
from src.lobby.registry import SessionRegistry


# =============================================================================
# SCORING TEST DATA
# =============================================================================

@pytest.fixture
def scoring_selections() -> dict[str, tuple[tuple[int, ...], int, str]]:
    """
    Common selections with expected scores.

    Returns:
        Dict mapping name to (dice_values, expected_points, description)
    """
    return {
        # Singles
        "single_one": ((1,), 100, "Single 1"),
        "single_five": ((5,), 50, "Single 5"),
        "two_ones": ((1, 1), 200, "Two 1s"),
        "two_fives": ((5, 5), 100, "Two 5s"),
        "one_and_five": ((1, 5), 150, "One 1 and one 5"),

        # Non-scoring singles
        "single_two": ((2,), 0, "Single 2"),
        "single_six": ((6,), 0, "Single 6"),

        # Sets
        "three_ones": ((1, 1, 1), 1000, "Three 1s"),
        "three_twos": ((2, 2, 2), 200, "Three 2s"),
        "four_twos": ((2, 2, 2, 2), 400, "Four 2s"),
        "five_ones": ((1, 1, 1, 1, 1), 4000, "Five 1s"),
        "six_sixes": ((6, 6, 6, 6, 6, 6), 4800, "Six 6s"),

        # Straights
        "low_straight": ((1, 2, 3, 4, 5), 500, "Low straight 1-5"),
        "high_straight": ((2, 3, 4, 5, 6), 750, "High straight 2-6"),
        "full_straight": ((1, 2, 3, 4, 5, 6), 1500, "Full straight 1-6"),
        "full_straight_shuffled": ((6, 4, 2, 5, 3, 1), 1500, "Full straight shuffled"),

        # Mixed combinations
        "three_ones_plus_five": ((1, 1, 1, 5), 1050, "Three 1s + single 5"),
        "three_fours_plus_one": ((4, 4, 4, 1), 500, "Three 4s + single 1"),
        "two_sets": ((1, 1, 1, 5, 5, 5), 1500, "Three 1s + three 5s"),

        # Leftover dice void the selection
        "three_ones_plus_two": ((1, 1, 1, 2), 0, "Unsupported 2"),
        "three_ones_with_junk": ((1, 1, 1, 2, 3, 4), 0, "Unsupported 2, 3, 4"),
        "non_scoring_roll": ((2, 3, 4, 6), 0, "Nothing scores"),
    }


@pytest.fixture
def farkle_rolls() -> list[tuple[int, ...]]:
    """Rolls with no scoring dice."""
    return [
        (2,),
        (6,),
        (2, 3),
        (4, 6),
        (2, 3, 4),
        (2, 3, 4, 6),
        (2, 3, 4, 6, 2, 3),
        (6, 6, 4, 4, 3, 2),
    ]


# =============================================================================
# GAME FIXTURES
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    """Settings independent of the environment."""
    return Settings(
        debug=False,
        log_level="INFO",
        min_players=2,
        max_players=4,
        lobby_code_length=6,
        default_game_mode=GameMode.STANDARD,
    )


@pytest.fixture
def registry(settings: Settings) -> SessionRegistry:
    return SessionRegistry(settings, rng=random.Random(1234))


@pytest.fixture
def players() -> list[Player]:
    return [
        Player(id="alice", nickname="Alice"),
        Player(id="bob", nickname="Bob"),
    ]


@pytest.fixture
def game(players: list[Player]) -> FarkleGame:
    """Two-player game to 2000 points, Alice to act."""
    return FarkleGame(players, 2000, rng=random.Random(42))
