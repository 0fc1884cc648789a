"""
Farkle Game Engine.

Pure Python game logic with zero transport dependencies.
Handles scoring, farkle detection, hot dice and turn rotation.
"""

from src.engine.base import (
    DiceRoll,
    Die,
    GameMode,
    Player,
    ScoringBreakdown,
    ScoringCategory,
    ScoringResult,
    Turn,
    TurnPhase,
)
from src.engine.farkle import has_no_scoring_dice
from src.engine.game import FarkleGame, next_player_id
from src.engine.scoring import FarkleScorer
from src.engine.turn import TurnEngine

__all__ = [
    # Data Classes
    "DiceRoll",
    "Die",
    "Player",
    "ScoringBreakdown",
    "ScoringResult",
    "Turn",
    # Enums
    "GameMode",
    "ScoringCategory",
    "TurnPhase",
    # Engines
    "FarkleGame",
    "FarkleScorer",
    "TurnEngine",
    "has_no_scoring_dice",
    "next_player_id",
]
