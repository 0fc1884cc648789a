"""
Farkle Engine - Base Classes

This module defines the foundational data structures and enums used throughout
the game engine. Dice, rolls, scoring results and turns are immutable (frozen
dataclasses); a transition produces a new value instead of mutating the old one.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Sequence

NUM_DICE = 6
MIN_FACE = 1
MAX_FACE = 6


class GameMode(Enum):
    """Win-condition presets chosen by the host before the game starts."""
    RUSH = "rush"
    STANDARD = "standard"
    MARATHON = "marathon"

    @property
    def winning_score(self) -> int:
        return WINNING_SCORES[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


WINNING_SCORES: dict[GameMode, int] = {
    GameMode.RUSH: 1000,
    GameMode.STANDARD: 2000,
    GameMode.MARATHON: 4000,
}


class TurnPhase(Enum):
    """Phases of a session's turn state machine."""
    NOT_STARTED = "not_started"
    PLAYER_TURN = "player_turn"
    DICE_ROLLED = "dice_rolled"
    TURN_ENDED_FARKLE = "turn_ended_farkle"
    GAME_OVER = "game_over"


class ScoringCategory(Enum):
    """Categories of scoring combinations."""
    SINGLE_ONE = auto()
    SINGLE_FIVE = auto()
    THREE_OF_A_KIND = auto()
    FOUR_OF_A_KIND = auto()
    FIVE_OF_A_KIND = auto()
    SIX_OF_A_KIND = auto()
    LOW_STRAIGHT = auto()      # 1-2-3-4-5
    HIGH_STRAIGHT = auto()     # 2-3-4-5-6
    FULL_STRAIGHT = auto()     # 1-2-3-4-5-6


@dataclass(frozen=True)
class ScoringBreakdown:
    """
    A single scoring component within a selection.

    Attributes:
        category: The type of scoring combination
        dice_values: The dice that contributed to this score
        points: Points awarded for this combination
        description: Human-readable description
    """
    category: ScoringCategory
    dice_values: tuple[int, ...]
    points: int
    description: str


@dataclass(frozen=True)
class ScoringResult:
    """
    Complete scoring result for a selection of dice.

    A selection is valid only when every die in it belongs to a scoring
    combination. Invalid selections carry zero points and no breakdown.

    Attributes:
        points: Total points scored
        breakdown: Individual scoring components
        is_valid: Whether every die in the selection scored
        unscored: Faces that no combination consumed
    """
    points: int
    breakdown: tuple[ScoringBreakdown, ...] = field(default_factory=tuple)
    is_valid: bool = True
    unscored: tuple[int, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DiceRoll:
    """
    Immutable representation of a dice roll.

    Attributes:
        values: Tuple of dice face values
    """
    values: tuple[int, ...]

    def __post_init__(self) -> None:
        """Validate dice values are within valid range."""
        for value in self.values:
            if not (MIN_FACE <= value <= MAX_FACE):
                raise ValueError(
                    f"Invalid die value {value}. "
                    f"Must be between {MIN_FACE} and {MAX_FACE}."
                )

    def __len__(self) -> int:
        return len(self.values)

    @classmethod
    def from_sequence(cls, values: Sequence[int]) -> "DiceRoll":
        """Create a DiceRoll from any sequence type."""
        return cls(values=tuple(values))


@dataclass(frozen=True)
class Die:
    """
    One die on the table.

    Attributes:
        id: Identifier unique among the dice of the current turn
        face: Face value rolled (1-6)
        is_held: Whether the die is selected toward the next keep
    """
    id: int
    face: int
    is_held: bool = False


@dataclass
class Player:
    """
    A seated participant. The only mutable record in the engine: the game
    credits `total_score` on bank.

    Attributes:
        id: Connection-scoped identifier
        nickname: Display name
        avatar: Opaque avatar key chosen by the client
        total_score: Banked points
        is_connected: Last known connection state
    """
    id: str
    nickname: str
    avatar: str | None = None
    total_score: int = 0
    is_connected: bool = True


@dataclass(frozen=True)
class Turn:
    """
    Complete state of the active player's turn.

    Attributes:
        active_player_id: Player whose turn it is
        live_roll: Dice on the table, available for selection
        kept_dice: Dice already committed toward the turn score
        turn_score: Points accumulated from kept batches (not yet banked)
        phase: Current phase of the turn state machine
        roll_count: Number of rolls taken this turn
    """
    active_player_id: str
    live_roll: tuple[Die, ...] = field(default_factory=tuple)
    kept_dice: tuple[Die, ...] = field(default_factory=tuple)
    turn_score: int = 0
    phase: TurnPhase = TurnPhase.PLAYER_TURN
    roll_count: int = 0

    @property
    def dice_to_roll(self) -> int:
        """Number of dice the next roll uses."""
        return NUM_DICE - len(self.kept_dice)

    @property
    def selected_dice(self) -> tuple[Die, ...]:
        return tuple(die for die in self.live_roll if die.is_held)

    @property
    def selected_faces(self) -> tuple[int, ...]:
        return tuple(die.face for die in self.selected_dice)

    @property
    def live_faces(self) -> tuple[int, ...]:
        return tuple(die.face for die in self.live_roll)
