"""
Farkle Engine - Input Validation Utilities

Provides validation functions for game engine inputs. All validators
either return validated data or raise descriptive ValueError exceptions.
"""

from typing import Sequence

from src.engine.base import MAX_FACE, MIN_FACE, Die, DiceRoll

MAX_NICKNAME_LENGTH = 30


def validate_die_face(face: int) -> int:
    """
    Validate a single die face.

    Raises:
        ValueError: If the face is not an integer between 1 and 6
    """
    if isinstance(face, bool) or not isinstance(face, int):
        raise ValueError(f"Die face must be an integer, got {type(face).__name__}.")
    if not (MIN_FACE <= face <= MAX_FACE):
        raise ValueError(f"Die face is {face}, must be between {MIN_FACE} and {MAX_FACE}.")
    return face


def validate_dice_values(
    values: Sequence[int] | Sequence[Die] | DiceRoll,
    min_count: int = 0,
    max_count: int | None = None
) -> tuple[int, ...]:
    """
    Validate and normalize dice values.

    Args:
        values: Faces, Die objects, or a DiceRoll
        min_count: Minimum number of dice required
        max_count: Maximum number of dice allowed (None = no limit)

    Returns:
        Validated faces as a tuple

    Raises:
        ValueError: If validation fails
    """
    if isinstance(values, DiceRoll):
        values_tuple = values.values
    else:
        values_tuple = tuple(v.face if isinstance(v, Die) else v for v in values)

    count = len(values_tuple)

    if count < min_count:
        raise ValueError(f"At least {min_count} dice required, got {count}.")

    if max_count is not None and count > max_count:
        raise ValueError(f"At most {max_count} dice allowed, got {count}.")

    for i, value in enumerate(values_tuple):
        try:
            validate_die_face(value)
        except ValueError as exc:
            raise ValueError(f"Die at index {i}: {exc}") from exc

    return values_tuple


def validate_nickname(nickname: str) -> str:
    """
    Validate and normalize a player nickname.

    Returns:
        Nickname with surrounding whitespace removed

    Raises:
        ValueError: If the nickname is empty or too long
    """
    if not isinstance(nickname, str):
        raise ValueError(f"Nickname must be a string, got {type(nickname).__name__}.")

    cleaned = nickname.strip()
    if not cleaned:
        raise ValueError("Nickname cannot be empty.")
    if len(cleaned) > MAX_NICKNAME_LENGTH:
        raise ValueError(
            f"Nickname must be at most {MAX_NICKNAME_LENGTH} characters, got {len(cleaned)}."
        )
    return cleaned


def validate_lobby_code(code: str, length: int = 6) -> str:
    """
    Normalize a lobby code to upper case and check its shape.

    Raises:
        ValueError: If the code is not `length` alphanumeric characters
    """
    if not isinstance(code, str):
        raise ValueError(f"Lobby code must be a string, got {type(code).__name__}.")

    normalized = code.strip().upper()
    if len(normalized) != length or not normalized.isalnum():
        raise ValueError(f"Lobby code must be {length} letters or digits, got {code!r}.")
    return normalized


def validate_player_count(count: int, min_players: int = 2, max_players: int = 4) -> int:
    """
    Validate number of players.

    Raises:
        ValueError: If count is outside min_players..max_players
    """
    if not isinstance(count, int):
        raise ValueError(f"Player count must be an integer, got {type(count).__name__}.")

    if not (min_players <= count <= max_players):
        raise ValueError(f"Player count must be {min_players}-{max_players}, got {count}.")

    return count


def validate_target_score(score: int) -> int:
    """
    Validate a winning score.

    Raises:
        ValueError: If score is not a positive integer
    """
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValueError(f"Target score must be an integer, got {type(score).__name__}.")

    if score <= 0:
        raise ValueError(f"Target score must be positive, got {score}.")

    return score
