"""
Farkle Engine - Error Taxonomy

Every rejection the engine can produce. All are raised synchronously by the
call that detected them, before any state is changed; `kind` is the stable
identifier sent back to the acting participant.
"""


class FarkleError(ValueError):
    """Base class for engine rejections."""

    kind = "error"


# -- Admission ---------------------------------------------------------------

class AdmissionError(FarkleError):
    kind = "admission"


class SessionNotFoundError(AdmissionError):
    kind = "session_not_found"


class SessionFullError(AdmissionError):
    kind = "session_full"


class SessionAlreadyStartedError(AdmissionError):
    kind = "session_already_started"


class AlreadyInSessionError(AdmissionError):
    kind = "already_in_session"


class PlayerNotFoundError(AdmissionError):
    kind = "player_not_found"


class NotHostError(AdmissionError):
    kind = "not_host"


class NotEnoughPlayersError(AdmissionError):
    kind = "not_enough_players"


class InvalidNicknameError(AdmissionError):
    kind = "invalid_nickname"


# -- Turn violations ---------------------------------------------------------

class TurnViolationError(FarkleError):
    kind = "turn_violation"


class NotYourTurnError(TurnViolationError):
    kind = "not_your_turn"


class WrongPhaseError(TurnViolationError):
    kind = "wrong_phase"


class GameOverError(TurnViolationError):
    kind = "game_over"


# -- Invalid selections ------------------------------------------------------

class InvalidSelectionError(FarkleError):
    kind = "invalid_selection"


class UnknownDieError(InvalidSelectionError):
    kind = "unknown_die"


class NothingToBankError(InvalidSelectionError):
    kind = "nothing_to_bank"


# -- Boundary ----------------------------------------------------------------

class InvalidIntentError(FarkleError):
    kind = "invalid_intent"
