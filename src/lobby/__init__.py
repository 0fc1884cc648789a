"""
Farkle Lobby Layer.

In-memory session registry, session records and broadcast views.
"""

from src.lobby.models import DieView, PlayerView, SessionSnapshot, TurnView
from src.lobby.registry import LeaveResult, SessionHandle, SessionRegistry
from src.lobby.session import Session

__all__ = [
    "DieView",
    "LeaveResult",
    "PlayerView",
    "Session",
    "SessionHandle",
    "SessionRegistry",
    "SessionSnapshot",
    "TurnView",
]
