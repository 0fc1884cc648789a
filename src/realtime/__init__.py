"""
Farkle Real-time Sync.

Intent parsing, event payloads and per-participant delivery for
multiplayer sessions.
"""

from src.realtime.events import EventPayload, GameEvent
from src.realtime.intents import Intent, parse_intent
from src.realtime.subscriptions import ChannelManager
from src.realtime.sync_manager import SyncManager, create_sync_manager

__all__ = [
    "ChannelManager",
    "EventPayload",
    "GameEvent",
    "Intent",
    "SyncManager",
    "create_sync_manager",
    "parse_intent",
]
