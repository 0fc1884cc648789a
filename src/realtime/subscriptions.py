"""
Farkle Engine - Participant Channels

Delivery callbacks registered by the synchronization layer, one per
connected participant. Publishing a payload invokes the callback of every
subscribed recipient.
"""

from __future__ import annotations

import logging
from typing import Callable

from src.realtime.events import EventPayload

logger = logging.getLogger(__name__)


class ChannelManager:
    """Maps participant ids to delivery callbacks.

    A callback that raises is logged and skipped; the remaining recipients
    still receive the payload.
    """

    def __init__(self) -> None:
        self._channels: dict[str, Callable[[EventPayload], None]] = {}

    def subscribe(
        self,
        participant_id: str,
        on_event: Callable[[EventPayload], None],
    ) -> None:
        """Register (or replace, on reconnect) a participant's callback."""
        if participant_id in self._channels:
            logger.info("Replacing channel for participant %s", participant_id)
        self._channels[participant_id] = on_event
        logger.debug("Subscribed participant %s", participant_id)

    def unsubscribe(self, participant_id: str) -> None:
        """Drop a participant's callback, if any."""
        if self._channels.pop(participant_id, None) is not None:
            logger.debug("Unsubscribed participant %s", participant_id)

    def unsubscribe_all(self) -> None:
        self._channels.clear()

    def is_subscribed(self, participant_id: str) -> bool:
        return participant_id in self._channels

    @property
    def active_subscriptions(self) -> list[str]:
        """Return the participant ids with a registered callback."""
        return list(self._channels.keys())

    def publish(self, payload: EventPayload) -> int:
        """
        Deliver a payload to each of its recipients.

        Returns:
            Number of callbacks that completed
        """
        delivered = 0
        for recipient in payload.recipients:
            on_event = self._channels.get(recipient)
            if on_event is None:
                logger.debug(
                    "No channel for %s, dropping %s", recipient, payload.event.name
                )
                continue
            try:
                on_event(payload)
            except Exception:
                logger.exception(
                    "Error delivering %s to %s", payload.event.name, recipient
                )
                continue
            delivered += 1
        return delivered
