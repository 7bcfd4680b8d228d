"""
PhoLight - Participant Counter
================================
Derives the audience size from the registry and addresses it to everyone.

The count only includes Audience connections, but the message goes to all
connections (hosts included) so the host page can display it.
"""

from typing import Any, NamedTuple

from pholight import messages
from pholight.registry import ConnectionRegistry, Role


class Send(NamedTuple):
    """One outbound message addressed to one connection."""
    target: Any
    payload: dict


class ParticipantCounter:
    """Builds participant-count sends for a registry."""

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    @property
    def count(self) -> int:
        return self.registry.count(Role.AUDIENCE)

    def publish(self) -> list[Send]:
        """Return one participant-count send per registered connection."""
        payload = messages.participant_count(self.count)
        return [Send(conn, payload) for conn in self.registry]
