"""
PhoLight - Connection Registry
================================
In-memory bookkeeping of every live connection and the role it holds.

Roles are kept here, keyed by connection, rather than as attributes on the
transport object, so the transport layer stays role-agnostic. Any hashable
object can stand in for a connection (a FastAPI WebSocket in production,
plain objects in tests).

Insertion order is preserved and is the order used for fan-out.
"""

from enum import Enum
from typing import Any, Hashable, Iterator


class Role(str, Enum):
    """The two roles a connection can hold."""

    AUDIENCE = "audience"
    HOST = "host"


class ConnectionRegistry:
    """
    Maps each live connection to its Role.

    This is a simple single-process structure. All mutation happens on the
    event loop thread, so no locking is done here.
    """

    def __init__(self) -> None:
        self._roles: dict[Hashable, Role] = {}

    def register(self, connection: Hashable) -> None:
        """Add a connection as Audience. Re-registering keeps its place."""
        self._roles.setdefault(connection, Role.AUDIENCE)

    def unregister(self, connection: Hashable) -> bool:
        """
        Remove a connection.

        Safe to call twice for the same connection (double close).

        Returns:
            True if the connection was present.
        """
        return self._roles.pop(connection, None) is not None

    def set_role(self, connection: Hashable, role: Role) -> bool:
        """
        Set a registered connection's role.

        Unknown connections are ignored, so a message that races a close
        can never resurrect a registry entry.

        Returns:
            True if the role actually changed.
        """
        current = self._roles.get(connection)
        if current is None or current is role:
            return False
        self._roles[connection] = role
        return True

    def role_of(self, connection: Hashable) -> Role | None:
        """Return the connection's role, or None if it is not registered."""
        return self._roles.get(connection)

    def is_host(self, connection: Hashable) -> bool:
        return self._roles.get(connection) is Role.HOST

    def audience_connections(self) -> Iterator[Any]:
        """Lazily yield every Audience connection in registry order."""
        return (c for c, role in self._roles.items() if role is Role.AUDIENCE)

    def host_connections(self) -> Iterator[Any]:
        """Lazily yield every Host connection in registry order."""
        return (c for c, role in self._roles.items() if role is Role.HOST)

    def count(self, role: Role) -> int:
        """Exact number of connections currently holding role."""
        return sum(1 for r in self._roles.values() if r is role)

    def __contains__(self, connection: object) -> bool:
        return connection in self._roles

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._roles))

    def __len__(self) -> int:
        return len(self._roles)
