"""
PhoLight - Broadcast Router
=============================
Turns one inbound message from one connection into a list of outbound
sends. No I/O happens here: the router mutates the registry and password
authority it was given and returns Send tuples for the transport to
deliver, so the whole dispatch table can be tested without a socket.

Dispatch table:
    request-password -> unicast password-response
    host-login       -> validate; unicast login-success or login-error
    host-logout      -> (host only) demote, rotate; unicast logout-success
    set-host         -> promote without a password (legacy)
    host-color       -> host-color to every current audience connection
    host-effect      -> host-effect to every current audience connection
    anything else    -> nothing

Any role change is followed by a participant-count publish to everyone.

Usage:
    router = BroadcastRouter(registry, authority)
    sends = router.connected(ws)
    sends = router.dispatch(ws, raw_text)
    sends = router.disconnected(ws)
"""

import logging
from typing import Any, Callable

from pydantic import BaseModel

from pholight import messages
from pholight.counter import ParticipantCounter, Send
from pholight.messages import (
    HostColor,
    HostEffect,
    HostLogin,
    HostLogout,
    RequestPassword,
    SetHost,
)
from pholight.password import PasswordAuthority
from pholight.registry import ConnectionRegistry, Role


logger = logging.getLogger("pholight.router")


class BroadcastRouter:
    """
    Message dispatch for host/audience relay.

    Attributes:
        registry:       Live connections and their roles.
        authority:      Owner of the host password.
        counter:        Participant-count publisher over the same registry.
        exclusive_host: If True, a successful login demotes any other host.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        authority: PasswordAuthority,
        exclusive_host: bool = False,
    ):
        self.registry = registry
        self.authority = authority
        self.counter = ParticipantCounter(registry)
        self.exclusive_host = exclusive_host

        self._handlers: dict[type, Callable[[Any, Any], list[Send]]] = {
            RequestPassword: self._on_request_password,
            HostLogin: self._on_host_login,
            HostLogout: self._on_host_logout,
            SetHost: self._on_set_host,
            HostColor: self._on_host_color,
            HostEffect: self._on_host_effect,
        }

    # -- Membership ------------------------------------------------------------

    def connected(self, connection: Any) -> list[Send]:
        """Register a new connection as Audience and publish the count."""
        self.registry.register(connection)
        logger.info(f"Client connected, total: {len(self.registry)}")
        return self.counter.publish()

    def disconnected(self, connection: Any) -> list[Send]:
        """Forget a closed connection and publish the count to the rest."""
        if not self.registry.unregister(connection):
            return []
        logger.info(f"Client disconnected, total: {len(self.registry)}")
        return self.counter.publish()

    # -- Dispatch --------------------------------------------------------------

    def dispatch(self, sender: Any, message: str | bytes | BaseModel | None) -> list[Send]:
        """
        Handle one inbound message.

        Args:
            sender:  The connection the message arrived on.
            message: Raw payload, or an already-parsed inbound model.

        Returns:
            Sends to perform, in order. Empty for malformed, unknown or
            informational messages, and for senders no longer registered.
        """
        if sender not in self.registry:
            return []

        if isinstance(message, (str, bytes)):
            message = messages.parse_message(message)
        if message is None:
            return []

        handler = self._handlers.get(type(message))
        if handler is None:
            return []
        return handler(sender, message)

    # -- Handlers --------------------------------------------------------------

    def _on_request_password(self, sender: Any, msg: RequestPassword) -> list[Send]:
        logger.info("Password sent to client")
        return [Send(sender, messages.password_response(self.authority.secret))]

    def _on_host_login(self, sender: Any, msg: HostLogin) -> list[Send]:
        logger.info(f"Login attempt with password: {'***' if msg.password else 'empty'}")

        if not self.authority.validate(msg.password):
            logger.info("Host login failed - invalid password")
            return [Send(sender, messages.login_error())]

        changed = False
        if self.exclusive_host:
            for other in list(self.registry.host_connections()):
                if other is not sender and self.registry.set_role(other, Role.AUDIENCE):
                    changed = True
                    logger.info("Previous host demoted to audience")
        changed |= self.registry.set_role(sender, Role.HOST)

        logger.info("Host login successful")
        sends = [Send(sender, messages.login_success())]
        if changed:
            sends.extend(self.counter.publish())
        return sends

    def _on_host_logout(self, sender: Any, msg: HostLogout) -> list[Send]:
        if not self.registry.is_host(sender):
            return []

        self.registry.set_role(sender, Role.AUDIENCE)
        new_password = self.authority.rotate()
        logger.info("Host logged out, password rotated")
        return [Send(sender, messages.logout_success(new_password)), *self.counter.publish()]

    def _on_set_host(self, sender: Any, msg: SetHost) -> list[Send]:
        logger.info("A host is set")
        if self.registry.set_role(sender, Role.HOST):
            return self.counter.publish()
        return []

    def _on_host_color(self, sender: Any, msg: HostColor) -> list[Send]:
        logger.info(f"Host color: {msg.color} mode: {msg.mode}")
        return self._to_audience(messages.host_color(msg.color, msg.mode))

    def _on_host_effect(self, sender: Any, msg: HostEffect) -> list[Send]:
        logger.info(f"Host effect: {msg.effect} with color: {msg.color}")
        return self._to_audience(messages.host_effect(msg.effect, msg.color))

    def _to_audience(self, payload: dict) -> list[Send]:
        return [Send(conn, payload) for conn in self.registry.audience_connections()]
