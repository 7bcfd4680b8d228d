"""
PhoLight - Server Package
=========================
Real-time relay that lets one host browser drive the screen colour of
every audience browser in the room.

This package provides:
- A rotating, human-readable host password
- A registry of live connections and their roles (host / audience)
- A pure dispatch core that turns inbound messages into outbound sends
- A FastAPI WebSocket transport that delivers those sends

Architecture:
    password.py  -> PasswordAuthority: generate, validate and rotate the secret
    registry.py  -> ConnectionRegistry: connection -> role bookkeeping
    messages.py  -> Inbound parsing and outbound message builders
    counter.py   -> ParticipantCounter: audience-size broadcasts
    router.py    -> Message dispatch table (pure, no I/O)
    websocket.py -> RelayManager: WebSocket accept/receive/send loop
    config.py    -> Read config.yaml and environment overrides
    main.py      -> FastAPI app creation, routes, static file serving
"""

__version__ = "1.0.0"
