"""
PhoLight - Wire Messages
==========================
Every payload is UTF-8 text holding one JSON object with a string "type".

Inbound (client -> server):
    - "client-connect"   : Informational, no action
    - "request-password" : Ask for the current host password
    - "host-login"       : {password} - become host
    - "host-logout"      : Give up host role, rotate password
    - "set-host"         : Legacy, become host without a password
    - "host-color"       : {color, mode?} - relay a colour to the audience
    - "host-effect"      : {effect, color} - relay an effect to the audience

Outbound (server -> client):
    - "password-response" : {password}
    - "login-success"     : {message}
    - "login-error"       : {message}
    - "logout-success"    : {newPassword}
    - "participant-count" : {count}
    - "host-color"        : {color, mode}
    - "host-effect"       : {effect, color}

Inbound payloads are validated with pydantic. Anything that fails to parse
is reported as None and dropped by the caller.
"""

import logging
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator


logger = logging.getLogger("pholight.messages")

DEFAULT_MODE = "static"
LOGIN_SUCCESS_MESSAGE = "Login successful"
LOGIN_ERROR_MESSAGE = "Invalid or expired password"


# =============================================================================
# Inbound Models (Pydantic)
# =============================================================================

class ClientConnect(BaseModel):
    """Sent by audience pages on open. Carries no data."""
    type: Literal["client-connect"]

class RequestPassword(BaseModel):
    """Host page asking for the current password."""
    type: Literal["request-password"]

class HostLogin(BaseModel):
    """Login attempt. A missing or non-string password simply fails."""
    type: Literal["host-login"]
    password: Any = None

class HostLogout(BaseModel):
    type: Literal["host-logout"]

class SetHost(BaseModel):
    """Legacy unauthenticated host claim, kept for old host pages."""
    type: Literal["set-host"]

class HostColor(BaseModel):
    """A solid colour (or colour mode) to push to the audience."""
    type: Literal["host-color"]
    color: str = Field(..., min_length=1, description="CSS colour, usually #rrggbb")
    mode: str = Field(DEFAULT_MODE, description="Display mode, e.g. static or pulse")

    @field_validator("mode", mode="before")
    @classmethod
    def _default_mode(cls, value: Any) -> Any:
        return value or DEFAULT_MODE

class HostEffect(BaseModel):
    """A named light effect to push to the audience."""
    type: Literal["host-effect"]
    effect: str = Field(..., min_length=1)
    color: str = Field(..., min_length=1)


InboundMessage = Annotated[
    Union[
        ClientConnect,
        RequestPassword,
        HostLogin,
        HostLogout,
        SetHost,
        HostColor,
        HostEffect,
    ],
    Field(discriminator="type"),
]

_inbound_adapter = TypeAdapter(InboundMessage)


def parse_message(raw: str | bytes) -> BaseModel | None:
    """
    Decode and validate one inbound payload.

    Args:
        raw: The text (or bytes) frame received from the client.

    Returns:
        The matching inbound model, or None if the payload is not valid
        JSON, not an object, has an unknown type, or fails field checks.
    """
    try:
        return _inbound_adapter.validate_json(raw)
    except ValidationError as e:
        logger.debug(f"Dropped inbound payload: {e.error_count()} validation error(s)")
        return None


# =============================================================================
# Outbound Builders
# =============================================================================

def password_response(password: str) -> dict:
    return {"type": "password-response", "password": password}


def login_success() -> dict:
    return {"type": "login-success", "message": LOGIN_SUCCESS_MESSAGE}


def login_error(message: str = LOGIN_ERROR_MESSAGE) -> dict:
    return {"type": "login-error", "message": message}


def logout_success(new_password: str) -> dict:
    return {"type": "logout-success", "newPassword": new_password}


def participant_count(count: int) -> dict:
    return {"type": "participant-count", "count": count}


def host_color(color: str, mode: str = DEFAULT_MODE) -> dict:
    return {"type": "host-color", "color": color, "mode": mode}


def host_effect(effect: str, color: str) -> dict:
    return {"type": "host-effect", "effect": effect, "color": color}
