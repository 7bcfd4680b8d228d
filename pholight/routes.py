"""
PhoLight - REST API Routes
============================
Small read-only HTTP API next to the WebSocket relay.

Route groups:
    /api/health - Liveness probe
    /api/status - Connection and participant counts, password expiry

The password itself is never exposed over HTTP; host pages request it
over the WebSocket.
"""

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from pholight.registry import Role
from pholight.websocket import RelayManager


# =============================================================================
# Response Models (Pydantic)
# =============================================================================

class HealthResponse(BaseModel):
    status: str = "ok"

class StatusResponse(BaseModel):
    """Current relay state, as shown on the host dashboard."""
    participants: int = Field(description="Connections in the audience role")
    hosts: int = Field(description="Connections in the host role")
    connections: int = Field(description="All live connections")
    password_expires_at: datetime = Field(description="When the current host password lapses")


# =============================================================================
# Router Factory
# =============================================================================

def create_router(relay: RelayManager) -> APIRouter:
    """
    Create the API router.

    Args:
        relay: The relay manager whose state is reported.

    Returns:
        Configured APIRouter with all endpoints registered.
    """
    router = APIRouter(prefix="/api")

    @router.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse()

    @router.get("/status", response_model=StatusResponse)
    async def status():
        """Counts are read live from the registry."""
        registry = relay.registry
        return StatusResponse(
            participants=registry.count(Role.AUDIENCE),
            hosts=registry.count(Role.HOST),
            connections=len(registry),
            password_expires_at=relay.authority.expires_at,
        )

    return router
