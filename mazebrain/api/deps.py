"""API dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, Request

from mazebrain.services.solver_session import SessionRegistry


def get_registry(request: Request) -> SessionRegistry:
    """Get the application's solver session registry."""
    return request.app.state.registry


# Type alias for cleaner route signatures
Registry = Annotated[SessionRegistry, Depends(get_registry)]
