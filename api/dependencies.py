"""
FastAPI dependencies.
"""

from fastapi import Request

from core.runtime import FleetRuntime


def get_runtime(request: Request) -> FleetRuntime:
    """Runtime attached to the application at startup."""
    return request.app.state.runtime
