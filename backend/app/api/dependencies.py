"""
app/api/dependencies.py
───────────────────────
FastAPI dependency functions shared across all endpoints.

Usage
-----
    from app.api.dependencies import get_session_registry

    @router.get("/foo")
    def my_route(registry = Depends(get_session_registry)):
        ...
"""

from aggregation.registry import SessionRegistry, get_registry
from core.preferences import PreferenceStore, get_preferences


def get_session_registry() -> SessionRegistry:
    """
    FastAPI dependency that returns the session registry singleton.

    Inject via ``Depends(get_session_registry)`` in any route handler.
    """
    return get_registry()


def get_preference_store() -> PreferenceStore:
    """FastAPI dependency that returns the user preference store."""
    return get_preferences()
