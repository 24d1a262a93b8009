"""
app/api/v1/router.py
────────────────────
Aggregate every v1 endpoint module under one router.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import dashboards, preferences

api_router = APIRouter()
api_router.include_router(dashboards.router, prefix="/dashboards", tags=["dashboards"])
api_router.include_router(preferences.router, prefix="/preferences", tags=["preferences"])
