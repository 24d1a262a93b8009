"""
app/api/v1/endpoints/preferences.py
────────────────────────────────────
User preference endpoints.

Routes
------
GET /api/v1/preferences   Current time range and theme.
PUT /api/v1/preferences   Update either or both; persisted immediately.

The saved time range is the default for refreshes that do not name one.
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_preference_store
from core.preferences import PreferenceStore
from schemas.dashboard import PreferencesOut, PreferencesUpdate

router = APIRouter()


@router.get("/", response_model=PreferencesOut, summary="Current preferences")
def read_preferences(
    store: PreferenceStore = Depends(get_preference_store),
) -> PreferencesOut:
    return PreferencesOut(**store.as_dict())


@router.put("/", response_model=PreferencesOut, summary="Update preferences")
def update_preferences(
    update: PreferencesUpdate,
    store: PreferenceStore = Depends(get_preference_store),
) -> PreferencesOut:
    """
    Persist the provided fields; omitted fields are left unchanged.

    Raises:
        HTTPException 422: Unsupported time range or theme (Pydantic).
    """
    if update.time_range is not None:
        store.set_time_range(update.time_range)
    if update.theme is not None:
        store.set_theme(update.theme)
    return PreferencesOut(**store.as_dict())
