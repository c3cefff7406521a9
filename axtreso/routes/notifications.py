# AXTRESO/backend/axtreso/routes/notifications.py

from typing import Optional

from fastapi import APIRouter, Depends, Query

from axtreso import auth
from axtreso.models import models as db_models
from axtreso.schemas import schemas
from axtreso.services.store import Store, get_store

router = APIRouter(prefix="/api/notification", tags=["notification"])


@router.get("/getSettings", response_model=Optional[schemas.NotificationSettingsOut])
def get_settings(
    salon_id: int = Query(...),
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    """Réglages de notification du salon (réservé à son gérant)"""
    auth.authorize_salon(store, current_user, salon_id, allow_admin=False)
    return store.get_notification_settings(salon_id)


@router.post("/updateSettings", response_model=schemas.NotificationSettingsOut)
def update_settings(
    payload: schemas.NotificationSettingsUpdate,
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    """Mise à jour partielle : les champs absents restent inchangés"""
    auth.authorize_salon(store, current_user, payload.salon_id, allow_admin=False)
    return store.create_or_update_notification_settings(
        payload.salon_id,
        **payload.model_dump(exclude={"salon_id"}, exclude_none=True)
    )
