# AXTRESO/backend/axtreso/routes/salons.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from axtreso import auth
from axtreso.errors import NotFound, Unauthorized
from axtreso.models import models as db_models
from axtreso.schemas import schemas
from axtreso.services.store import Store, get_store

router = APIRouter(prefix="/api/salon", tags=["salon"])


@router.get("/getMysalon", response_model=Optional[schemas.SalonOut])
def get_my_salon(
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    """Salon du gérant connecté (le premier s'il en a plusieurs)"""
    salons = store.get_salons_by_manager(current_user.id)
    return salons[0] if salons else None


@router.post("/updateSalon", response_model=schemas.SuccessOut)
def update_salon(
    payload: schemas.SalonUpdateIn,
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    """Mise à jour des informations du salon par son gérant"""
    auth.authorize_salon(store, current_user, payload.salon_id, allow_admin=False)
    store.update_salon(payload.salon_id, **payload.model_dump(exclude={"salon_id"}, exclude_none=True))
    store.create_audit_log(current_user.id, "salon_updated", salon_id=payload.salon_id)
    return {"success": True}


@router.post("/changePassword", response_model=schemas.SuccessOut)
def change_password(
    payload: schemas.ChangePasswordIn,
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    """Changement de mot de passe par l'utilisateur connecté"""
    if not auth.check_password_login(current_user, payload.current_password):
        raise Unauthorized("Mot de passe actuel incorrect")

    store.update_user(current_user.id, password_hash=auth.hash_password(payload.new_password))
    store.create_audit_log(current_user.id, "password_changed")
    return {"success": True}


# ========== ENDPOINTS ADMINISTRATEUR ==========

@router.get("/getAllSalons", response_model=List[schemas.SalonOut])
def get_all_salons(
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.require_admin)
):
    """Liste de tous les salons, les plus récents d'abord"""
    return store.get_all_salons()


@router.get("/getSalonById", response_model=schemas.SalonOut)
def get_salon_by_id(
    salon_id: int = Query(...),
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.require_admin)
):
    salon = store.get_salon_by_id(salon_id)
    if not salon:
        raise NotFound("Salon introuvable")
    return salon


@router.post("/toggleSalonStatus", response_model=schemas.SuccessOut)
def toggle_salon_status(
    payload: schemas.ToggleSalonStatusIn,
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.require_admin)
):
    """Active ou désactive un salon"""
    if not store.update_salon(payload.salon_id, status=payload.status):
        raise NotFound("Salon introuvable")

    store.create_audit_log(
        current_user.id,
        f"salon_status_changed_to_{payload.status}",
        salon_id=payload.salon_id,
    )
    return {"success": True}


@router.post("/resetSalonPassword", response_model=schemas.SuccessOut)
def reset_salon_password(
    payload: schemas.ResetSalonPasswordIn,
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.require_admin)
):
    """Réinitialise le mot de passe du gérant d'un salon"""
    salon = store.get_salon_by_id(payload.salon_id)
    if not salon:
        raise NotFound("Salon introuvable")

    manager = store.get_user_by_id(salon.manager_id)
    if not manager:
        raise NotFound("Gérant introuvable")

    store.update_user(manager.id, password_hash=auth.hash_password(payload.new_password))
    store.create_audit_log(current_user.id, "salon_password_reset", salon_id=payload.salon_id)
    return {"success": True}


@router.post("/deleteSalon", response_model=schemas.SuccessOut)
def delete_salon(
    payload: schemas.SalonIdIn,
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.require_admin)
):
    """Supprime un salon et toutes ses données"""
    if not store.delete_salon(payload.salon_id):
        raise NotFound("Salon introuvable")

    store.create_audit_log(current_user.id, "salon_deleted", salon_id=payload.salon_id)
    return {"success": True}
