# AXTRESO/backend/axtreso/routes/auth.py

from typing import Optional

from fastapi import APIRouter, Depends, Response

from axtreso import auth
from axtreso.models import models as db_models
from axtreso.schemas import schemas
from axtreso.services import account_service
from axtreso.services.store import Store, get_store

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/me", response_model=Optional[schemas.UserOut])
def me(current_user: Optional[db_models.User] = Depends(auth.get_optional_user)):
    """Utilisateur connecté, ou null pour un visiteur"""
    return current_user


@router.post("/logout", response_model=schemas.SuccessOut)
def logout(response: Response):
    """Déconnexion : efface toujours le cookie de session"""
    auth.clear_session_cookie(response)
    return {"success": True}


@router.post("/registerManager", response_model=schemas.AuthResultOut)
def register_manager(payload: schemas.RegisterManagerIn, store: Store = Depends(get_store)):
    """Inscription d'un gérant avec création de son salon"""
    user = account_service.register_manager(
        store,
        email=payload.email,
        password=payload.password,
        salon_name=payload.salon_name,
        city=payload.city,
        phone=payload.phone,
    )
    return {"success": True, "user_id": user.id}


@router.post("/loginManager", response_model=schemas.AuthResultOut)
def login_manager(payload: schemas.LoginManagerIn, response: Response, store: Store = Depends(get_store)):
    """Connexion d'un gérant par email et mot de passe"""
    user = account_service.login_manager(store, payload.email, payload.password)
    auth.set_session_cookie(response, user)
    return {"success": True, "user_id": user.id}
