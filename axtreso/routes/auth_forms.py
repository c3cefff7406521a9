# AXTRESO/backend/axtreso/routes/auth_forms.py : routes REST de connexion (formulaires HTML et OAuth)

import base64
import json
import logging
import time

from fastapi import APIRouter, Body, Depends, Form, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError

from axtreso import auth
from axtreso.errors import AppError
from axtreso.schemas import schemas
from axtreso.services import account_service
from axtreso.services.identity_provider import IdentityProvider, get_identity_provider
from axtreso.services.store import Store, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

# Messages affichés par les formulaires, par champ en erreur
FIELD_MESSAGES = {
    "email": "Email invalide",
    "password": "Le mot de passe doit contenir au moins 8 caractères",
    "salon_name": "Le nom du salon doit contenir au moins 2 caractères",
    "salonName": "Le nom du salon doit contenir au moins 2 caractères",
    "city": "Ville non prise en charge",
    "phone": "Numéro de téléphone invalide",
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _invalid(exc: ValidationError, missing_message: str) -> JSONResponse:
    errors = exc.errors()
    if any(err["type"] == "missing" for err in errors):
        return _error(status.HTTP_400_BAD_REQUEST, missing_message)
    field = errors[0]["loc"][0] if errors[0]["loc"] else None
    return _error(status.HTTP_400_BAD_REQUEST, FIELD_MESSAGES.get(field, "Données invalides"))


def _auth_data(user) -> str:
    """Données de session lisibles par le frontend (base64 JSON)"""
    payload = {"user_id": user.id, "email": user.email, "timestamp": int(time.time() * 1000)}
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


@router.post("/auth/manager/register")
def register(data: dict = Body(...), store: Store = Depends(get_store)):
    """Inscription d'un gérant depuis un formulaire classique"""
    try:
        payload = schemas.RegisterManagerIn.model_validate(data)
    except ValidationError as e:
        return _invalid(e, "Tous les champs sont requis")

    try:
        account_service.register_manager(
            store,
            email=payload.email,
            password=payload.password,
            salon_name=payload.salon_name,
            city=payload.city,
            phone=payload.phone,
        )
    except AppError as e:
        return _error(e.status_code, e.message)

    return {"success": True, "message": "Inscription réussie. Veuillez vous connecter."}


def _login(store: Store, data: dict):
    """Renvoie (utilisateur, None) ou (None, réponse d'erreur)"""
    try:
        payload = schemas.LoginManagerIn.model_validate(data)
    except ValidationError as e:
        return None, _invalid(e, "Email et mot de passe requis")

    try:
        return account_service.login_manager(store, payload.email, payload.password), None
    except AppError as e:
        return None, _error(e.status_code, e.message)


@router.post("/auth/manager/login")
def login(data: dict = Body(...), store: Store = Depends(get_store)):
    """Connexion d'un gérant (JSON), ouvre la session par cookie"""
    user, failure = _login(store, data)
    if failure:
        return failure

    response = JSONResponse(content={"success": True, "user_id": user.id, "auth": _auth_data(user)})
    auth.set_session_cookie(response, user)
    return response


@router.post("/auth/manager/login-form")
def login_form(email: str = Form(""), password: str = Form(""), store: Store = Depends(get_store)):
    """Connexion depuis un formulaire HTML, redirige vers le tableau de bord"""
    if not email or not password:
        return _error(status.HTTP_400_BAD_REQUEST, "Email et mot de passe requis")

    user, failure = _login(store, {"email": email, "password": password})
    if failure:
        return failure

    response = RedirectResponse(
        url=f"/manager/dashboard?auth={_auth_data(user)}",
        status_code=status.HTTP_303_SEE_OTHER,
    )
    auth.set_session_cookie(response, user)
    return response


@router.get("/oauth/callback")
async def oauth_callback(
    request: Request,
    code: str,
    state: str = "",
    store: Store = Depends(get_store),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    """Retour du fournisseur OAuth : ouvre la session de l'administrateur"""
    redirect_uri = str(request.url_for("oauth_callback"))
    identity = await provider.exchange(code, redirect_uri)

    # La session SQLAlchemy est synchrone : hors de la boucle d'événements
    user = await run_in_threadpool(
        store.upsert_external_user, identity.open_id, name=identity.name, email=identity.email
    )
    logger.info(f"🔐 Connexion OAuth de l'utilisateur {user.id} (rôle {user.role})")

    response = RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
    auth.set_session_cookie(response, user)
    return response
