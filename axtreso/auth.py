# AXTRESO/backend/axtreso/auth.py : sessions, mots de passe et contrôle d'accès

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from fastapi import Depends, Header, Request, Response
from jose import JWTError, jwt
from passlib.context import CryptContext

from axtreso.config import (
    SECRET_KEY,
    ALGORITHM,
    SESSION_EXPIRE_MINUTES,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SECURE,
    SESSION_COOKIE_SAMESITE,
    SESSION_COOKIE_PATH,
)
from axtreso.errors import Unauthorized, Forbidden, NotFound
from axtreso.models import models
from axtreso.services.store import Store, get_store

# bcrypt avec un facteur de coût de 10
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# ---------- MÉTHODES DE CONNEXION ----------
# Les deux méthodes partagent la table users mais restent distinctes :
# un compte OAuth (admin) n'est jamais utilisable avec un mot de passe.

@dataclass(frozen=True)
class ExternalIdentityLogin:
    open_id: str


@dataclass(frozen=True)
class PasswordLogin:
    email: str
    password_hash: str


LoginMethod = Union[ExternalIdentityLogin, PasswordLogin]


def login_method_of(user: models.User) -> Optional[LoginMethod]:
    """Méthode de connexion effective d'un utilisateur"""
    if user.login_method == "email" and user.email and user.password_hash:
        return PasswordLogin(email=user.email, password_hash=user.password_hash)
    if user.login_method == "oauth" and user.open_id:
        return ExternalIdentityLogin(open_id=user.open_id)
    return None


def check_password_login(user: Optional[models.User], password: str) -> bool:
    """Vrai si l'utilisateur peut se connecter avec ce mot de passe"""
    if user is None:
        return False
    method = login_method_of(user)
    if not isinstance(method, PasswordLogin):
        return False
    return verify_password(password, method.password_hash)


# ---------- JETON DE SESSION ----------

def create_session_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=SESSION_EXPIRE_MINUTES))
    return jwt.encode({"sub": str(user_id), "exp": expire}, SECRET_KEY, algorithm=ALGORITHM)


def decode_session_token(token: str) -> Optional[int]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        subject = payload.get("sub")
        return int(subject) if subject is not None else None
    except (JWTError, ValueError):
        return None


def set_session_cookie(response: Response, user: models.User):
    """Ouvre la session de l'utilisateur via un cookie HttpOnly signé"""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=create_session_token(user.id),
        max_age=SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite=SESSION_COOKIE_SAMESITE,
        secure=SESSION_COOKIE_SECURE,
        path=SESSION_COOKIE_PATH,
    )


def clear_session_cookie(response: Response):
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path=SESSION_COOKIE_PATH,
        secure=SESSION_COOKIE_SECURE,
        httponly=True,
        samesite=SESSION_COOKIE_SAMESITE,
    )


# ---------- DÉPENDANCES FASTAPI ----------

def _session_token(request: Request, authorization: Optional[str]) -> Optional[str]:
    # Le cookie fait foi, l'en-tête Bearer sert aux clients hors navigateur
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        return token
    if authorization and authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1] or None
    return None


def get_optional_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    store: Store = Depends(get_store),
) -> Optional[models.User]:
    """Utilisateur de la session courante, ou None pour un visiteur anonyme"""
    token = _session_token(request, authorization)
    if not token:
        return None
    user_id = decode_session_token(token)
    if user_id is None:
        return None
    return store.get_user_by_id(user_id)


def get_current_user(user: Optional[models.User] = Depends(get_optional_user)) -> models.User:
    if user is None:
        raise Unauthorized()
    return user


def require_admin(user: models.User = Depends(get_current_user)) -> models.User:
    if user.role != "admin":
        raise Forbidden("Droits administrateur requis")
    return user


# ---------- CONTRÔLE DE PROPRIÉTÉ ----------

def authorize_salon(store: Store, user: models.User, salon_id: int, allow_admin: bool = True) -> models.Salon:
    """
    Vérifie l'accès d'un utilisateur à un salon et renvoie ce salon.

    Le contrôle de propriété passe avant le contrôle d'existence : un gérant
    qui vise un salon qui n'est pas le sien (ou inexistant) reçoit FORBIDDEN.
    L'admin, quand l'opération le permet, reçoit NOT_FOUND pour un salon absent.
    """
    salon = store.get_salon_by_id(salon_id)
    if allow_admin and user.role == "admin":
        if salon is None:
            raise NotFound("Salon introuvable")
        return salon
    if salon is None or salon.manager_id != user.id:
        raise Forbidden("Vous n'avez pas accès à ce salon")
    return salon
