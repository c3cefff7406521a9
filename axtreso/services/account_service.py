# AXTRESO/backend/axtreso/services/account_service.py : inscription et connexion des gérants

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from axtreso.auth import hash_password, check_password_login
from axtreso.errors import Conflict, Unauthorized, StoreUnavailable
from axtreso.models import models
from axtreso.models.models import utcnow
from axtreso.services.store import Store

logger = logging.getLogger(__name__)

DEFAULT_NOTIFICATION_SETTINGS = {
    "daily_reminder": True,
    "inactivity_alert": True,
    "report_notification": True,
}


def register_manager(store: Store, email: str, password: str, salon_name: str,
                     city: str, phone: Optional[str] = None) -> models.User:
    """Crée le compte gérant, son salon et ses réglages de notification par défaut"""
    if store.get_user_by_email(email):
        raise Conflict("Cet email est déjà utilisé")

    try:
        user = store.create_manager_account(
            user={
                "email": email,
                "password_hash": hash_password(password),
                "name": salon_name,
                "login_method": "email",
                "role": "manager",
            },
            salon={"name": salon_name, "city": city, "phone": phone},
            settings=DEFAULT_NOTIFICATION_SETTINGS,
        )
    except IntegrityError:
        # Inscription concurrente avec le même email
        if store.get_user_by_email(email):
            raise Conflict("Cet email est déjà utilisé")
        raise

    logger.info(f"✅ Gérant {user.id} inscrit à {city}")
    return user


def login_manager(store: Store, email: str, password: str) -> models.User:
    """Vérifie les identifiants d'un gérant et renvoie son compte"""
    user = store.get_user_by_email(email)
    if not check_password_login(user, password):
        raise Unauthorized("Email ou mot de passe incorrect")

    touch_last_signed_in(store, user)
    return user


def touch_last_signed_in(store: Store, user: models.User):
    """Met à jour la date de dernière connexion sans bloquer la connexion"""
    try:
        store.update_user(user.id, last_signed_in=utcnow())
    except (SQLAlchemyError, StoreUnavailable) as e:
        logger.warning(f"⚠️ Date de connexion non mise à jour pour {user.id}: {e}")
