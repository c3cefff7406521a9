# AXTRESO/backend/axtreso/errors.py : taxonomie des erreurs de l'API

import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Erreur métier avec un code lisible par la machine et un message utilisateur"""

    code = "INTERNAL_SERVER_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Erreur serveur"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(AppError):
    code = "BAD_REQUEST"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Requête invalide"


class Unauthorized(AppError):
    code = "UNAUTHORIZED"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Veuillez vous connecter"


class Forbidden(AppError):
    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Accès refusé"


class NotFound(AppError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Ressource introuvable"


class Conflict(AppError):
    code = "CONFLICT"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflit avec une ressource existante"


class ServiceUnavailable(AppError):
    code = "UNAVAILABLE"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service indisponible"


class StoreUnavailable(ServiceUnavailable):
    default_message = "Base de données indisponible"


def error_body(code, message):
    return {"error": {"code": code, "message": message}}


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.code, exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Les détails pydantic restent disponibles pour les formulaires du frontend
    details = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg")}
        for err in exc.errors()
    ]
    body = error_body(BadRequest.code, "Données invalides")
    body["error"]["details"] = details
    return JSONResponse(status_code=BadRequest.status_code, content=body)


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(f"⚠️ Violation de contrainte: {exc.orig}")
    return JSONResponse(
        status_code=Conflict.status_code,
        content=error_body(Conflict.code, Conflict.default_message),
    )


async def operational_error_handler(request: Request, exc: OperationalError):
    logger.error(f"❌ Base de données injoignable: {exc.orig}")
    return JSONResponse(
        status_code=StoreUnavailable.status_code,
        content=error_body(StoreUnavailable.code, StoreUnavailable.default_message),
    )


def register_error_handlers(app: FastAPI):
    """Branche la taxonomie d'erreurs sur l'application"""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(OperationalError, operational_error_handler)
