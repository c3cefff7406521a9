# AXTRESO/backend/axtreso/routes/system.py

import datetime
import sys

import fastapi
import sqlalchemy
from fastapi import APIRouter

from axtreso.config import APP_VERSION, ENVIRONMENT
from axtreso.database import check_connection

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/health")
def health_check():
    """
    Endpoint de santé pour le monitoring
    """
    db_status = check_connection()

    return {
        "status": "healthy" if db_status else "unhealthy",
        "database": "connected" if db_status else "disconnected",
        "version": APP_VERSION,
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat()
    }


@router.get("/info")
def info():
    """
    Informations détaillées sur l'API
    """
    return {
        "name": "AXTRESO API",
        "version": APP_VERSION,
        "python_version": sys.version,
        "fastapi_version": fastapi.__version__,
        "sqlalchemy_version": sqlalchemy.__version__,
        "environment": ENVIRONMENT
    }
