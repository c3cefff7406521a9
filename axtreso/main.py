# AXTRESO/backend/axtreso/main.py

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from axtreso.config import ALLOWED_ORIGINS, APP_VERSION, ENVIRONMENT, LOG_LEVEL
from axtreso.constants import CITIES, DECAISSEMENT_DESIGNATIONS, ENCAISSEMENT_DESIGNATIONS
from axtreso.database import check_connection, create_tables
from axtreso.errors import register_error_handlers
from axtreso.routes import (
    auth,
    auth_forms,
    dashboard,
    notifications,
    reports,
    salons,
    system,
    transactions,
)
import logging

# Configuration du logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Démarrage de l'API AXTRESO...")

    if check_connection():
        logger.info("✅ Connexion à la base de données établie")
        # En production, les migrations passent par un outil dédié
        create_tables()
    else:
        # L'API reste servie : lectures vides, écritures en 503
        logger.error("❌ Base de données indisponible, démarrage en mode dégradé")

    yield

    logger.info("👋 Arrêt de l'API AXTRESO")


app = FastAPI(
    title="AXTRESO API",
    description="Suivi des encaissements et décaissements des salons de beauté",
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "auth",
            "description": "Inscription, connexion et session des gérants"
        },
        {
            "name": "salon",
            "description": "Gestion des salons (multi-tenant)"
        },
        {
            "name": "transaction",
            "description": "Encaissements et décaissements"
        },
        {
            "name": "report",
            "description": "Rapports financiers et exports"
        },
        {
            "name": "notification",
            "description": "Réglages de notification des salons"
        },
        {
            "name": "dashboard",
            "description": "Tableaux de bord gérant et administrateur 📊"
        },
        {
            "name": "system",
            "description": "Santé et informations de l'API"
        }
    ]
)

# Le cookie de session impose des origines explicites
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Inclusion des routeurs
app.include_router(auth.router)
app.include_router(auth_forms.router)
app.include_router(salons.router)
app.include_router(transactions.router)
app.include_router(reports.router)
app.include_router(notifications.router)
app.include_router(dashboard.router)
app.include_router(system.router)


@app.get("/")
def root():
    """
    Page d'accueil publique de l'API
    """
    return {
        "success": True,
        "message": "AXTRESO backend opérationnel 🚀",
        "version": app.version,
        "environment": ENVIRONMENT,
        "cities": CITIES,
        "designations": {
            "encaissement": ENCAISSEMENT_DESIGNATIONS,
            "decaissement": DECAISSEMENT_DESIGNATIONS,
        },
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "endpoints": {
            "auth": "/api/auth",
            "salon": "/api/salon",
            "transaction": "/api/transaction",
            "report": "/api/report",
            "notification": "/api/notification",
            "dashboard": "/api/dashboard",
        },
        "health_check": "/api/system/health"
    }
