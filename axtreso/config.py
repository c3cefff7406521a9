# AXTRESO/backend/axtreso/config.py

import os
import logging
from dotenv import load_dotenv
from pathlib import Path

logger = logging.getLogger(__name__)

# Trouve le chemin absolu du dossier contenant ce fichier (axtreso/)
BASE_DIR = Path(__file__).parent.absolute()
env_path = BASE_DIR / '.env'

# Charge les variables depuis le fichier .env (l'environnement reste prioritaire)
if env_path.exists():
    load_dotenv(dotenv_path=env_path)
    logger.info(f"✅ Fichier .env chargé depuis: {env_path}")

# ============================================
# CONFIGURATION ENVIRONNEMENT
# ============================================
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
APP_VERSION = "1.0.0"

# ============================================
# CONFIGURATION BASE DE DONNÉES
# ============================================
# Sans DATABASE_URL, les lectures renvoient des résultats vides
# et les écritures échouent avec UNAVAILABLE.
DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL and ENVIRONMENT == "production":
    raise ValueError("DATABASE_URL must be set in production")

# ============================================
# CONFIGURATION SESSION / AUTH
# ============================================
SECRET_KEY = os.getenv("SECRET_KEY", "change_this_secret_key_in_production")
if SECRET_KEY == "change_this_secret_key_in_production" and ENVIRONMENT == "production":
    raise ValueError("SECRET_KEY must be changed in production")

ALGORITHM = os.getenv("ALGORITHM", "HS256")
SESSION_EXPIRE_MINUTES = int(os.getenv("SESSION_EXPIRE_MINUTES", str(60 * 24 * 365)))  # 1 an
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "app_session_id")
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"
SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "lax").lower()
SESSION_COOKIE_PATH = "/"

# Identité externe promue automatiquement administrateur à la première connexion
OWNER_OPEN_ID = os.getenv("OWNER_OPEN_ID", "")

# ============================================
# CONFIGURATION OAUTH (connexion administrateur)
# ============================================
OAUTH_SERVER_URL = os.getenv("OAUTH_SERVER_URL", "")
APP_ID = os.getenv("APP_ID", "")
OAUTH_TIMEOUT_SECONDS = int(os.getenv("OAUTH_TIMEOUT_SECONDS", "10"))

# ============================================
# CONFIGURATION EXPORTS DE RAPPORTS
# ============================================
EXPORT_DIR = Path(os.getenv("EXPORT_DIR", str(BASE_DIR.parent / "data" / "reports")))
EXPORT_BASE_URL = os.getenv("EXPORT_BASE_URL", "/api/report/download")

# ============================================
# CONFIGURATION CORS (Frontend)
# ============================================
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")

# ============================================
# LOGGING
# ============================================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
