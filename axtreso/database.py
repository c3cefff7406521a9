# AXTRESO/backend/axtreso/database.py

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from axtreso.config import DATABASE_URL
import logging

logger = logging.getLogger(__name__)


def build_engine(url):
    """Construit le moteur SQLAlchemy pour une URL de connexion"""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False}, pool_pre_ping=True)
    return create_engine(
        url,
        pool_size=5,  # Nombre de connexions permanentes
        max_overflow=10,  # Connexions supplémentaires temporaires
        pool_pre_ping=True,  # Vérifie que la connexion est vivante avant utilisation
        pool_recycle=1800,
        echo=False
    )


# Le moteur est construit une seule fois au démarrage du processus.
# Sans DATABASE_URL il reste absent : les lectures renvoient des résultats
# vides et les écritures lèvent StoreUnavailable.
engine = build_engine(DATABASE_URL) if DATABASE_URL else None
if engine is None:
    logger.warning("⚠️  DATABASE_URL non définie, la base de données est indisponible")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base pour créer les modèles (tables)
Base = declarative_base()


def get_db():
    """
    Dépendance FastAPI pour obtenir une session de base de données.
    Produit None lorsque la base n'est pas configurée.
    """
    if engine is None:
        yield None
        return
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """Crée toutes les tables définies dans les modèles"""
    # Import des modèles pour les enregistrer sur Base.metadata
    from axtreso.models import models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
    logger.info("✅ Tables créées/vérifiées avec succès")


def check_connection(bind=None):
    """Vérifie que la connexion à la base fonctionne"""
    target = bind or engine
    if target is None:
        return False
    try:
        with target.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"❌ Erreur de connexion: {e}")
        return False
