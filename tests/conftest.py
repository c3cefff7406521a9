# AXTRESO/backend/tests/conftest.py : configuration pour les tests

import sys
from decimal import Decimal
from pathlib import Path

# Ajoute le dossier parent au PYTHONPATH
BASE_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BASE_DIR))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from axtreso.main import app
from axtreso.database import Base, get_db
from axtreso import auth
from axtreso.models import models  # noqa: F401  enregistre les tables
from axtreso.services import account_service
from axtreso.services.report_service import TextReportExporter, get_report_exporter
from axtreso.services.store import Store

MANAGER_PASSWORD = "Secret123!"


def auth_headers(user):
    """En-tête Bearer équivalent au cookie de session"""
    return {"Authorization": f"Bearer {auth.create_session_token(user.id)}"}


def error_code(response):
    return response.json()["error"]["code"]


@pytest.fixture
def db_engine():
    """Base SQLite en mémoire partagée par toutes les sessions du test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    yield session
    session.close()


@pytest.fixture
def store(db_session):
    return Store(db_session)


@pytest.fixture
def client(db_engine, tmp_path):
    """Client de test avec la base de données de test et un dossier d'export temporaire"""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_report_exporter] = lambda: TextReportExporter(export_dir=tmp_path)
    yield TestClient(app)
    app.dependency_overrides.clear()


def _register(store, email, salon_name, city="Libreville"):
    user = account_service.register_manager(
        store, email=email, password=MANAGER_PASSWORD, salon_name=salon_name, city=city,
    )
    return user, store.get_salons_by_manager(user.id)[0]


@pytest.fixture
def manager(store):
    """Gérant inscrit avec son salon à Libreville"""
    return _register(store, "gerante@example.com", "Salon Élégance")


@pytest.fixture
def other_manager(store):
    """Second gérant, propriétaire d'un autre salon"""
    return _register(store, "autre@example.com", "Beauté Congo", city="Brazzaville")


@pytest.fixture
def admin(store):
    """Administrateur connecté par identité externe"""
    return store.create_user(open_id="owner-open-id", name="Admin", login_method="oauth", role="admin")


@pytest.fixture
def add_transaction(store):
    def _add(salon, type, designation, amount, date, comment=None):
        return store.create_transaction(
            salon_id=salon.id, type=type, designation=designation,
            amount=Decimal(str(amount)), date=date, comment=comment,
        )
    return _add
