# AXTRESO/backend/axtreso/services/store.py : couche d'accès aux données

"""
Une méthode par requête ou mutation, chacune traduite en une seule requête SQL.

Contrat :
- les lectures renvoient None / [] quand l'enregistrement n'existe pas ou que la
  base est indisponible (non configurée ou injoignable) ;
- les écritures lèvent StoreUnavailable quand la base n'est pas configurée et
  laissent remonter les erreurs du driver ;
- l'écriture du journal d'audit n'échoue jamais.
"""

import functools
import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from axtreso.config import OWNER_OPEN_ID
from axtreso.database import get_db
from axtreso.errors import StoreUnavailable
from axtreso.models import models
from axtreso.models.models import utcnow

logger = logging.getLogger(__name__)


def read_operation(default=None):
    """Dégrade une lecture en résultat vide quand la base est indisponible"""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            empty = default() if callable(default) else default
            if self.db is None:
                logger.warning(f"⚠️ {func.__name__}: base de données indisponible")
                return empty
            try:
                return func(self, *args, **kwargs)
            except OperationalError as e:
                logger.warning(f"⚠️ {func.__name__}: lecture impossible ({e.orig})")
                self.db.rollback()
                return empty
        return wrapper
    return decorator


def write_operation(func):
    """Exige une base configurée et annule la transaction en cas d'échec"""
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        if self.db is None:
            raise StoreUnavailable()
        try:
            return func(self, *args, **kwargs)
        except SQLAlchemyError:
            self.db.rollback()
            raise
    return wrapper


def _present(data: Dict[str, Any]) -> Dict[str, Any]:
    """Ne garde que les champs renseignés (non None)"""
    return {k: v for k, v in data.items() if v is not None}


class Store:
    """Accès aux tables de l'application à travers une session SQLAlchemy"""

    def __init__(self, db: Optional[Session]):
        self.db = db

    @property
    def available(self) -> bool:
        return self.db is not None

    def _save(self, instance):
        self.db.add(instance)
        self.db.commit()
        self.db.refresh(instance)
        return instance

    def _apply(self, instance, data: Dict[str, Any]):
        """Applique les champs tels quels : None efface la valeur"""
        for field, value in data.items():
            setattr(instance, field, value)
        self.db.commit()
        self.db.refresh(instance)
        return instance

    # ========== UTILISATEURS ==========

    @read_operation()
    def get_user_by_id(self, user_id: int) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.id == user_id).first()

    @read_operation()
    def get_user_by_email(self, email: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.email == email).first()

    @read_operation()
    def get_user_by_open_id(self, open_id: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.open_id == open_id).first()

    @write_operation
    def create_user(self, **data) -> models.User:
        return self._save(models.User(**data))

    @write_operation
    def upsert_external_user(self, open_id: str, name: Optional[str] = None,
                             email: Optional[str] = None, role: Optional[str] = None) -> models.User:
        """Crée ou met à jour un utilisateur connecté par identité externe"""
        if role is None and OWNER_OPEN_ID and open_id == OWNER_OPEN_ID:
            role = "admin"
        user = self.db.query(models.User).filter(models.User.open_id == open_id).first()
        if user is None:
            return self._save(models.User(
                open_id=open_id,
                name=name,
                email=email,
                login_method="oauth",
                role=role or "user",
                last_signed_in=utcnow(),
            ))
        return self._apply(user, _present({
            "name": name, "email": email, "role": role, "last_signed_in": utcnow(),
        }))

    @write_operation
    def update_user(self, user_id: int, **data) -> Optional[models.User]:
        user = self.db.query(models.User).filter(models.User.id == user_id).first()
        if user is None:
            return None
        return self._apply(user, data)

    # ========== SALONS ==========

    @read_operation()
    def get_salon_by_id(self, salon_id: int) -> Optional[models.Salon]:
        return self.db.query(models.Salon).filter(models.Salon.id == salon_id).first()

    @read_operation(list)
    def get_salons_by_manager(self, manager_id: int) -> List[models.Salon]:
        return self.db.query(models.Salon).filter(
            models.Salon.manager_id == manager_id
        ).order_by(models.Salon.id).all()

    @read_operation(list)
    def get_all_salons(self) -> List[models.Salon]:
        return self.db.query(models.Salon).order_by(
            models.Salon.created_at.desc(), models.Salon.id.desc()
        ).all()

    @write_operation
    def create_salon(self, **data) -> models.Salon:
        return self._save(models.Salon(**data))

    @write_operation
    def create_manager_account(self, user: Dict[str, Any], salon: Dict[str, Any],
                               settings: Dict[str, Any]) -> models.User:
        """Compte gérant, salon et réglages dans une seule transaction"""
        manager = models.User(**user)
        self.db.add(manager)
        self.db.flush()

        new_salon = models.Salon(manager_id=manager.id, **salon)
        self.db.add(new_salon)
        self.db.flush()

        self.db.add(models.NotificationSettings(salon_id=new_salon.id, **settings))
        self.db.commit()
        self.db.refresh(manager)
        return manager

    @write_operation
    def update_salon(self, salon_id: int, **data) -> Optional[models.Salon]:
        salon = self.db.query(models.Salon).filter(models.Salon.id == salon_id).first()
        if salon is None:
            return None
        return self._apply(salon, data)

    @write_operation
    def delete_salon(self, salon_id: int) -> bool:
        salon = self.db.query(models.Salon).filter(models.Salon.id == salon_id).first()
        if salon is None:
            return False
        # Les transactions, rapports et réglages suivent par cascade
        self.db.delete(salon)
        self.db.commit()
        return True

    # ========== TRANSACTIONS ==========

    @read_operation()
    def get_transaction_by_id(self, transaction_id: int) -> Optional[models.Transaction]:
        return self.db.query(models.Transaction).filter(models.Transaction.id == transaction_id).first()

    @read_operation(list)
    def get_transactions_by_salon(self, salon_id: int, start_date=None, end_date=None,
                                  type: Optional[str] = None, designation: Optional[str] = None,
                                  search: Optional[str] = None) -> List[models.Transaction]:
        """Transactions d'un salon, filtres combinés (bornes de dates incluses)"""
        query = self.db.query(models.Transaction).filter(models.Transaction.salon_id == salon_id)

        if start_date is not None:
            query = query.filter(models.Transaction.date >= start_date)
        if end_date is not None:
            query = query.filter(models.Transaction.date <= end_date)
        if type:
            query = query.filter(models.Transaction.type == type)
        if designation:
            query = query.filter(models.Transaction.designation == designation)
        if search:
            query = query.filter(models.Transaction.designation.contains(search, autoescape=True))

        return query.order_by(models.Transaction.date.desc(), models.Transaction.id.desc()).all()

    @write_operation
    def create_transaction(self, **data) -> models.Transaction:
        return self._save(models.Transaction(**data))

    @write_operation
    def update_transaction(self, transaction_id: int, **data) -> Optional[models.Transaction]:
        transaction = self.db.query(models.Transaction).filter(
            models.Transaction.id == transaction_id
        ).first()
        if transaction is None:
            return None
        return self._apply(transaction, data)

    @write_operation
    def delete_transaction(self, transaction_id: int) -> bool:
        deleted = self.db.query(models.Transaction).filter(
            models.Transaction.id == transaction_id
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted > 0

    # ========== RAPPORTS ==========

    @read_operation()
    def get_report_by_id(self, report_id: int) -> Optional[models.Report]:
        return self.db.query(models.Report).filter(models.Report.id == report_id).first()

    @read_operation(list)
    def get_reports_by_salon(self, salon_id: int) -> List[models.Report]:
        return self.db.query(models.Report).filter(
            models.Report.salon_id == salon_id
        ).order_by(models.Report.created_at.desc(), models.Report.id.desc()).all()

    @write_operation
    def create_report(self, **data) -> models.Report:
        return self._save(models.Report(**data))

    @write_operation
    def update_report(self, report_id: int, **data) -> Optional[models.Report]:
        report = self.db.query(models.Report).filter(models.Report.id == report_id).first()
        if report is None:
            return None
        return self._apply(report, data)

    @write_operation
    def delete_report(self, report_id: int) -> bool:
        report = self.db.query(models.Report).filter(models.Report.id == report_id).first()
        if report is None:
            return False
        self.db.delete(report)
        self.db.commit()
        return True

    @write_operation
    def create_report_export(self, **data) -> models.ReportExport:
        return self._save(models.ReportExport(**data))

    @read_operation()
    def get_report_export_by_key(self, file_key: str) -> Optional[models.ReportExport]:
        return self.db.query(models.ReportExport).filter(models.ReportExport.file_key == file_key).first()

    @read_operation(list)
    def get_report_exports_by_report(self, report_id: int) -> List[models.ReportExport]:
        return self.db.query(models.ReportExport).filter(
            models.ReportExport.report_id == report_id
        ).order_by(models.ReportExport.id).all()

    # ========== RÉGLAGES DE NOTIFICATION ==========

    @read_operation()
    def get_notification_settings(self, salon_id: int) -> Optional[models.NotificationSettings]:
        return self.db.query(models.NotificationSettings).filter(
            models.NotificationSettings.salon_id == salon_id
        ).first()

    @write_operation
    def create_or_update_notification_settings(self, salon_id: int, **data) -> models.NotificationSettings:
        settings = self.db.query(models.NotificationSettings).filter(
            models.NotificationSettings.salon_id == salon_id
        ).first()
        if settings is None:
            return self._save(models.NotificationSettings(salon_id=salon_id, **_present(data)))
        return self._apply(settings, _present(data))

    # ========== JOURNAL D'AUDIT ==========

    def create_audit_log(self, user_id: int, action: str, salon_id: Optional[int] = None,
                         details: Optional[Dict[str, Any]] = None) -> None:
        """Trace une action ; un échec est journalisé mais jamais propagé"""
        if self.db is None:
            logger.warning(f"⚠️ Audit '{action}' ignoré: base de données indisponible")
            return
        try:
            self.db.add(models.AuditLog(user_id=user_id, salon_id=salon_id, action=action, details=details))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Échec de l'écriture d'audit '{action}': {e}")

    @read_operation(list)
    def get_audit_logs(self, salon_id: Optional[int] = None, limit: int = 100) -> List[models.AuditLog]:
        query = self.db.query(models.AuditLog)
        if salon_id is not None:
            query = query.filter(models.AuditLog.salon_id == salon_id)
        return query.order_by(models.AuditLog.id.desc()).limit(limit).all()


def get_store(db: Optional[Session] = Depends(get_db)) -> Store:
    """Dépendance FastAPI : un Store par requête"""
    return Store(db)
