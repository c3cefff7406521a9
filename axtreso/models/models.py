# AXTRESO/backend/axtreso/models/models.py

from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, ForeignKey, DateTime, JSON, Index
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from axtreso.database import Base


def utcnow():
    """Horodatage UTC naïf, format de stockage de toutes les dates"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    open_id = Column(String(64), unique=True, nullable=True)  # Connexion OAuth (admin)
    email = Column(String(320), unique=True, index=True, nullable=True)
    password_hash = Column(String(255), nullable=True)  # Connexion email (gérants)
    name = Column(Text)
    login_method = Column(String(64))  # 'oauth' ou 'email'
    role = Column(String(20), default="user", nullable=False)  # user, admin, manager
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    last_signed_in = Column(DateTime, default=utcnow, nullable=False)

    salons = relationship("Salon", back_populates="manager")


class Salon(Base):
    __tablename__ = "salons"
    id = Column(Integer, primary_key=True, index=True)
    manager_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)  # Libreville ou Brazzaville
    email = Column(String(320))
    phone = Column(String(20))
    status = Column(String(20), default="active", nullable=False)  # active, inactive
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    manager = relationship("User", back_populates="salons")
    transactions = relationship("Transaction", back_populates="salon", cascade="all, delete-orphan")
    reports = relationship("Report", back_populates="salon", cascade="all, delete-orphan")
    notification_settings = relationship(
        "NotificationSettings", back_populates="salon", uselist=False, cascade="all, delete-orphan"
    )


class Transaction(Base):
    __tablename__ = "transactions"
    id = Column(Integer, primary_key=True)
    salon_id = Column(Integer, ForeignKey("salons.id"), nullable=False)
    type = Column(String(20), nullable=False)  # encaissement, decaissement
    designation = Column(String(255), nullable=False)  # ex: "Pose perruque", "Salaires"
    amount = Column(Numeric(12, 2), nullable=False)  # FCFA
    comment = Column(Text)
    date = Column(DateTime, nullable=False)  # Date de l'opération
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    salon = relationship("Salon", back_populates="transactions")

    __table_args__ = (
        Index("ix_transactions_salon_date", "salon_id", "date"),
    )


class Report(Base):
    __tablename__ = "reports"
    id = Column(Integer, primary_key=True)
    salon_id = Column(Integer, ForeignKey("salons.id"), nullable=False, index=True)
    generated_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    # Résumé financier figé au moment de la génération
    total_encaissements = Column(Numeric(12, 2), nullable=False)
    total_decaissements = Column(Numeric(12, 2), nullable=False)
    final_balance = Column(Numeric(12, 2), nullable=False)

    encaissements_breakdown = Column(JSON)  # {désignation: montant}
    decaissements_breakdown = Column(JSON)  # Top 10 {désignation: montant}
    momentum_data = Column(JSON)  # {encaissements_peak: {...}, decaissements_peak: {...}}

    # Textes d'analyse (générés plus tard par un moteur externe)
    encaissements_interpretation = Column(Text)
    decaissements_interpretation = Column(Text)
    momentum_interpretation = Column(Text)
    personalized_advice = Column(Text)  # Modifiable par l'admin
    admin_comments = Column(Text)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    salon = relationship("Salon", back_populates="reports")
    exports = relationship("ReportExport", back_populates="report", cascade="all, delete-orphan")


class ReportExport(Base):
    __tablename__ = "report_exports"
    id = Column(Integer, primary_key=True)
    report_id = Column(Integer, ForeignKey("reports.id"), nullable=False, index=True)
    format = Column(String(10), nullable=False)  # pdf, excel, word
    file_url = Column(String(512), nullable=False)
    file_key = Column(String(512), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    report = relationship("Report", back_populates="exports")


class NotificationSettings(Base):
    __tablename__ = "notification_settings"
    id = Column(Integer, primary_key=True)
    salon_id = Column(Integer, ForeignKey("salons.id"), nullable=False, unique=True)
    daily_reminder = Column(Boolean, default=True, nullable=False)
    inactivity_alert = Column(Boolean, default=True, nullable=False)
    report_notification = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    salon = relationship("Salon", back_populates="notification_settings")


class AuditLog(Base):
    __tablename__ = "audit_logs"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    salon_id = Column(Integer, nullable=True)  # Conservé même après suppression du salon
    action = Column(String(255), nullable=False)  # ex: "transaction_created_encaissement"
    details = Column(JSON)
    created_at = Column(DateTime, default=utcnow, nullable=False)
