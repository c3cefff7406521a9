# AXTRESO/backend/axtreso/schemas/schemas.py

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_serializer, field_validator
from typing import Optional, List, Dict, Literal, Any
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from axtreso.constants import MIN_PASSWORD_LENGTH

City = Literal["Libreville", "Brazzaville"]
SalonStatus = Literal["active", "inactive"]
TransactionType = Literal["encaissement", "decaissement"]
ExportFormat = Literal["pdf", "excel", "word"]

CENT = Decimal("0.01")


def to_utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Les dates sont stockées en UTC naïf ; une date naïve est considérée UTC"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def format_amount(value: Optional[Decimal]) -> Optional[str]:
    """Montant décimal sérialisé en chaîne à deux décimales (pas de float)"""
    if value is None:
        return None
    return str(Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


class SuccessOut(BaseModel):
    success: bool = True


# ---------- AUTH SCHEMAS ----------
class RegisterManagerIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    salon_name: str = Field(
        min_length=2, max_length=255, validation_alias=AliasChoices("salon_name", "salonName")
    )
    city: City
    phone: Optional[str] = Field(None, max_length=20)


class LoginManagerIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class AuthResultOut(BaseModel):
    success: bool = True
    user_id: int


class UserOut(BaseModel):
    id: int
    email: Optional[str] = None
    name: Optional[str] = None
    role: str
    login_method: Optional[str] = None
    last_signed_in: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------- SALON SCHEMAS ----------
class SalonOut(BaseModel):
    id: int
    manager_id: int
    name: str
    city: str
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SalonUpdateIn(BaseModel):
    salon_id: int
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    city: Optional[City] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)


class ChangePasswordIn(BaseModel):
    current_password: str
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class ToggleSalonStatusIn(BaseModel):
    salon_id: int
    status: SalonStatus


class ResetSalonPasswordIn(BaseModel):
    salon_id: int
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class SalonIdIn(BaseModel):
    salon_id: int


# ---------- TRANSACTION SCHEMAS ----------
class _AmountMixin(BaseModel):
    @field_validator("amount", check_fields=False)
    @classmethod
    def round_amount(cls, value):
        if value is None:
            return value
        return value.quantize(CENT, rounding=ROUND_HALF_UP)

    @field_validator("date", check_fields=False)
    @classmethod
    def normalize_date(cls, value):
        return to_utc_naive(value)


class TransactionCreate(_AmountMixin):
    salon_id: int
    type: TransactionType
    designation: str = Field(min_length=2, max_length=255)
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    comment: Optional[str] = None
    date: datetime


class TransactionUpdate(_AmountMixin):
    # Le type d'une transaction n'est pas modifiable
    transaction_id: int
    salon_id: int
    designation: Optional[str] = Field(None, min_length=2, max_length=255)
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    comment: Optional[str] = None
    date: Optional[datetime] = None

    @field_validator("designation", "amount", "date", mode="before")
    @classmethod
    def not_null(cls, value):
        # Seul le commentaire peut être effacé avec null
        if value is None:
            raise ValueError("Ce champ ne peut pas être vide")
        return value


class TransactionDelete(BaseModel):
    transaction_id: int
    salon_id: int


class TransactionOut(BaseModel):
    id: int
    salon_id: int
    type: str
    designation: str
    amount: Decimal
    comment: Optional[str] = None
    date: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> str:
        return format_amount(value)


# ---------- REPORT SCHEMAS ----------
class ReportGenerateIn(BaseModel):
    salon_id: int
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize(cls, value):
        return to_utc_naive(value)


class ReportIdIn(BaseModel):
    report_id: int


class ReportUpdateIn(BaseModel):
    report_id: int
    personalized_advice: Optional[str] = None
    admin_comments: Optional[str] = None


class ReportExportIn(BaseModel):
    report_id: int
    format: ExportFormat = "pdf"


class ReportOut(BaseModel):
    id: int
    salon_id: int
    generated_by: int
    start_date: datetime
    end_date: datetime
    total_encaissements: Decimal
    total_decaissements: Decimal
    final_balance: Decimal
    encaissements_breakdown: Optional[Dict[str, float]] = None
    decaissements_breakdown: Optional[Dict[str, float]] = None
    momentum_data: Optional[Dict[str, Any]] = None
    encaissements_interpretation: Optional[str] = None
    decaissements_interpretation: Optional[str] = None
    momentum_interpretation: Optional[str] = None
    personalized_advice: Optional[str] = None
    admin_comments: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("total_encaissements", "total_decaissements", "final_balance")
    def serialize_amount(self, value: Decimal) -> str:
        return format_amount(value)


class ReportExportOut(BaseModel):
    id: int
    report_id: int
    format: str
    file_url: str
    file_key: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------- NOTIFICATION SCHEMAS ----------
class NotificationSettingsOut(BaseModel):
    salon_id: int
    daily_reminder: bool
    inactivity_alert: bool
    report_notification: bool

    model_config = ConfigDict(from_attributes=True)


class NotificationSettingsUpdate(BaseModel):
    salon_id: int
    daily_reminder: Optional[bool] = None
    inactivity_alert: Optional[bool] = None
    report_notification: Optional[bool] = None


# ---------- ANALYTICS SCHEMAS ----------
class Summary(BaseModel):
    total_in: float
    total_out: float
    net_balance: float
    count: int


class DailyPoint(BaseModel):
    date: str
    total_in: float
    total_out: float
    balance: float


class ManagerDashboard(BaseModel):
    salon: SalonOut
    today: Summary
    month: Summary
    trend: List[DailyPoint]
    encaissements_breakdown: Dict[str, float]


class SalonDashboard(BaseModel):
    salon: SalonOut
    summary: Summary
    trend: List[DailyPoint]
    encaissements_breakdown: Dict[str, float]
    decaissements_breakdown: Dict[str, float]


class AdminDashboard(BaseModel):
    total_salons: int
    active_salons: int
    inactive_salons: int
    salons_by_city: Dict[str, int]
