# AXTRESO/backend/axtreso/routes/dashboard.py

from collections import Counter

from fastapi import APIRouter, Depends, Query

from axtreso import auth
from axtreso.constants import CITIES, MANAGER_TREND_DAYS, SALON_TREND_DAYS, TOP_DECAISSEMENTS
from axtreso.models import models as db_models
from axtreso.schemas import schemas
from axtreso.services import analytics_service as analytics
from axtreso.services.store import Store, get_store

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/manager", response_model=schemas.ManagerDashboard)
def manager_dashboard(
    salon_id: int = Query(...),
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    """Tableau de bord du gérant : aujourd'hui, mois en cours et tendance sur 10 jours"""
    salon = auth.authorize_salon(store, current_user, salon_id, allow_admin=False)
    tz = analytics.salon_timezone(salon)
    today = analytics.today_in(tz)

    month_start, month_end = analytics.month_window(today)
    trend_start, _ = analytics.trailing_window(MANAGER_TREND_DAYS, today)

    # Une seule requête couvre le mois et la fenêtre de tendance
    start, end = analytics.local_day_bounds(min(month_start, trend_start), today, tz)
    rows = store.get_transactions_by_salon(salon.id, start_date=start, end_date=end)

    today_rows = [row for row in rows if analytics.local_day(row.date, tz) == today]
    month_rows = [row for row in rows if analytics.local_day(row.date, tz) >= month_start]

    return {
        "salon": salon,
        "today": analytics.summarize(today_rows),
        "month": analytics.summarize(month_rows),
        "trend": analytics.daily_series(rows, trend_start, MANAGER_TREND_DAYS, tz),
        "encaissements_breakdown": analytics.breakdown_by_designation(month_rows, "encaissement"),
    }


@router.get("/salon", response_model=schemas.SalonDashboard)
def salon_dashboard(
    salon_id: int = Query(...),
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    """Vue détaillée d'un salon : cumul, tendance sur 30 jours, principales désignations"""
    salon = auth.authorize_salon(store, current_user, salon_id)
    tz = analytics.salon_timezone(salon)
    trend_start, _ = analytics.trailing_window(SALON_TREND_DAYS, analytics.today_in(tz))

    rows = store.get_transactions_by_salon(salon.id)
    return {
        "salon": salon,
        "summary": analytics.summarize(rows),
        "trend": analytics.daily_series(rows, trend_start, SALON_TREND_DAYS, tz),
        "encaissements_breakdown": analytics.breakdown_by_designation(rows, "encaissement"),
        "decaissements_breakdown": analytics.breakdown_by_designation(
            rows, "decaissement", top=TOP_DECAISSEMENTS
        ),
    }


@router.get("/admin", response_model=schemas.AdminDashboard)
def admin_dashboard(
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.require_admin)
):
    salons = store.get_all_salons()
    statuses = Counter(salon.status for salon in salons)
    by_city = Counter(salon.city for salon in salons)
    return {
        "total_salons": len(salons),
        "active_salons": statuses["active"],
        "inactive_salons": statuses["inactive"],
        "salons_by_city": {city: by_city[city] for city in CITIES},
    }
