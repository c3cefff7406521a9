# AXTRESO/backend/axtreso/services/analytics_service.py : calculs des tableaux de bord et rapports

"""
Fonctions pures d'agrégation sur des lignes de transactions déjà filtrées
(par salon et par période). Les montants sont stockés en décimal et ne sont
convertis en float qu'ici, au moment de l'agrégation.
"""

import calendar
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Dict, Iterable, List, Optional, Tuple

from axtreso.constants import CITY_TIMEZONES, WAT


def amount_of(row) -> float:
    """Montant d'une transaction en float (jamais tronqué)"""
    return float(row.amount)


def salon_timezone(salon) -> tzinfo:
    """Fuseau d'affichage du salon, déduit de sa ville"""
    return CITY_TIMEZONES.get(getattr(salon, "city", None), WAT)


def local_day(moment: datetime, tz: tzinfo) -> date:
    """Jour civil local d'un horodatage stocké en UTC naïf"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).date()


def today_in(tz: tzinfo, now: Optional[datetime] = None) -> date:
    now = now or datetime.now(timezone.utc)
    return local_day(now, tz)


def local_day_bounds(start_day: date, end_day: date, tz: tzinfo) -> Tuple[datetime, datetime]:
    """Bornes UTC naïves (incluses) couvrant des jours civils locaux"""
    start = datetime.combine(start_day, time.min, tzinfo=tz).astimezone(timezone.utc)
    end = datetime.combine(end_day, time.max, tzinfo=tz).astimezone(timezone.utc)
    return start.replace(tzinfo=None), end.replace(tzinfo=None)


def trailing_window(days: int, today: date) -> Tuple[date, date]:
    """Les `days` derniers jours, aujourd'hui inclus"""
    return today - timedelta(days=days - 1), today


def month_window(day: date) -> Tuple[date, date]:
    """Premier et dernier jour du mois de `day`"""
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def summarize(rows: Iterable) -> Dict:
    """Totaux par type et solde net"""
    total_in = 0.0
    total_out = 0.0
    count = 0
    for row in rows:
        count += 1
        if row.type == "encaissement":
            total_in += amount_of(row)
        elif row.type == "decaissement":
            total_out += amount_of(row)
    return {
        "total_in": total_in,
        "total_out": total_out,
        "net_balance": total_in - total_out,
        "count": count,
    }


def breakdown_by_designation(rows: Iterable, type: str, top: Optional[int] = None) -> Dict[str, float]:
    """Montant cumulé par désignation pour un type, du plus grand au plus petit"""
    totals: Dict[str, float] = {}
    for row in rows:
        if row.type != type:
            continue
        totals[row.designation] = totals.get(row.designation, 0.0) + amount_of(row)

    ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    if top is not None:
        ordered = ordered[:top]
    return dict(ordered)


def daily_totals(rows: Iterable, tz: tzinfo) -> Dict[date, Dict[str, float]]:
    """Totaux par jour civil local"""
    by_day: Dict[date, Dict[str, float]] = {}
    for row in rows:
        day = local_day(row.date, tz)
        bucket = by_day.setdefault(day, {"encaissement": 0.0, "decaissement": 0.0})
        if row.type in bucket:
            bucket[row.type] += amount_of(row)
    return by_day


def daily_series(rows: Iterable, start_day: date, days: int, tz: tzinfo) -> List[Dict]:
    """
    Série journalière de longueur fixe pour les graphiques de tendance.

    Chaque jour de la fenêtre est présent, à zéro s'il n'a aucune transaction.
    """
    by_day = daily_totals(rows, tz)
    series = []
    for offset in range(days):
        day = start_day + timedelta(days=offset)
        bucket = by_day.get(day, {"encaissement": 0.0, "decaissement": 0.0})
        series.append({
            "date": day.isoformat(),
            "total_in": bucket["encaissement"],
            "total_out": bucket["decaissement"],
            "balance": bucket["encaissement"] - bucket["decaissement"],
        })
    return series


def momentum(rows: Iterable, tz: tzinfo) -> Dict[str, Optional[Dict]]:
    """Jour de plus forte activité pour chaque sens (le plus ancien en cas d'égalité)"""
    by_day = daily_totals(rows, tz)

    def peak(type: str) -> Optional[Dict]:
        candidates = [(day, totals[type]) for day, totals in by_day.items() if totals[type] > 0]
        if not candidates:
            return None
        day, amount = min(candidates, key=lambda item: (-item[1], item[0]))
        return {"date": day.isoformat(), "amount": amount}

    return {
        "encaissements_peak": peak("encaissement"),
        "decaissements_peak": peak("decaissement"),
    }
