# AXTRESO/backend/tests/test_analytics.py : tests pour les calculs d'agrégation

from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

from axtreso.constants import WAT
from axtreso.services import analytics_service as analytics


def row(type, designation, amount, when):
    return SimpleNamespace(type=type, designation=designation, amount=Decimal(amount), date=when)


ROWS = [
    row("encaissement", "Pose perruque", "25000.00", datetime(2025, 3, 1, 9)),
    row("encaissement", "Tissage", "15000.50", datetime(2025, 3, 2, 23, 30)),  # 3 mars heure locale
    row("encaissement", "Pose perruque", "10000.00", datetime(2025, 3, 3, 10)),
    row("decaissement", "Loyer", "30000.00", datetime(2025, 3, 3, 8)),
    row("decaissement", "Transport", "2500.00", datetime(2025, 3, 1, 12)),
]


class TestSummaries:
    def test_summarize(self):
        summary = analytics.summarize(ROWS)
        assert summary["total_in"] == 50000.5
        assert summary["total_out"] == 32500.0
        assert summary["count"] == 5

    def test_net_balance_is_difference_for_any_subset(self):
        for subset in (ROWS, ROWS[:2], ROWS[3:], []):
            summary = analytics.summarize(subset)
            assert summary["net_balance"] == summary["total_in"] - summary["total_out"]

    def test_empty(self):
        assert analytics.summarize([]) == {"total_in": 0.0, "total_out": 0.0, "net_balance": 0.0, "count": 0}

    def test_breakdown_sorted_by_amount(self):
        breakdown = analytics.breakdown_by_designation(ROWS, "encaissement")
        assert breakdown == {"Pose perruque": 35000.0, "Tissage": 15000.5}
        assert list(breakdown) == ["Pose perruque", "Tissage"]

    def test_breakdown_top(self):
        assert analytics.breakdown_by_designation(ROWS, "decaissement", top=1) == {"Loyer": 30000.0}


class TestWindows:
    def test_trailing_window_includes_today(self):
        assert analytics.trailing_window(11, date(2025, 3, 15)) == (date(2025, 3, 5), date(2025, 3, 15))

    def test_month_window(self):
        assert analytics.month_window(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_local_day_bounds_in_wat(self):
        start, end = analytics.local_day_bounds(date(2025, 3, 1), date(2025, 3, 1), WAT)
        assert start == datetime(2025, 2, 28, 23, 0)
        assert end.date() == date(2025, 3, 1)
        assert end.hour == 22

    def test_local_day_converts_utc_to_wat(self):
        assert analytics.local_day(datetime(2025, 3, 2, 23, 30), WAT) == date(2025, 3, 3)
        assert analytics.local_day(datetime(2025, 3, 2, 22, 59), WAT) == date(2025, 3, 2)

    def test_city_timezone(self):
        assert analytics.salon_timezone(SimpleNamespace(city="Brazzaville")) == WAT


class TestSeries:
    def test_series_length_equals_window(self):
        for days in (1, 11, 30):
            series = analytics.daily_series(ROWS, date(2025, 3, 1), days, WAT)
            assert len(series) == days

    def test_series_buckets_by_local_day_and_zero_fills(self):
        series = analytics.daily_series(ROWS, date(2025, 2, 28), 5, WAT)
        by_date = {point["date"]: point for point in series}

        assert by_date["2025-02-28"] == {"date": "2025-02-28", "total_in": 0.0, "total_out": 0.0, "balance": 0.0}
        assert by_date["2025-03-01"]["total_in"] == 25000.0
        assert by_date["2025-03-01"]["total_out"] == 2500.0
        assert by_date["2025-03-02"]["total_in"] == 0.0
        assert by_date["2025-03-03"]["total_in"] == 25000.5
        assert by_date["2025-03-03"]["balance"] == -4999.5
        assert by_date["2025-03-04"]["total_in"] == 0.0


class TestMomentum:
    def test_earliest_day_wins_ties(self):
        # 1er mars : 25000 ; 3 mars : 25000.5 (Tissage + Pose perruque)
        peaks = analytics.momentum(ROWS, WAT)
        assert peaks["encaissements_peak"] == {"date": "2025-03-03", "amount": 25000.5}
        assert peaks["decaissements_peak"] == {"date": "2025-03-03", "amount": 30000.0}

        tied = [
            row("encaissement", "A", "100.00", datetime(2025, 3, 5, 10)),
            row("encaissement", "B", "100.00", datetime(2025, 3, 4, 10)),
        ]
        assert analytics.momentum(tied, WAT)["encaissements_peak"]["date"] == "2025-03-04"

    def test_no_activity(self):
        assert analytics.momentum([], WAT) == {"encaissements_peak": None, "decaissements_peak": None}
