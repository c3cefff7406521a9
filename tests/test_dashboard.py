# AXTRESO/backend/tests/test_dashboard.py : tests pour les tableaux de bord

from datetime import timedelta

from axtreso.constants import MANAGER_TREND_DAYS, SALON_TREND_DAYS, WAT
from axtreso.models.models import utcnow
from axtreso.services.analytics_service import today_in
from conftest import auth_headers


class TestManagerDashboard:
    def test_today_and_trend(self, client, manager, add_transaction):
        user, salon = manager
        now = utcnow()
        add_transaction(salon, "encaissement", "Coiffure", "12000.00", now)
        add_transaction(salon, "decaissement", "Transport", "2000.00", now)
        add_transaction(salon, "encaissement", "Coiffure", "7000.00", now - timedelta(days=40))

        response = client.get("/api/dashboard/manager", params={"salon_id": salon.id}, headers=auth_headers(user))
        assert response.status_code == 200
        data = response.json()

        assert data["salon"]["id"] == salon.id
        assert data["today"] == {"total_in": 12000.0, "total_out": 2000.0, "net_balance": 10000.0, "count": 2}
        assert data["month"]["total_in"] >= 12000.0
        assert data["encaissements_breakdown"]["Coiffure"] >= 12000.0

        trend = data["trend"]
        assert len(trend) == MANAGER_TREND_DAYS
        assert trend[-1]["date"] == today_in(WAT).isoformat()
        assert trend[-1]["balance"] == 10000.0
        assert all(point["total_in"] == 0.0 for point in trend[:-1])

    def test_admin_is_forbidden(self, client, admin, manager):
        _, salon = manager
        response = client.get("/api/dashboard/manager", params={"salon_id": salon.id}, headers=auth_headers(admin))
        assert response.status_code == 403


class TestSalonDashboard:
    def test_all_time_summary(self, client, admin, manager, add_transaction):
        _, salon = manager
        now = utcnow()
        add_transaction(salon, "encaissement", "Tissage", "40000.00", now - timedelta(days=100))
        add_transaction(salon, "encaissement", "Coiffure", "10000.00", now)
        add_transaction(salon, "decaissement", "Loyer", "30000.00", now - timedelta(days=3))

        response = client.get("/api/dashboard/salon", params={"salon_id": salon.id}, headers=auth_headers(admin))
        assert response.status_code == 200
        data = response.json()
        assert data["summary"] == {"total_in": 50000.0, "total_out": 30000.0, "net_balance": 20000.0, "count": 3}
        assert len(data["trend"]) == SALON_TREND_DAYS
        assert sum(point["total_in"] for point in data["trend"]) == 10000.0
        assert list(data["encaissements_breakdown"]) == ["Tissage", "Coiffure"]
        assert data["decaissements_breakdown"] == {"Loyer": 30000.0}

    def test_owner_allowed_other_manager_forbidden(self, client, manager, other_manager):
        owner, salon = manager
        intruder, _ = other_manager
        ok = client.get("/api/dashboard/salon", params={"salon_id": salon.id}, headers=auth_headers(owner))
        assert ok.status_code == 200
        denied = client.get("/api/dashboard/salon", params={"salon_id": salon.id}, headers=auth_headers(intruder))
        assert denied.status_code == 403


class TestAdminDashboard:
    def test_counts(self, client, admin, manager, other_manager, store):
        _, salon = manager
        store.update_salon(salon.id, status="inactive")

        response = client.get("/api/dashboard/admin", headers=auth_headers(admin))
        assert response.json() == {
            "total_salons": 2,
            "active_salons": 1,
            "inactive_salons": 1,
            "salons_by_city": {"Libreville": 1, "Brazzaville": 1},
        }

    def test_manager_is_forbidden(self, client, manager):
        user, _ = manager
        assert client.get("/api/dashboard/admin", headers=auth_headers(user)).status_code == 403
