"""HTTP tests for the FastAPI routers."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from database import get_session
from models import Property


@pytest.fixture
def property_id(db) -> int:
    prop = Property(property_title="Lot 7, Block 2", property_price=Decimal("2000000.00"))
    db.add(prop)
    db.commit()
    return prop.id


def _reserve(client, property_id, fee="50000.00") -> dict:
    response = client.post(
        "/api/reservations",
        json={
            "property_id": property_id,
            "reservation_fee": fee,
            "client_name": "Maria Santos",
            "client_email": "maria@example.com",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def _approved_contract(client, property_id, months=12) -> dict:
    reservation = _reserve(client, property_id)
    assert client.post(f"/api/reservations/{reservation['id']}/approve").status_code == 200
    response = client.post(
        "/api/contracts", json={"reservation_id": reservation["id"], "payment_plan_months": months}
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestReservationRoutes:
    def test_create_and_get(self, client, property_id) -> None:
        created = _reserve(client, property_id)
        assert created["status"] == "pending"
        assert created["tracking_number"] == f"TRK-{created['id']:08d}"

        fetched = client.get(f"/api/reservations/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["client_email"] == "maria@example.com"

    def test_list(self, client, property_id) -> None:
        _reserve(client, property_id)
        body = client.get("/api/reservations", params={"status": "pending"}).json()
        assert body["total"] == 1
        assert body["reservations"][0]["status"] == "pending"

    def test_state_machine(self, client, property_id) -> None:
        reservation_id = _reserve(client, property_id)["id"]
        rejected = client.post(f"/api/reservations/{reservation_id}/reject", json={"reason": "Low income"})
        assert rejected.json()["rejection_reason"] == "Low income"

        invalid = client.post(f"/api/reservations/{reservation_id}/approve")
        assert invalid.status_code == 409
        assert invalid.json()["error"] == "invalid_transition"

        reverted = client.post(f"/api/reservations/{reservation_id}/revert")
        assert reverted.json()["status"] == "pending"
        assert reverted.json()["status_changed_by"] == "staff@example.com"

    def test_reject_without_body(self, client, property_id) -> None:
        reservation_id = _reserve(client, property_id)["id"]
        response = client.post(f"/api/reservations/{reservation_id}/reject")
        assert response.status_code == 200
        assert response.json()["rejection_reason"] == "No reason provided"

    def test_unknown_property(self, client) -> None:
        response = client.post(
            "/api/reservations",
            json={"property_id": 404, "client_name": "A", "client_email": "a@example.com"},
        )
        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "not_found",
            "message": "Property with ID 404 not found",
        }


class TestContractRoutes:
    def test_create_contract(self, client, property_id) -> None:
        body = _approved_contract(client, property_id)
        assert Decimal(body["contract"]["monthly_installment"]) == Decimal("12500.00")
        assert len(body["payment_schedules"]) == 12
        assert {s["payment_status"] for s in body["payment_schedules"]} == {"pending"}

    def test_create_is_idempotent(self, client, property_id) -> None:
        first = _approved_contract(client, property_id)
        again = client.post(
            "/api/contracts",
            json={"reservation_id": first["contract"]["reservation_id"], "payment_plan_months": 36},
        )
        assert again.json()["contract"]["id"] == first["contract"]["id"]
        assert again.json()["contract"]["payment_plan_months"] == 12

    def test_pending_reservation_is_conflict(self, client, property_id) -> None:
        reservation = _reserve(client, property_id)
        response = client.post(
            "/api/contracts", json={"reservation_id": reservation["id"], "payment_plan_months": 12}
        )
        assert response.status_code == 409
        assert response.json()["error"] == "reservation_not_approved"

    def test_invalid_months(self, client, property_id) -> None:
        reservation = _reserve(client, property_id)
        response = client.post(
            "/api/contracts", json={"reservation_id": reservation["id"], "payment_plan_months": 61}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_plan"

    def test_by_reservation(self, client, property_id) -> None:
        body = _approved_contract(client, property_id)
        found = client.get(f"/api/contracts/by-reservation/{body['contract']['reservation_id']}")
        assert found.json()["contract"]["id"] == body["contract"]["id"]

        missing = client.get("/api/contracts/by-reservation/999")
        assert missing.status_code == 200
        assert missing.json() is None

    def test_validate_then_change_plan(self, client, property_id) -> None:
        contract_id = _approved_contract(client, property_id)["contract"]["id"]

        report = client.post(
            f"/api/contracts/{contract_id}/validate-plan-change", json={"new_payment_plan_months": 24}
        ).json()
        assert report["allowed"] is True
        assert Decimal(report["proposed_plan"]["monthly_installment"]) == Decimal("6250.00")

        changed = client.post(
            f"/api/contracts/{contract_id}/change-plan",
            json={"new_payment_plan_months": 24, "expected_version": report["contract_version"]},
        )
        assert changed.status_code == 200, changed.text
        assert changed.json()["contract"]["payment_plan_months"] == 24
        assert len(changed.json()["payment_schedules"]) == 24

    def test_rejected_plan_change(self, client, property_id) -> None:
        contract_id = _approved_contract(client, property_id)["contract"]["id"]
        report = client.post(
            f"/api/contracts/{contract_id}/validate-plan-change", json={"new_payment_plan_months": 12}
        )
        assert report.status_code == 200
        assert report.json()["allowed"] is False

        response = client.post(f"/api/contracts/{contract_id}/change-plan", json={"new_payment_plan_months": 12})
        assert response.status_code == 400
        assert response.json()["error"] == "plan_change_rejected"
        assert response.json()["validation_errors"]

    def test_stale_version_is_conflict(self, client, property_id) -> None:
        contract_id = _approved_contract(client, property_id)["contract"]["id"]
        response = client.post(
            f"/api/contracts/{contract_id}/change-plan",
            json={"new_payment_plan_months": 24, "expected_version": 5},
        )
        assert response.status_code == 409
        assert response.json()["error"] == "concurrent_modification"

    def test_unknown_contract(self, client) -> None:
        assert client.get("/api/contracts/999").status_code == 404


class TestPaymentRoutes:
    def test_walk_in_and_revert(self, client, property_id) -> None:
        schedule_id = _approved_contract(client, property_id)["payment_schedules"][0]["id"]

        paid = client.post("/api/payments/walk-in", json={"schedule_id": schedule_id})
        assert paid.status_code == 201, paid.text
        assert paid.json()["schedule"]["payment_status"] == "paid"
        assert paid.json()["transaction"]["processed_by"] == "staff@example.com"
        assert Decimal(paid.json()["contract"]["remaining_balance"]) == Decimal("137500.00")

        reverted = client.post(f"/api/payments/{schedule_id}/revert")
        assert reverted.status_code == 200
        assert reverted.json()["transactions_reverted"] == 1
        assert Decimal(reverted.json()["contract"]["total_paid_amount"]) == Decimal("0.00")

    def test_partial_below_minimum(self, client, property_id) -> None:
        schedule_id = _approved_contract(client, property_id)["payment_schedules"][0]["id"]
        response = client.post(
            "/api/payments/walk-in",
            json={"schedule_id": schedule_id, "payment_type": "partial", "amount": "100.00"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "payment_rejected"

    def test_mark_overdue(self, client, property_id) -> None:
        _approved_contract(client, property_id)
        response = client.post("/api/payments/mark-overdue")
        assert response.status_code == 200
        assert response.json() == {"marked_overdue": 0}

    def test_history(self, client, property_id) -> None:
        contract = _approved_contract(client, property_id)
        contract_id = contract["contract"]["id"]
        first, second = [s["id"] for s in contract["payment_schedules"][:2]]
        client.post("/api/payments/walk-in", json={"schedule_id": first, "payment_method": "check"})
        client.post("/api/payments/walk-in", json={"schedule_id": second})

        response = client.get("/api/payments/history", params={"contract_id": contract_id})
        assert response.status_code == 200, response.text
        body = response.json()
        assert [t["schedule_id"] for t in body["transactions"]] == [second, first]
        assert body["summary"]["total_transactions"] == 2
        assert Decimal(body["summary"]["total_amount_paid"]) == Decimal("25000.00")
        assert body["summary"]["payment_methods"] == ["cash", "check"]

        checks = client.get(
            "/api/payments/history", params={"contract_id": contract_id, "payment_method": "check"}
        )
        assert [t["schedule_id"] for t in checks.json()["transactions"]] == [first]

    def test_history_needs_a_filter(self, client) -> None:
        response = client.get("/api/payments/history", params={"status": "completed"})
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_query"


class TestPricingRoutes:
    def test_monthly_interest_is_public(self, session_factory) -> None:
        from main import app

        app.dependency_overrides.clear()
        with TestClient(app) as public_client:
            response = public_client.get(
                "/api/pricing/monthly-interest",
                params={"total_price": "2000000", "down_payment": "200000", "rate": "0.05", "month": 12},
            )
        assert response.status_code == 200
        body = response.json()
        assert Decimal(body["monthly_interest"]) == Decimal("9750")
        assert float(body["seasonal_multiplier"]) == 1.3


class TestAuth:
    @pytest.fixture
    def secured_client(self, session_factory, monkeypatch):
        from main import app

        monkeypatch.setenv("JWT_SECRET", "test-secret")

        def _session_override():
            session = session_factory()
            try:
                yield session
            finally:
                session.close()

        app.dependency_overrides.clear()
        app.dependency_overrides[get_session] = _session_override
        with TestClient(app) as test_client:
            yield test_client
        app.dependency_overrides.clear()

    def test_missing_token(self, secured_client) -> None:
        assert secured_client.get("/api/contracts").status_code == 401

    def test_invalid_token(self, secured_client) -> None:
        response = secured_client.get("/api/contracts", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 403

    def test_valid_token(self, secured_client) -> None:
        token = jwt.encode({"id": 1, "email": "staff@example.com"}, "test-secret", algorithm="HS256")
        response = secured_client.get("/api/contracts", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json() == {"contracts": [], "total": 0}
