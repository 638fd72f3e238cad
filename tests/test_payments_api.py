"""API tests for /payments endpoints."""

import pytest

from app.core.config import Settings


def _create(client, headers, **overrides):
    body = {
        "type": "to_pay",
        "personName": "Alice",
        "amount": 100,
        "dueDate": "2025-01-01",
    }
    body.update(overrides)
    return client.post("/payments", headers=headers, json=body)


class TestCreateAndList:

    def test_create_returns_camel_case_payment(self, client, alice_headers, alice_user):
        response = _create(client, alice_headers, description="dinner")

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        payment = body["data"]["payment"]
        assert payment["personName"] == "Alice"
        assert payment["status"] == "unpaid"
        assert payment["amount"] == 100
        assert payment["dueDate"] == "2025-01-01T00:00:00.000Z"
        assert payment["description"] == "dinner"
        assert payment["userId"] == str(alice_user.id)
        assert "_id" in payment

    def test_to_receive_starts_pending(self, client, alice_headers):
        response = _create(client, alice_headers, type="to_receive")

        assert response.json()["data"]["payment"]["status"] == "pending"

    def test_list_and_filter_by_type(self, client, alice_headers):
        _create(client, alice_headers, type="to_pay")
        _create(client, alice_headers, type="to_receive")

        all_payments = client.get("/payments", headers=alice_headers).json()["data"]["payments"]
        to_receive = client.get("/payments/type/to_receive", headers=alice_headers).json()["data"]["payments"]

        assert len(all_payments) == 2
        assert [p["type"] for p in to_receive] == ["to_receive"]

    def test_invalid_type_filter(self, client, alice_headers):
        response = client.get("/payments/type/to_steal", headers=alice_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid payment type"

    def test_requires_token(self, client):
        response = client.get("/payments")

        assert response.status_code == 401
        assert response.json()["success"] is False


class TestValidation:

    def test_all_violations_in_one_response(self, client, alice_headers):
        response = client.post("/payments", headers=alice_headers, json={
            "type": "to_pay",
            "personName": "x",
            "amount": -5,
        })

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        error = body["error"]
        assert "personName must be at least 2 characters" in error
        assert "amount must be at least 0" in error
        assert "dueDate is required" in error

    def test_invalid_enum_date_and_description(self, client, alice_headers):
        response = client.post("/payments", headers=alice_headers, json={
            "type": "gift",
            "personName": "Alice",
            "amount": "lots",
            "dueDate": "someday",
            "description": "d" * 501,
        })

        assert response.status_code == 400
        error = response.json()["error"]
        assert "type must be one of: to_pay, to_receive" in error
        assert "amount must be a number" in error
        assert "dueDate must be a valid date" in error
        assert "description must be at most 500 characters" in error

    def test_update_rules_apply_to_provided_fields(self, client, alice_headers):
        payment_id = _create(client, alice_headers).json()["data"]["payment"]["_id"]

        response = client.put(f"/payments/{payment_id}", headers=alice_headers, json={"amount": -1})

        assert response.status_code == 400
        assert "amount must be at least 0" in response.json()["error"]

    def test_infinite_amount_is_rejected(self, client, alice_headers):
        # 1e309 is valid JSON and parses to inf
        raw = '{"type": "to_pay", "personName": "Alice", "amount": 1e309, "dueDate": "2025-01-01"}'

        response = client.post(
            "/payments", headers={**alice_headers, "Content-Type": "application/json"}, content=raw
        )

        assert response.status_code == 400
        assert "amount must be a number" in response.json()["error"]
        assert client.get("/payments", headers=alice_headers).json()["data"]["payments"] == []


class TestUpdateToggleDelete:

    def test_update(self, client, alice_headers):
        payment_id = _create(client, alice_headers).json()["data"]["payment"]["_id"]

        response = client.put(f"/payments/{payment_id}", headers=alice_headers,
                              json={"amount": 75.5, "personName": "Alicia"})

        assert response.status_code == 200
        payment = response.json()["data"]["payment"]
        assert payment["amount"] == 75.5
        assert payment["personName"] == "Alicia"
        assert payment["type"] == "to_pay"

    def test_blank_description_is_cleared_like_on_create(self, client, alice_headers):
        created = _create(client, alice_headers, description="   ").json()["data"]["payment"]

        response = client.put(f"/payments/{created['_id']}", headers=alice_headers, json={"description": "   "})

        assert created["description"] is None
        assert response.json()["data"]["payment"]["description"] is None

    def test_toggle_persists_by_default(self, client, alice_headers):
        payment_id = _create(client, alice_headers).json()["data"]["payment"]["_id"]

        first = client.patch(f"/payments/{payment_id}/toggle", headers=alice_headers).json()["data"]
        second = client.patch(f"/payments/{payment_id}/toggle", headers=alice_headers).json()["data"]

        assert first["deleted"] is False
        assert first["payment"]["status"] == "paid"
        assert second["payment"]["status"] == "unpaid"

    def test_delete(self, client, alice_headers):
        payment_id = _create(client, alice_headers).json()["data"]["payment"]["_id"]

        response = client.delete(f"/payments/{payment_id}", headers=alice_headers)

        assert response.status_code == 200
        assert response.json()["data"]["payment"]["_id"] == payment_id
        assert client.get("/payments", headers=alice_headers).json()["data"]["payments"] == []

    def test_malformed_id_is_not_found(self, client, alice_headers):
        response = client.patch("/payments/not-a-uuid/toggle", headers=alice_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Payment not found"


class TestRemoveCompletedPolicy:

    @pytest.fixture
    def app_settings(self):
        return Settings(app_env="test", completed_payment_policy="remove")

    def test_toggle_to_paid_removes_payment(self, client, alice_headers):
        payment_id = _create(client, alice_headers).json()["data"]["payment"]["_id"]

        response = client.patch(f"/payments/{payment_id}/toggle", headers=alice_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Payment completed and removed from list"
        assert body["data"] == {"payment": None, "deleted": True}
        assert client.get("/payments", headers=alice_headers).json()["data"]["payments"] == []


class TestCrossUserIsolation:

    @pytest.mark.parametrize("method, path, body", [
        ("GET", "/payments/{id}", None),
        ("PUT", "/payments/{id}", {"amount": 1}),
        ("PATCH", "/payments/{id}/toggle", None),
        ("DELETE", "/payments/{id}", None),
    ])
    def test_other_user_gets_not_found(self, client, alice_headers, bob_headers, method, path, body):
        payment_id = _create(client, alice_headers, description="private").json()["data"]["payment"]["_id"]

        response = client.request(method, path.format(id=payment_id), headers=bob_headers, json=body)

        assert response.status_code == 404
        assert "private" not in response.text
        own = client.get(f"/payments/{payment_id}", headers=alice_headers).json()["data"]["payment"]
        assert own["status"] == "unpaid"
        assert own["amount"] == 100


class TestStatsPreviousUsersSummaries:

    def test_stats(self, client, alice_headers):
        _create(client, alice_headers, amount=10, dueDate="2000-01-01")
        _create(client, alice_headers, type="to_receive", amount=20, dueDate="2999-01-01")

        stats = client.get("/payments/stats", headers=alice_headers).json()["data"]["stats"]

        assert stats == {
            "totalPayments": 2,
            "totalAmount": 30,
            "paidPayments": 0,
            "unpaidPayments": 2,
            "overduePayments": 1,
        }

    def test_previous_users(self, client, alice_headers):
        _create(client, alice_headers, personName="Zoe")
        _create(client, alice_headers, personName="Mario")
        _create(client, alice_headers, personName="Zoe")

        response = client.get("/payments/previous-users", headers=alice_headers)

        assert response.json()["data"]["previousUsers"] == ["Mario", "Zoe"]

    def test_alice_example(self, client, alice_headers):
        created = _create(client, alice_headers).json()["data"]["payment"]
        assert created["status"] == "unpaid"

        toggled = client.patch(f"/payments/{created['_id']}/toggle", headers=alice_headers).json()["data"]
        assert toggled["payment"]["status"] == "paid"

        _create(client, alice_headers, type="to_receive", amount=40, dueDate="2025-02-01")

        summaries = client.get("/payments/summaries", headers=alice_headers).json()["data"]["summaries"]

        assert len(summaries) == 1
        alice = summaries[0]
        assert alice["personName"] == "Alice"
        assert alice["toPay"] == 100
        assert alice["toReceive"] == 40
        assert alice["netTotal"] == -60
        assert {p["type"] for p in alice["payments"]} == {"to_pay", "to_receive"}
        assert set(alice["payments"][0]) == {"_id", "type", "amount", "description", "dueDate", "status", "createdAt"}


class TestMiscRoutes:

    def test_health(self, client):
        body = client.get("/health").json()

        assert body["status"] == "ok"
        assert body["environment"] == "test"

    def test_unknown_route_uses_envelope(self, client):
        response = client.get("/nope")

        assert response.status_code == 404
        assert response.json()["success"] is False
