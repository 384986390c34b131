"""
Tests for the account endpoints.

Every account route needs a bearer token and a verified
device in the Device-Id header.
"""

from decimal import Decimal

import pytest

from savings_ledger.api.deps import get_ledger_service
from savings_ledger.errors import Unavailable
from savings_ledger.main import app
from savings_ledger.models import DeviceStatus


@pytest.fixture
def auth_headers(client, register_user):
    register_user(device_status=DeviceStatus.VERIFIED)
    token = client.post(
        "/auth/login",
        json={"email": "jane@example.com", "password": "correct-horse"},
        headers={"Device-Id": "device-1"},
    ).json()["token"]
    return {"Authorization": f"Bearer {token}", "Device-Id": "device-1"}


class TestAuthentication:

    def test_missing_token_returns_401(self, client):
        response = client.get("/account/me", headers={"Device-Id": "device-1"})
        assert response.status_code == 401

    def test_invalid_token_returns_401(self, client):
        response = client.get("/account/me", headers={
            "Authorization": "Bearer not-a-token",
            "Device-Id": "device-1",
        })
        assert response.status_code == 401

    def test_missing_device_header_returns_400(self, client, auth_headers):
        headers = {"Authorization": auth_headers["Authorization"]}
        response = client.get("/account/me", headers=headers)
        assert response.status_code == 400

    def test_unverified_device_returns_403(self, client, auth_headers):
        headers = {**auth_headers, "Device-Id": "someone-elses-phone"}
        response = client.post(
            "/account/deposit", json={"amount": "10.00"}, headers=headers
        )
        assert response.status_code == 403

    def test_device_rechecked_on_every_request(
        self, client, auth_headers, session_factory
    ):
        assert client.get("/account/me", headers=auth_headers).status_code == 200

        # Simulate the device losing its approval after login
        from savings_ledger.models import Device
        with session_factory.begin() as db:
            db.query(Device).update({Device.status: DeviceStatus.REJECTED})

        assert client.get("/account/me", headers=auth_headers).status_code == 403


class TestAccountDetails:

    def test_new_account_is_empty(self, client, auth_headers):
        response = client.get("/account/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["balance"]) == Decimal("0")
        assert data["transactions"] == []
        assert data["last_updated"]

    def test_history_is_newest_first(self, client, auth_headers):
        client.post("/account/deposit", json={"amount": "10.00"}, headers=auth_headers)
        client.post("/account/withdraw", json={"amount": "4.00"}, headers=auth_headers)

        data = client.get("/account/me", headers=auth_headers).json()

        assert [t["transaction_type"] for t in data["transactions"]] == [
            "WITHDRAWAL", "DEPOSIT",
        ]
        assert Decimal(data["balance"]) == Decimal("6.00")


class TestDepositAndWithdraw:

    def test_deposit_returns_new_balance_and_transaction(self, client, auth_headers):
        response = client.post(
            "/account/deposit", json={"amount": "100.00"}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Deposit successful"
        assert Decimal(data["balance"]) == Decimal("100.00")
        assert data["transaction"]["transaction_type"] == "DEPOSIT"
        assert Decimal(data["transaction"]["amount"]) == Decimal("100.00")

    def test_withdraw_returns_new_balance(self, client, auth_headers):
        client.post("/account/deposit", json={"amount": "100.00"}, headers=auth_headers)

        response = client.post(
            "/account/withdraw", json={"amount": "60.00"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Withdrawal successful"
        assert Decimal(response.json()["balance"]) == Decimal("40.00")

    def test_insufficient_funds_returns_400(self, client, auth_headers):
        client.post("/account/deposit", json={"amount": "100.00"}, headers=auth_headers)

        response = client.post(
            "/account/withdraw", json={"amount": "100.01"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "INSUFFICIENT_FUNDS"
        balance = client.get("/account/me", headers=auth_headers).json()["balance"]
        assert Decimal(balance) == Decimal("100.00")

    @pytest.mark.parametrize("path", ["/account/deposit", "/account/withdraw"])
    @pytest.mark.parametrize("amount", ["0", "-1.00"])
    def test_non_positive_amount_rejected(self, client, auth_headers, path, amount):
        response = client.post(path, json={"amount": amount}, headers=auth_headers)
        assert response.status_code == 422

    @pytest.mark.parametrize("amount", ["1e30", "1000000000000000", "12345678901234567.5"])
    def test_oversized_amount_rejected(self, client, auth_headers, amount):
        response = client.post(
            "/account/deposit", json={"amount": amount}, headers=auth_headers
        )

        assert response.status_code == 422
        balance = client.get("/account/me", headers=auth_headers).json()["balance"]
        assert Decimal(balance) == Decimal("0")

    def test_deposit_past_maximum_balance_returns_400(self, client, auth_headers):
        client.post(
            "/account/deposit", json={"amount": "999999999999999"}, headers=auth_headers
        )

        response = client.post(
            "/account/deposit", json={"amount": "1"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "INVALID_AMOUNT"


class UnavailableLedger:
    """Ledger whose storage is down for every operation."""

    def get_balance(self, user_id):
        raise Unavailable()

    def deposit(self, user_id, amount):
        raise Unavailable()

    def withdraw(self, user_id, amount):
        raise Unavailable()


class TestStorageUnavailable:

    @pytest.fixture
    def unavailable_ledger(self, client):
        app.dependency_overrides[get_ledger_service] = lambda: UnavailableLedger()

    def test_balance_returns_503_with_retry_after(
        self, client, auth_headers, unavailable_ledger
    ):
        response = client.get("/account/me", headers=auth_headers)

        assert response.status_code == 503
        assert response.headers["retry-after"] == "1"
        assert response.json()["detail"]["error"] == "UNAVAILABLE"

    @pytest.mark.parametrize("path", ["/account/deposit", "/account/withdraw"])
    def test_money_movement_returns_503(
        self, client, auth_headers, unavailable_ledger, path
    ):
        response = client.post(path, json={"amount": "10.00"}, headers=auth_headers)

        assert response.status_code == 503
        assert response.headers["retry-after"] == "1"
