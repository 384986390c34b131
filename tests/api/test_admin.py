"""
Tests for the device approval endpoints.
"""

import pytest

from savings_ledger.models import DeviceStatus, UserRole


@pytest.fixture
def admin_headers(register_user, make_admin, tokens):
    admin_id = register_user(email="admin@example.com", device_id="admin-laptop")
    make_admin(admin_id)
    token = tokens.issue(admin_id, "admin@example.com", UserRole.ADMIN)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def pending_customer(register_user):
    return register_user(device_status=DeviceStatus.PENDING)


def test_admin_lists_user_devices(client, admin_headers, pending_customer):
    response = client.get(
        f"/admin/users/{pending_customer}/devices", headers=admin_headers
    )

    assert response.status_code == 200
    devices = response.json()
    assert len(devices) == 1
    assert devices[0]["device_identifier"] == "device-1"
    assert devices[0]["status"] == "PENDING"


def test_admin_approval_unlocks_login(client, admin_headers, pending_customer):
    login = {"email": "jane@example.com", "password": "correct-horse"}
    device = {"Device-Id": "device-1"}
    assert client.post("/auth/login", json=login, headers=device).status_code == 403

    device_id = client.get(
        f"/admin/users/{pending_customer}/devices", headers=admin_headers
    ).json()[0]["id"]
    response = client.patch(
        f"/admin/devices/{device_id}/status",
        json={"new_status": "VERIFIED"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["status"] == "VERIFIED"
    assert client.post("/auth/login", json=login, headers=device).status_code == 200


def test_invalid_transition_returns_400(client, admin_headers, pending_customer):
    device_id = client.get(
        f"/admin/users/{pending_customer}/devices", headers=admin_headers
    ).json()[0]["id"]
    client.patch(
        f"/admin/devices/{device_id}/status",
        json={"new_status": "REJECTED"},
        headers=admin_headers,
    )

    response = client.patch(
        f"/admin/devices/{device_id}/status",
        json={"new_status": "VERIFIED"},
        headers=admin_headers,
    )

    assert response.status_code == 400


def test_unknown_device_returns_404(client, admin_headers):
    response = client.patch(
        "/admin/devices/999/status",
        json={"new_status": "VERIFIED"},
        headers=admin_headers,
    )
    assert response.status_code == 404


def test_customer_token_returns_403(client, tokens, pending_customer):
    token = tokens.issue(pending_customer, "jane@example.com", UserRole.CUSTOMER)

    response = client.patch(
        "/admin/devices/1/status",
        json={"new_status": "VERIFIED"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 403
