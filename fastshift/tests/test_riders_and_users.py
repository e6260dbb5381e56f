"""
Integration tests for rider applications, rider activation and user roles.
"""

import pytest

from fastshift.app.models.enums import UserRole, RiderStatus
from fastshift.app.models.user import User


# TEST 1: Rider applications
async def test_submit_rider_is_pending(client, admin_headers):
    response = await client.post("/riders", json={
        "email": "new-rider@x.com",
        "name": "New Rider",
        "district": "Dhaka",
        "phone": "+8801000000",
        "status": "active",
    })
    assert response.status_code == 200
    rider_id = response.json()["insertedId"]

    pending = await client.get("/riders/pending", headers=admin_headers)
    assert pending.status_code == 200
    riders = pending.json()
    assert [r["_id"] for r in riders] == [rider_id]
    assert riders[0]["status"] == "pending"
    assert riders[0]["work_status"] == "available"
    assert riders[0]["phone"] == "+8801000000"


async def test_submit_rider_requires_email(client):
    response = await client.post("/riders", json={"name": "No Email"})
    assert response.status_code == 400


async def test_list_active_riders(client, admin_headers, make_rider):
    active = await make_rider("active@x.com")
    await make_rider("waiting@x.com", status=RiderStatus.PENDING)

    response = await client.get("/riders/active", headers=admin_headers)
    assert response.status_code == 200
    assert [r["_id"] for r in response.json()] == [active.id]


async def test_available_riders_by_district(client, make_rider):
    dhaka = await make_rider("dhaka@x.com", district="Dhaka")
    await make_rider("khulna@x.com", district="Khulna")
    await make_rider("pending@x.com", district="Dhaka", status=RiderStatus.PENDING)

    response = await client.get("/riders/available", params={"district": "Dhaka"})
    assert response.status_code == 200
    assert [r["_id"] for r in response.json()] == [dhaka.id]


# TEST 2: Admin guard
async def test_pending_riders_without_credential(client):
    response = await client.get("/riders/pending")
    assert response.status_code == 401


async def test_pending_riders_non_admin_forbidden(client, make_user, auth):
    await make_user("a@x.com", UserRole.USER)

    response = await client.get("/riders/pending", headers=auth("a@x.com"))
    assert response.status_code == 403
    assert response.json()["message"] == "Forbidden access"


async def test_pending_riders_unknown_user_forbidden(client, auth):
    response = await client.get("/riders/pending", headers=auth("ghost@x.com"))
    assert response.status_code == 403
    assert response.json()["message"] == "Forbidden access"


async def test_guard_does_not_create_user(client, auth):
    await client.get("/riders/pending", headers=auth("ghost@x.com"))

    role = await client.get("/users/ghost@x.com/role")
    assert role.status_code == 404


# TEST 3: Activation promotes the user
async def test_activating_rider_promotes_user(client, admin_headers, make_user, make_rider):
    await make_user("applicant@x.com", UserRole.USER)
    rider = await make_rider("applicant@x.com", status=RiderStatus.PENDING)

    response = await client.patch(
        f"/riders/status/{rider.id}",
        json={"status": "active", "email": "applicant@x.com"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["modified_count"] == 1
    assert response.json()["user_modified_count"] == 1

    role = await client.get("/users/applicant@x.com/role")
    assert role.status_code == 200
    assert role.json()["role"] == "rider"


async def test_activation_defaults_to_rider_email(client, admin_headers, make_user, make_rider):
    await make_user("applicant@x.com", UserRole.USER)
    rider = await make_rider("applicant@x.com", status=RiderStatus.PENDING)

    await client.patch(f"/riders/status/{rider.id}", json={"status": "active"}, headers=admin_headers)

    role = await client.get("/users/applicant@x.com/role")
    assert role.json()["role"] == "rider"


async def test_rejecting_rider_keeps_user_role(client, admin_headers, make_user, make_rider):
    await make_user("applicant@x.com", UserRole.USER)
    rider = await make_rider("applicant@x.com", status=RiderStatus.PENDING)

    response = await client.patch(
        f"/riders/status/{rider.id}",
        json={"status": "rejected", "email": "applicant@x.com"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert "user_modified_count" not in response.json()

    role = await client.get("/users/applicant@x.com/role")
    assert role.json()["role"] == "user"


async def test_rider_status_unknown_rider(client, admin_headers):
    response = await client.patch("/riders/status/missing", json={"status": "active"}, headers=admin_headers)
    assert response.status_code == 404


async def test_rider_status_requires_admin(client, make_user, make_rider, auth):
    await make_user("a@x.com", UserRole.USER)
    rider = await make_rider("a@x.com", status=RiderStatus.PENDING)

    response = await client.patch(
        f"/riders/status/{rider.id}", json={"status": "active"}, headers=auth("a@x.com")
    )
    assert response.status_code == 403


# TEST 4: User upsert and role lookup
async def test_upsert_user_inserts_then_touches(client, fetch):
    first = await client.post("/users", json={"email": "new@x.com", "name": "New", "role": "admin"})
    assert first.status_code == 200
    assert first.json()["inserted"] is True
    user_id = first.json()["insertedId"]
    created = await fetch(User, user_id)
    assert created.role == UserRole.USER

    second = await client.post("/users", json={"email": "new@x.com"})
    assert second.status_code == 200
    assert second.json()["inserted"] is False

    touched = await fetch(User, user_id)
    assert touched.last_logged_in > created.last_logged_in


async def test_get_user_role(client, make_user):
    await make_user("a@x.com", UserRole.USER)

    response = await client.get("/users/a@x.com/role")
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "user"
    assert body["email"] == "a@x.com"
    assert body["created_at"]


async def test_get_user_role_missing(client):
    assert (await client.get("/users/nobody@x.com/role")).status_code == 404


# TEST 5: Admin user management
async def test_search_users_case_insensitive(client, admin_headers, make_user):
    await make_user("alice@example.com", name="Alice Smith")
    await make_user("bob@example.com", name="Bob ALICEson")
    await make_user("carol@example.com", name="Carol")

    response = await client.get("/users/search", params={"q": "ALIce"}, headers=admin_headers)
    assert response.status_code == 200
    emails = sorted(u["email"] for u in response.json())
    assert emails == ["alice@example.com", "bob@example.com"]


async def test_search_users_capped_at_ten(client, admin_headers, make_user):
    for i in range(12):
        await make_user(f"user{i}@example.com")

    response = await client.get("/users/search", params={"q": "example"}, headers=admin_headers)
    assert len(response.json()) == 10


async def test_search_users_requires_query(client, admin_headers):
    response = await client.get("/users/search", headers=admin_headers)
    assert response.status_code == 400


async def test_make_and_remove_admin(client, admin_headers, make_user, auth):
    user = await make_user("a@x.com", UserRole.USER)

    promoted = await client.patch(f"/users/make-admin/{user.id}", headers=admin_headers)
    assert promoted.status_code == 200
    assert promoted.json()["modified_count"] == 1
    assert (await client.get("/riders/pending", headers=auth("a@x.com"))).status_code == 200

    demoted = await client.patch(f"/users/remove-admin/{user.id}", headers=admin_headers)
    assert demoted.status_code == 200
    assert (await client.get("/users/a@x.com/role")).json()["role"] == "user"
    assert (await client.get("/riders/pending", headers=auth("a@x.com"))).status_code == 403


async def test_make_admin_unknown_user(client, admin_headers):
    assert (await client.patch("/users/make-admin/missing", headers=admin_headers)).status_code == 404


@pytest.mark.parametrize("path", ["/users/make-admin/x", "/users/remove-admin/x"])
async def test_role_changes_require_admin(client, make_user, auth, path):
    await make_user("rider@x.com", UserRole.RIDER)
    assert (await client.patch(path, headers=auth("rider@x.com"))).status_code == 403
