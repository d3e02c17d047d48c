"""
REST complaint routes: public reads, owner-only writes, status changes.
"""
import pytest
from pymongo.errors import PyMongoError

from citizen_portal.repositories.audit_repository import AuditRepository
from conftest import login_headers, register, rpc

pytestmark = pytest.mark.asyncio

POTHOLE = {"title": "Pothole", "description": "Deep hole on 5th", "category": "roads", "address": "5th Ave"}


async def _create(client, headers, body=None):
    resp = await client.post("/api/complaints", headers=headers, json=body or POTHOLE)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestCreateAndRead:
    async def test_create_requires_token(self, client):
        resp = await client.post("/api/complaints", json=POTHOLE)
        assert resp.status_code == 401

    async def test_create_binds_submitter(self, client, alice):
        citizen, headers = alice
        complaint = await _create(client, headers)
        assert complaint["citizen_id"] == citizen["id"]
        assert complaint["status"] == "Submitted"
        assert complaint["citizen"]["name"] == "Alice"

    async def test_missing_fields(self, client, alice):
        _, headers = alice
        resp = await client.post("/api/complaints", headers=headers, json={"title": "Only a title"})
        assert resp.status_code == 400

    async def test_public_reads(self, client, alice):
        _, headers = alice
        complaint = await _create(client, headers)
        await _create(client, headers, {"title": "Leak", "description": "Water", "category": "water"})

        listed = (await client.get("/api/complaints")).json()
        assert {c["title"] for c in listed} == {"Pothole", "Leak"}
        assert all("password_hash" not in (c["citizen"] or {}) for c in listed)

        one = await client.get(f"/api/complaints/{complaint['id']}")
        assert one.status_code == 200
        assert one.json()["title"] == "Pothole"

        roads = (await client.get("/api/complaints/category/roads")).json()
        assert [c["title"] for c in roads] == ["Pothole"]

    async def test_unknown_attachment_reference(self, client, alice):
        _, headers = alice
        resp = await client.post("/api/complaints", headers=headers, json={**POTHOLE, "attachment_id": "nope"})
        assert resp.status_code == 400
        assert (await client.get("/api/complaints")).json() == []

    async def test_audit_failure_does_not_fail_the_change(self, client, alice, monkeypatch):
        async def broken_create(self, data):
            raise PyMongoError("audit store down")

        monkeypatch.setattr(AuditRepository, "create", broken_create)
        _, headers = alice
        complaint = await _create(client, headers)
        assert (await client.get(f"/api/complaints/{complaint['id']}")).status_code == 200

    @pytest.mark.parametrize("complaint_id", ["64b7c2c9f1c2a8b123456789", "not-an-id"])
    async def test_unknown_complaint(self, client, complaint_id):
        resp = await client.get(f"/api/complaints/{complaint_id}")
        assert resp.status_code == 404


class TestOwnership:
    async def test_update_by_owner(self, client, alice):
        _, headers = alice
        complaint = await _create(client, headers)
        resp = await client.put(f"/api/complaints/{complaint['id']}", headers=headers, json={"title": "Huge pothole"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["title"] == "Huge pothole"
        assert data["description"] == POTHOLE["description"]

    async def test_update_with_nothing_to_change(self, client, alice):
        _, headers = alice
        complaint = await _create(client, headers)
        resp = await client.put(f"/api/complaints/{complaint['id']}", headers=headers, json={})
        assert resp.status_code == 400

    async def test_other_citizen_gets_403_everywhere(self, client, alice, bob):
        _, alice_headers = alice
        _, bob_headers = bob
        complaint = await _create(client, alice_headers)
        url = f"/api/complaints/{complaint['id']}"

        resp = await client.put(url, headers=bob_headers, json={"title": "Mine now"})
        assert resp.status_code == 403
        assert resp.json()["code"] == "NotOwner"

        resp = await client.delete(url, headers=bob_headers)
        assert resp.status_code == 403

        resp = await client.patch(f"{url}/status", headers=bob_headers, json={"status": "Resolved"})
        assert resp.status_code == 403

        # untouched
        assert (await client.get(url)).json()["title"] == "Pothole"

    async def test_delete_by_owner(self, client, alice):
        _, headers = alice
        complaint = await _create(client, headers)
        url = f"/api/complaints/{complaint['id']}"

        resp = await client.delete(url, headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Complaint deleted successfully"}
        assert (await client.get(url)).status_code == 404
        assert (await client.delete(url, headers=headers)).status_code == 404

    async def test_null_for_required_field_keeps_the_stored_value(self, client, alice):
        _, headers = alice
        complaint = await _create(client, headers, {**POTHOLE, "address": "5th Ave"})
        url = f"/api/complaints/{complaint['id']}"

        resp = await client.put(url, headers=headers, json={"title": None})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "No fields to update"

        resp = await client.put(url, headers=headers, json={"title": None, "description": None, "address": None})
        assert resp.status_code == 200
        assert resp.json()["title"] == "Pothole"
        assert resp.json()["description"] == POTHOLE["description"]
        assert resp.json()["address"] is None

        assert (await client.get(url)).json()["title"] == "Pothole"
        assert (await client.get("/api/complaints")).status_code == 200

    async def test_write_on_missing_complaint(self, client, alice):
        _, headers = alice
        resp = await client.put("/api/complaints/64b7c2c9f1c2a8b123456789", headers=headers, json={"title": "x"})
        assert resp.status_code == 404


class TestStatus:
    async def test_owner_moves_status(self, client, alice):
        _, headers = alice
        complaint = await _create(client, headers)
        resp = await client.patch(f"/api/complaints/{complaint['id']}/status", headers=headers, json={"status": "InReview"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "InReview"

    @pytest.mark.parametrize("status", ["Closed", "submitted", "pending"])
    async def test_status_outside_enum(self, client, alice, status):
        _, headers = alice
        complaint = await _create(client, headers)
        resp = await client.patch(f"/api/complaints/{complaint['id']}/status", headers=headers, json={"status": status})
        assert resp.status_code == 400
        assert resp.json()["code"] == "InvalidStatus"

    async def test_status_required(self, client, alice):
        _, headers = alice
        complaint = await _create(client, headers)
        resp = await client.patch(f"/api/complaints/{complaint['id']}/status", headers=headers, json={})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Status is required"

    async def test_official_of_the_category_moves_status(self, client, alice, admin):
        _, alice_headers = alice
        _, admin_headers = admin
        complaint = await _create(client, alice_headers)

        category = await rpc(client, "admin.add_category", {"name": "Roads", "description": "Streets"}, admin_headers)
        await register(client, "Olga", "olga@x.com")
        resp = await rpc(client, "admin.add_official", {
            "email": "olga@x.com", "category_id": category.json()["value"], "title": "Inspector",
        }, admin_headers)
        assert resp.status_code == 200

        olga_headers = await login_headers(client, "olga@x.com")
        resp = await client.patch(
            f"/api/complaints/{complaint['id']}/status", headers=olga_headers, json={"status": "Resolved"},
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "Resolved"


async def test_end_to_end_flow(client):
    resp = await client.post("/api/auth/register", json={"name": "A", "email": "a@x.com", "password": "pw"})
    assert resp.status_code == 201
    registered_id = resp.json()["id"]

    resp = await client.post("/api/auth/login", json={"email": "a@x.com", "password": "pw"})
    assert resp.status_code == 200
    owner = {"Authorization": f"Bearer {resp.json()['token']}"}

    resp = await client.post("/api/complaints", headers=owner, json=POTHOLE)
    assert resp.status_code == 201
    complaint = resp.json()
    assert complaint["citizen_id"] == registered_id

    await register(client, "B", "b@x.com")
    other = await login_headers(client, "b@x.com")
    resp = await client.delete(f"/api/complaints/{complaint['id']}", headers=other)
    assert resp.status_code == 403

    resp = await client.delete(f"/api/complaints/{complaint['id']}", headers=owner)
    assert resp.status_code == 200
