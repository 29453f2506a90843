"""End-to-end flows through the HTTP surface."""

from jose import jwt
from sqlalchemy import select

from conftest import as_user
from episure.modules.audit.models import AuditEvent
from episure.modules.invitations.models import InvitedUser


async def test_health(client):
    res = await client.get("/api/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


async def test_full_wizard(client, db, alice_id):
    h = as_user(alice_id)

    res = await client.post("/api/cases", json={"case_id": "CASE-X", "case_name": "School pen"}, headers=h)
    assert res.status_code == 201
    assert res.json()["data"]["workflow_state"] == "CREATED"

    res = await client.post(
        "/api/patients",
        json={
            "case_id": "CASE-X", "first_name": "Jamie", "last_name": "Rivera", "date_of_birth": "2012-05-17",
            "location": "Boston", "postal_code": "02118", "invite_email": "a@b.com",
        },
        headers=h,
    )
    assert res.status_code == 201
    assert res.json()["data"]["workflow_state"] == "PATIENT_LINKED"

    for n in (1, 2):
        res = await client.post(
            "/api/medications",
            json={
                "case_id": "CASE-X", "spray_number": n,
                "expiration_date_spray_1": "2027-03-01", "expiration_date_spray_2": "2027-09-01",
            },
            headers=h,
        )
        assert res.status_code == 201
        assert res.json()["data"]["workflow_state"] == "MEDICAL_LINKED"

    res = await client.post(
        "/api/notification-preferences",
        json={"notification_preferences": [{"case_id": "CASE-X", "enabled": True, "delivery_methods": ["email"]}]},
        headers=h,
    )
    assert res.status_code == 201
    assert res.json()["data"]["workflow_state"] == "NOTIFICATIONS_CONFIGURED"

    res = await client.get("/api/notification-preferences/CASE-X", headers=h)
    assert len(res.json()["data"]) == 7

    res = await client.post(
        "/api/add-emergency-contacts",
        params={"case_id": "CASE-X"},
        json={"contacts": [{
            "first_name": "Rosa", "last_name": "Rivera", "email": "rosa@example.com",
            "phone_number": "+14155550123", "send_invite": True,
        }]},
        headers=h,
    )
    assert res.status_code == 201
    assert res.json()["data"]["workflow_state"] == "EMERGENCY_CONTACTS_ADDED"

    res = await client.get("/api/cases/CASE-X", headers=h)
    assert res.json()["data"]["workflow_state"] == "EMERGENCY_CONTACTS_ADDED"

    async with db.sessionmaker() as s:
        invites = (await s.execute(select(InvitedUser))).scalars().all()
        assert [i.email for i in invites] == ["rosa@example.com"]
        actions = (await s.execute(select(AuditEvent.resource_type))).scalars().all()
        assert "MEDICATION" in actions and "EMERGENCY_CONTACTS" in actions


async def test_errors_map_to_status_codes(client, alice_id, bob_id):
    res = await client.post("/api/cases", json={"case_id": "CASE-1", "case_name": "Mine"}, headers=as_user(alice_id))
    assert res.status_code == 201

    res = await client.post("/api/cases", json={"case_id": "CASE-1", "case_name": "Theirs"}, headers=as_user(bob_id))
    assert res.status_code == 409
    assert res.json()["success"] is False
    assert res.json()["error"] == "conflict"

    body = {
        "case_id": "CASE-1", "spray_number": 1,
        "expiration_date_spray_1": "2027-03-01", "expiration_date_spray_2": "2027-09-01",
    }
    res = await client.post("/api/medications", json=body, headers=as_user(bob_id))
    assert res.status_code == 401

    res = await client.post("/api/medications", json=body, headers=as_user(alice_id))
    assert res.status_code == 400
    assert res.json()["error"] == "invalid_workflow_step"

    res = await client.get("/api/cases/NOPE", headers=as_user(alice_id))
    assert res.status_code == 404

    res = await client.post("/api/cases", json={"case_id": "CASE-2"}, headers=as_user(alice_id))
    assert res.status_code == 400
    assert res.json()["error"] == "validation_failed"


async def test_missing_credentials(client):
    res = await client.get("/api/cases/user")
    assert res.status_code == 401
    assert res.json()["success"] is False


async def test_bearer_token_resolves_subject(client, settings, alice_id):
    token = jwt.encode({"oid": "oid-alice"}, settings.JWT_SECRET, algorithm=settings.JWT_ALG)
    res = await client.get("/api/me/profile", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 200
    assert res.json()["data"]["userId"] == alice_id


async def test_invalid_bearer_token(client):
    res = await client.get("/api/me/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


async def test_register_and_invite_flow(client, alice_id):
    h = as_user(alice_id)
    await client.post("/api/cases", json={"case_id": "CASE-1", "case_name": "Mine"}, headers=h)

    res = await client.post("/api/invite-member", json={"case_id": "CASE-1", "email": "coach@example.com"}, headers=h)
    assert res.status_code == 201
    res = await client.post("/api/invite-member", json={"case_id": "CASE-1", "email": "coach@example.com"}, headers=h)
    assert res.status_code == 409

    res = await client.post("/api/auth/users", json={"entra_oid": "oid-coach", "email": "coach@example.com"})
    assert res.status_code == 201
    assert res.json()["data"]["first_name"] == "User"

    res = await client.post("/api/auth/users", json={"entra_oid": "oid-coach", "email": "coach2@example.com"})
    assert res.status_code == 409


async def test_audit_lists_own_events(client, alice_id):
    h = as_user(alice_id)
    await client.post("/api/cases", json={"case_id": "CASE-1", "case_name": "Mine"}, headers=h)

    res = await client.get("/api/audit", headers=h)
    assert res.status_code == 200
    events = res.json()["data"]
    assert events[0]["action"] == "CREATE"
    assert events[0]["resource_id"] == "CASE-1"


async def test_validation_errors_carry_field_details(client, alice_id):
    res = await client.post("/api/cases", json={"case_id": "CASE-2"}, headers=as_user(alice_id))
    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "validation_failed"
    assert any("case_name" in err["loc"] for err in body["details"])


async def test_list_invitations_for_owned_case(client, alice_id, bob_id):
    h = as_user(alice_id)
    await client.post("/api/cases", json={"case_id": "CASE-1", "case_name": "Mine"}, headers=h)
    await client.post(
        "/api/invite-member", json={"case_id": "CASE-1", "emails": ["a@example.com", "b@example.com"]}, headers=h
    )

    res = await client.get("/api/invitations", params={"case_id": "CASE-1"}, headers=h)
    assert res.status_code == 200
    assert [i["email"] for i in res.json()["data"]] == ["a@example.com", "b@example.com"]
    assert all(i["user_id"] is None for i in res.json()["data"])

    res = await client.get("/api/invitations", params={"case_id": "CASE-1"}, headers=as_user(bob_id))
    assert res.status_code == 401


def test_run_serves_app_with_uvicorn(monkeypatch):
    import uvicorn
    from episure.main import run

    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))

    run()

    assert calls[0][0] == "episure.main:app"
    assert set(calls[0][1]) == {"host", "port", "reload"}
