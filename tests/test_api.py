from datetime import date, datetime, timedelta, timezone

from petsit.core.deps import get_availability_store
from petsit.models.audit_log import AuditLog


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_availability_lists_three_sets(client, sitter, future, add_booking, add_block):
    add_block(future(1))
    add_booking(future(2), future(3), "accepted")
    add_booking(future(3), future(4), "pending")
    add_booking(future(5), future(5), "rejected")

    r = client.get(
        f"/api/sitters/{sitter.id}/availability",
        params={"from_date": future(0).isoformat(), "to_date": future(10).isoformat()},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["blocked_dates"] == [future(1).isoformat()]
    assert body["booked_dates"] == [future(2).isoformat(), future(3).isoformat()]
    assert body["pending_dates"] == [future(3).isoformat(), future(4).isoformat()]


def test_availability_defaults_to_ninety_day_window(client, sitter):
    r = client.get(f"/api/sitters/{sitter.id}/availability")
    body = r.json()
    start = date.fromisoformat(body["from_date"])
    end = date.fromisoformat(body["to_date"])
    assert (end - start).days == 90


def test_availability_rejects_inverted_window(client, sitter, future):
    r = client.get(
        f"/api/sitters/{sitter.id}/availability",
        params={"from_date": future(5).isoformat(), "to_date": future(1).isoformat()},
    )
    assert r.status_code == 400


def test_check_reports_reason(client, sitter, future, add_booking, add_block):
    add_block(future(3))
    add_booking(future(1), future(1), "accepted")
    add_booking(future(10), future(12), "pending")

    url = f"/api/sitters/{sitter.id}/availability/check"
    blocked = client.get(url, params={"start_date": future(1).isoformat(), "end_date": future(3).isoformat()}).json()
    assert blocked["available"] is False
    assert blocked["reason"] == "blocked"

    booked = client.get(url, params={"start_date": future(0).isoformat(), "end_date": future(1).isoformat()}).json()
    assert booked == {"available": False, "reason": "already booked", "message": booked["message"]}

    pending = client.get(url, params={"start_date": future(11).isoformat(), "end_date": future(11).isoformat()}).json()
    assert pending == {"available": True, "reason": None, "message": ""}

    bad = client.get(url, params={"start_date": future(3).isoformat(), "end_date": future(1).isoformat()})
    assert bad.status_code == 400


def test_check_fails_open_when_store_is_down(client, sitter, future):
    class DownStore:
        def blocked_dates(self, sitter_id, window):
            raise ConnectionError("down")

        def active_bookings(self, sitter_id, window):
            raise ConnectionError("down")

    client.app.dependency_overrides[get_availability_store] = lambda: DownStore()
    r = client.get(
        f"/api/sitters/{sitter.id}/availability/check",
        params={"start_date": future(1).isoformat(), "end_date": future(2).isoformat()},
    )
    assert r.status_code == 200
    assert r.json()["available"] is True


def test_blocked_dates_endpoints(client, db, sitter, future):
    r = client.post(
        f"/api/sitters/{sitter.id}/blocked-dates",
        json={"start_date": future(1).isoformat(), "end_date": future(3).isoformat(), "reason": "Vacation"},
    )
    assert r.status_code == 200
    created = r.json()
    assert [b["blocked_date"] for b in created] == [future(i).isoformat() for i in (1, 2, 3)]

    single = client.post(f"/api/sitters/{sitter.id}/blocked-dates", json={"start_date": future(8).isoformat()})
    assert len(single.json()) == 1

    listed = client.get(f"/api/sitters/{sitter.id}/blocked-dates").json()
    assert len(listed) == 4

    r = client.delete(f"/api/sitters/{sitter.id}/blocked-dates/{created[0]['id']}")
    assert r.json() == {"ok": True}
    assert len(client.get(f"/api/sitters/{sitter.id}/blocked-dates").json()) == 3

    inverted = client.post(
        f"/api/sitters/{sitter.id}/blocked-dates",
        json={"start_date": future(3).isoformat(), "end_date": future(1).isoformat()},
    )
    assert inverted.status_code == 400

    actions = [a.action_type for a in db.query(AuditLog).all()]
    assert actions.count("BLOCKED_DATES_CREATE") == 2
    assert "BLOCKED_DATE_DELETE" in actions


def test_booking_flow(client, sitter, owner, future):
    payload = {"sitter_id": sitter.id, "owner_id": owner.id, "start_date": future(1).isoformat(), "end_date": future(3).isoformat()}
    first = client.post("/api/bookings", json=payload)
    second = client.post("/api/bookings", json=payload)
    assert first.status_code == 201 and second.status_code == 201
    assert first.json()["status"] == "pending"

    accepted = client.post(f"/api/bookings/{first.json()['id']}/accept", json={"sitter_response": "Happy to help"})
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"

    refused = client.post(f"/api/bookings/{second.json()['id']}/accept", json={})
    assert refused.status_code == 409

    third = client.post("/api/bookings", json=payload)
    assert third.status_code == 409
    assert third.json()["detail"] == "already booked"

    rejected = client.post(f"/api/bookings/{second.json()['id']}/reject", json={"sitter_response": "Sorry"})
    assert rejected.json()["status"] == "rejected"

    listed = client.get("/api/bookings", params={"sitter_id": sitter.id, "status": "accepted"}).json()
    assert [b["id"] for b in listed] == [first.json()["id"]]

    cancelled = client.post(f"/api/bookings/{first.json()['id']}/cancel", json={"reason": "Trip cancelled"})
    assert cancelled.json()["cancellation_reason"] == "Trip cancelled"

    assert client.get("/api/bookings/missing").status_code == 404


def test_booking_rejects_inverted_range(client, sitter, owner, future):
    payload = {"sitter_id": sitter.id, "owner_id": owner.id, "start_date": future(3).isoformat(), "end_date": future(1).isoformat()}
    assert client.post("/api/bookings", json=payload).status_code == 400


def test_entitlement_endpoint(client, db, sitter):
    tomorrow = date.today() + timedelta(days=2)
    sitter.subscription_status = "trial"
    sitter.trial_end_date = tomorrow
    db.commit()

    body = client.get(f"/api/users/{sitter.id}/entitlement").json()
    assert body == {"user_id": sitter.id, "is_valid": True, "status": "trial", "end_date": tomorrow.isoformat()}

    sitter.subscription_status = None
    db.commit()
    body = client.get(f"/api/users/{sitter.id}/entitlement").json()
    assert body["is_valid"] is False
    assert body["status"] == "none"

    assert client.get("/api/users/unknown/entitlement").status_code == 404


def test_subscription_events_update_entitlement(client, db, sitter):
    period_end = datetime.now(timezone.utc) + timedelta(days=30)
    r = client.post(
        "/api/billing/subscription-events",
        json={
            "type": "customer.subscription.updated",
            "user_id": sitter.id,
            "customer_id": "cus_42",
            "subscription_id": "sub_42",
            "status": "active",
            "current_period_end": int(period_end.timestamp()),
        },
    )
    assert r.json() == {"received": True, "handled": True}
    assert client.get(f"/api/users/{sitter.id}/entitlement").json()["is_valid"] is True

    r = client.post("/api/billing/subscription-events", json={"type": "customer.subscription.deleted", "customer_id": "cus_42"})
    assert r.json()["handled"] is True
    body = client.get(f"/api/users/{sitter.id}/entitlement").json()
    assert body == {"user_id": sitter.id, "is_valid": False, "status": "cancelled", "end_date": None}

    ignored = client.post("/api/billing/subscription-events", json={"type": "charge.refunded", "user_id": sitter.id})
    assert ignored.json() == {"received": True, "handled": False}

    missing = client.post("/api/billing/subscription-events", json={"type": "invoice.paid", "customer_id": "cus_nobody"})
    assert missing.status_code == 404
