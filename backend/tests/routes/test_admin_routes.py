from studio_booking.core.enums import BookingStatus
from studio_booking.services.booking_service import BookingService
from tests.helpers import CLASS_DAY, auth_headers

ADMIN = "/api/v1/admin"


def _class_payload(**overrides):
    payload = {
        "title": "Yin & Restore",
        "instructor": "Sam",
        "date": CLASS_DAY.isoformat(),
        "start_time": "19:30:00",
        "end_time": "20:45:00",
        "capacity": 16,
    }
    payload.update(overrides)
    return payload


def test_members_cannot_use_admin_routes(client, member):
    response = client.post(f"{ADMIN}/classes", json=_class_payload(), headers=auth_headers(member))

    assert response.status_code == 403
    assert response.json()["error"] == "FORBIDDEN"


def test_create_and_update_class(client, admin_user):
    created = client.post(f"{ADMIN}/classes", json=_class_payload(), headers=auth_headers(admin_user))

    assert created.status_code == 201
    body = created.json()
    assert body["date"] == CLASS_DAY.isoformat()
    assert body["duration_min"] == 75

    updated = client.put(
        f"{ADMIN}/classes/{body['id']}",
        json=_class_payload(capacity=20),
        headers=auth_headers(admin_user),
    )
    assert updated.status_code == 200
    assert updated.json()["capacity"] == 20


def test_update_with_bookings_is_409(client, admin_user, member, create_class, create_booking):
    class_instance = create_class()
    create_booking(member, class_instance)

    response = client.put(
        f"{ADMIN}/classes/{class_instance.id}",
        json=_class_payload(),
        headers=auth_headers(admin_user),
    )

    assert response.status_code == 409
    assert response.json()["error"] == "CLASS_LOCKED"


def test_invalid_class_times_are_422(client, admin_user):
    response = client.post(
        f"{ADMIN}/classes",
        json=_class_payload(start_time="21:00:00", end_time="20:00:00"),
        headers=auth_headers(admin_user),
    )
    assert response.status_code == 422


def test_cancel_class_refunds_everyone(client, db, admin_user, member, create_class):
    class_instance = create_class()
    BookingService(db).create_booking(member.id, class_instance.id)

    response = client.post(
        f"{ADMIN}/classes/{class_instance.id}/cancel",
        json={"reason": "Heating failure"},
        headers=auth_headers(admin_user),
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "class_id": class_instance.id,
        "cancelled_count": 1,
        "refunded_count": 1,
    }


def test_cancel_unknown_class_is_404(client, admin_user):
    response = client.post(
        f"{ADMIN}/classes/01K2K8CVN3A55280PFKJD9YHKV/cancel", headers=auth_headers(admin_user)
    )
    assert response.status_code == 404
    assert response.json()["error"] == "CLASS_NOT_FOUND"


def test_roster_and_attendance(client, admin_user, member, create_class, create_booking):
    class_instance = create_class()
    booking = create_booking(member, class_instance)

    roster = client.get(
        f"{ADMIN}/classes/{class_instance.id}/roster", headers=auth_headers(admin_user)
    ).json()
    assert [r["booking_id"] for r in roster] == [booking.id]
    assert roster[0]["user_name"] == "Ava Member"

    marked = client.post(
        f"{ADMIN}/bookings/{booking.id}/attendance",
        json={"status": "no_show"},
        headers=auth_headers(admin_user),
    )
    assert marked.status_code == 200
    assert marked.json()["status"] == BookingStatus.NO_SHOW.value


def test_attendance_rejects_other_statuses(client, admin_user, member, create_class, create_booking):
    booking = create_booking(member, create_class())

    response = client.post(
        f"{ADMIN}/bookings/{booking.id}/attendance",
        json={"status": "cancelled"},
        headers=auth_headers(admin_user),
    )
    assert response.status_code == 422


def test_manual_check_in_outside_window_is_422(client, admin_user, member, create_class, create_booking):
    booking = create_booking(member, create_class())

    response = client.post(
        f"{ADMIN}/bookings/{booking.id}/check-in", headers=auth_headers(admin_user)
    )

    assert response.status_code == 422
    assert response.json()["error"] == "CHECK_IN_NOT_ALLOWED"


def test_check_in_code_issued(client, admin_user, create_class):
    class_instance = create_class()

    response = client.post(
        f"{ADMIN}/classes/{class_instance.id}/check-in-code", headers=auth_headers(admin_user)
    )

    assert response.status_code == 200
    assert response.json()["code"].startswith(class_instance.id)


def test_purchase_is_idempotent_on_reference(client, admin_user, create_user):
    buyer = create_user()
    payload = {
        "user_id": buyer.id,
        "pass_type": "pack",
        "pass_name": "5 Class Pack",
        "credits": 5,
        "duration_days": 60,
        "reference": "pi_123",
    }

    first = client.post(f"{ADMIN}/passes/purchases", json=payload, headers=auth_headers(admin_user))
    second = client.post(f"{ADMIN}/passes/purchases", json=payload, headers=auth_headers(admin_user))

    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["id"] == second.json()["id"]
    assert second.json()["remaining_credits"] == 5


def test_pack_purchase_needs_credits(client, admin_user, create_user):
    buyer = create_user()
    response = client.post(
        f"{ADMIN}/passes/purchases",
        json={
            "user_id": buyer.id,
            "pass_type": "pack",
            "pass_name": "Empty",
            "credits": 0,
            "duration_days": 30,
        },
        headers=auth_headers(admin_user),
    )
    assert response.status_code == 422


def test_expire_passes(client, admin_user):
    response = client.post(f"{ADMIN}/passes/expire", headers=auth_headers(admin_user))

    assert response.status_code == 200
    assert response.json() == {"expired": 0}


def test_specials_crud(client, admin_user):
    created = client.post(
        f"{ADMIN}/specials",
        json={"title": "Bring a Friend", "valid_from": "2030-01-01", "valid_until": "2030-01-31"},
        headers=auth_headers(admin_user),
    )
    assert created.status_code == 201
    special_id = created.json()["id"]

    patched = client.patch(
        f"{ADMIN}/specials/{special_id}",
        json={"discount_percentage": 15},
        headers=auth_headers(admin_user),
    )
    assert patched.json()["discount_percentage"] == 15

    listed = client.get(f"{ADMIN}/specials", headers=auth_headers(admin_user)).json()
    assert [s["id"] for s in listed] == [special_id]

    deleted = client.delete(f"{ADMIN}/specials/{special_id}", headers=auth_headers(admin_user))
    assert deleted.status_code == 204
    missing = client.delete(f"{ADMIN}/specials/{special_id}", headers=auth_headers(admin_user))
    assert missing.status_code == 404
