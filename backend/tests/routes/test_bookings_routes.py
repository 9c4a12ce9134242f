"""
HTTP tests for /api/v1/bookings.

These run against the wall clock; the default class is scheduled in 2030.
"""

from studio_booking.core.enums import BookingStatus
from tests.helpers import auth_headers

BASE = "/api/v1/bookings"


class TestAuth:
    def test_missing_header_is_401(self, client):
        response = client.get(BASE)

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "UNAUTHORIZED"

    def test_malformed_user_id_is_401(self, client):
        response = client.get(BASE, headers={"X-User-Id": "not-a-ulid"})
        assert response.status_code == 401

    def test_unknown_user_is_401(self, client):
        response = client.get(BASE, headers={"X-User-Id": "01K2K8CVN3A55280PFKJD9YHKV"})
        assert response.status_code == 401


class TestCreateBooking:
    def test_books_seat(self, client, member, create_class):
        class_instance = create_class()

        response = client.post(BASE, json={"class_id": class_instance.id}, headers=auth_headers(member))

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["status"] == "booked"
        assert body["new_balance"] == 9

    def test_full_class_waitlists(self, client, member, create_user, create_pass, create_class, create_booking):
        class_instance = create_class(capacity=1)
        other = create_user()
        create_booking(other, class_instance, consumed_pass=create_pass(other))

        response = client.post(BASE, json={"class_id": class_instance.id}, headers=auth_headers(member))

        assert response.status_code == 201
        assert response.json()["status"] == "waitlist"
        assert response.json()["new_balance"] == 10

    def test_failure_body_and_status(self, client, create_user, create_pass, create_class):
        broke = create_user()
        create_pass(broke, credits=0)

        response = client.post(BASE, json={"class_id": create_class().id}, headers=auth_headers(broke))

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "INSUFFICIENT_CREDIT"
        assert body["message"]

    def test_duplicate_is_409(self, client, member, create_class):
        class_instance = create_class()
        client.post(BASE, json={"class_id": class_instance.id}, headers=auth_headers(member))

        response = client.post(BASE, json={"class_id": class_instance.id}, headers=auth_headers(member))

        assert response.status_code == 409
        assert response.json()["error"] == "DUPLICATE_BOOKING"

    def test_unsigned_waiver_is_403(self, client, create_user, create_pass, create_class):
        user = create_user(waiver_signed=False)
        create_pass(user)

        response = client.post(BASE, json={"class_id": create_class().id}, headers=auth_headers(user))

        assert response.status_code == 403
        assert response.json()["error"] == "WAIVER_NOT_SIGNED"

    def test_unknown_class_is_404(self, client, member):
        response = client.post(
            BASE, json={"class_id": "01K2K8CVN3A55280PFKJD9YHKV"}, headers=auth_headers(member)
        )
        assert response.status_code == 404
        assert response.json()["error"] == "CLASS_NOT_FOUND"

    def test_extra_fields_are_rejected(self, client, member, create_class):
        response = client.post(
            BASE,
            json={"class_id": create_class().id, "status": "booked"},
            headers=auth_headers(member),
        )
        assert response.status_code == 422


class TestCancelAndRead:
    def test_cancel_refunds_and_reports(self, client, member, create_class):
        created = client.post(
            BASE, json={"class_id": create_class().id}, headers=auth_headers(member)
        ).json()

        response = client.post(
            f"{BASE}/{created['booking_id']}/cancel",
            json={"reason": "Travelling"},
            headers=auth_headers(member),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["refunded"] is True
        assert body["new_balance"] == 10

    def test_cancel_without_body(self, client, member, create_class):
        created = client.post(
            BASE, json={"class_id": create_class().id}, headers=auth_headers(member)
        ).json()

        response = client.post(f"{BASE}/{created['booking_id']}/cancel", headers=auth_headers(member))

        assert response.status_code == 200

    def test_cancel_twice_is_409(self, client, member, create_class):
        created = client.post(
            BASE, json={"class_id": create_class().id}, headers=auth_headers(member)
        ).json()
        client.post(f"{BASE}/{created['booking_id']}/cancel", headers=auth_headers(member))

        response = client.post(f"{BASE}/{created['booking_id']}/cancel", headers=auth_headers(member))

        assert response.status_code == 409
        assert response.json()["error"] == "BOOKING_NOT_ACTIVE"

    def test_other_users_booking_is_hidden(self, client, member, create_user, create_class):
        created = client.post(
            BASE, json={"class_id": create_class().id}, headers=auth_headers(member)
        ).json()
        stranger = create_user()

        cancel = client.post(f"{BASE}/{created['booking_id']}/cancel", headers=auth_headers(stranger))
        read = client.get(f"{BASE}/{created['booking_id']}", headers=auth_headers(stranger))

        assert cancel.status_code == 404
        assert read.status_code == 404
        assert read.json()["error"] == "BOOKING_NOT_FOUND"

    def test_list_and_upcoming_include_class(self, client, member, create_class):
        class_instance = create_class()
        client.post(BASE, json={"class_id": class_instance.id}, headers=auth_headers(member))

        listed = client.get(BASE, headers=auth_headers(member)).json()
        upcoming = client.get(f"{BASE}/upcoming", headers=auth_headers(member)).json()

        assert [b["class_id"] for b in listed] == [class_instance.id]
        assert listed[0]["status"] == BookingStatus.BOOKED.value
        assert listed[0]["class"]["title"] == "Hot Vinyasa"
        assert [b["class_id"] for b in upcoming] == [class_instance.id]
