"""
Check-in codes, QR/manual check-in and attendance marking.
"""

from datetime import timedelta

import pytest

from studio_booking.core.enums import BookingStatus, CheckInMethod
from studio_booking.core.exceptions import (
    BookingNotActiveException,
    BookingNotFoundException,
    CheckInNotAllowedException,
    ClassCancelledException,
    ClassNotFoundException,
    InvalidCheckInCodeException,
    ValidationException,
)
from studio_booking.services.booking_service import BookingService
from studio_booking.services.check_in_service import CheckInService
from tests.helpers import CLASS_STARTS_AT, NOW


@pytest.fixture
def booking_service(db):
    return BookingService(db)


@pytest.fixture
def check_in_service(db, booking_service):
    return CheckInService(db, booking_service=booking_service)


@pytest.fixture
def booked(booking_service, member, create_class):
    class_instance = create_class()
    result = booking_service.create_booking(member.id, class_instance.id, now=NOW)
    return booking_service.get_booking(result.booking_id)


DOORS_OPEN = CLASS_STARTS_AT - timedelta(minutes=10)


class TestCheckInCodes:
    def test_generated_code_verifies_to_its_class(self, check_in_service, create_class):
        class_instance = create_class()

        issued = check_in_service.generate_class_code(class_instance.id, now=NOW)

        assert issued.class_id == class_instance.id
        assert issued.code.startswith(f"{class_instance.id}.")
        assert check_in_service.verify_code(issued.code, now=NOW) == class_instance.id

    def test_expired_code_is_rejected(self, check_in_service, create_class):
        issued = check_in_service.generate_class_code(create_class().id, now=NOW)

        with pytest.raises(InvalidCheckInCodeException) as exc_info:
            check_in_service.verify_code(issued.code, now=issued.expires_at + timedelta(seconds=1))

        assert exc_info.value.details["reason"] == "expired"

    @pytest.mark.parametrize(
        "mangle",
        [
            lambda code: code[:-1] + ("0" if code[-1] != "0" else "1"),
            lambda code: "01K2K8CVN3A55280PFKJD9YHKV" + code[26:],
        ],
    )
    def test_tampered_code_is_rejected(self, check_in_service, create_class, mangle):
        issued = check_in_service.generate_class_code(create_class().id, now=NOW)

        with pytest.raises(InvalidCheckInCodeException) as exc_info:
            check_in_service.verify_code(mangle(issued.code), now=NOW)

        assert exc_info.value.details["reason"] == "invalid_signature"

    @pytest.mark.parametrize("code", ["", "garbage", "a.b", "abc.notanumber.sig"])
    def test_malformed_code_is_rejected(self, check_in_service, code):
        with pytest.raises(InvalidCheckInCodeException):
            check_in_service.verify_code(code, now=NOW)

    def test_no_code_for_cancelled_or_missing_class(self, check_in_service, booking_service, create_class):
        class_instance = create_class()
        booking_service.admin_cancel_class(class_instance.id, now=NOW)

        with pytest.raises(ClassCancelledException):
            check_in_service.generate_class_code(class_instance.id, now=NOW)
        with pytest.raises(ClassNotFoundException):
            check_in_service.generate_class_code("01K2K8CVN3A55280PFKJD9YHKV", now=NOW)


class TestCheckIn:
    def test_qr_check_in_marks_attended(self, check_in_service, booked, member):
        issued = check_in_service.generate_class_code(booked.class_id, now=DOORS_OPEN)

        result = check_in_service.check_in_with_code(issued.code, member.id, now=DOORS_OPEN)

        assert result.id == booked.id
        assert result.status == BookingStatus.ATTENDED.value
        assert result.checked_in is True
        assert result.check_in_method == CheckInMethod.QR.value

    def test_code_for_another_class_is_rejected(
        self, check_in_service, booked, member, create_class
    ):
        other = create_class(title="Yin")
        issued = check_in_service.generate_class_code(other.id, now=DOORS_OPEN)

        with pytest.raises(InvalidCheckInCodeException) as exc_info:
            check_in_service.check_in_booking_with_code(
                booked.id, issued.code, member.id, now=DOORS_OPEN
            )
        assert exc_info.value.details["reason"] == "class_mismatch"

    def test_qr_check_in_without_booking(self, check_in_service, create_user, create_class):
        class_instance = create_class()
        stranger = create_user()
        issued = check_in_service.generate_class_code(class_instance.id, now=DOORS_OPEN)

        with pytest.raises(CheckInNotAllowedException):
            check_in_service.check_in_with_code(issued.code, stranger.id, now=DOORS_OPEN)

    def test_check_in_before_window_opens(self, check_in_service, booked):
        with pytest.raises(CheckInNotAllowedException):
            check_in_service.manual_check_in(booked.id, now=CLASS_STARTS_AT - timedelta(hours=1))

    def test_check_in_after_class_ends(self, check_in_service, booked):
        with pytest.raises(CheckInNotAllowedException):
            check_in_service.manual_check_in(booked.id, now=CLASS_STARTS_AT + timedelta(hours=2))

    def test_late_arrival_during_class_is_allowed(self, check_in_service, booked):
        result = check_in_service.manual_check_in(
            booked.id, now=CLASS_STARTS_AT + timedelta(minutes=15)
        )
        assert result.check_in_method == CheckInMethod.MANUAL.value

    def test_second_check_in_is_rejected(self, check_in_service, booked):
        check_in_service.manual_check_in(booked.id, now=DOORS_OPEN)

        with pytest.raises(CheckInNotAllowedException):
            check_in_service.manual_check_in(booked.id, now=DOORS_OPEN)

    def test_waitlisted_booking_cannot_check_in(
        self, check_in_service, booking_service, member, create_user, create_pass, create_class
    ):
        class_instance = create_class(capacity=1)
        other = create_user()
        create_pass(other)
        booking_service.create_booking(other.id, class_instance.id, now=NOW)
        waiting = booking_service.create_booking(member.id, class_instance.id, now=NOW)

        with pytest.raises(BookingNotActiveException):
            check_in_service.manual_check_in(waiting.booking_id, now=DOORS_OPEN)

    def test_roster_lists_class_bookings(self, check_in_service, booked):
        roster = check_in_service.get_roster(booked.class_id)
        assert [b.id for b in roster] == [booked.id]

    def test_roster_for_unknown_class(self, check_in_service):
        with pytest.raises(ClassNotFoundException):
            check_in_service.get_roster("01K2K8CVN3A55280PFKJD9YHKV")


class TestMarkAttendance:
    def test_attended_moves_no_credit(self, db, booking_service, booked):
        user_pass = booking_service.ledger.get_pass_for_update(booked.consumed_pass_id)
        before = user_pass.remaining_credits

        result = booking_service.mark_attendance(booked.id, BookingStatus.ATTENDED, now=DOORS_OPEN)

        db.refresh(user_pass)
        assert result.status == BookingStatus.ATTENDED.value
        assert user_pass.remaining_credits == before

    def test_no_show_promotes_waitlist(
        self, db, booking_service, member, create_user, create_pass, create_class
    ):
        class_instance = create_class(capacity=1)
        seat = booking_service.create_booking(member.id, class_instance.id, now=NOW)
        other = create_user()
        create_pass(other)
        waiting = booking_service.create_booking(other.id, class_instance.id, now=NOW)

        booking_service.mark_attendance(
            seat.booking_id, BookingStatus.NO_SHOW, now=CLASS_STARTS_AT - timedelta(minutes=5)
        )

        promoted = booking_service.get_booking(waiting.booking_id)
        db.refresh(promoted)
        assert promoted.status == BookingStatus.BOOKED.value

    def test_only_attended_or_no_show(self, booking_service, booked):
        with pytest.raises(ValidationException):
            booking_service.mark_attendance(booked.id, BookingStatus.CANCELLED, now=NOW)

    def test_cancelled_booking_cannot_be_marked(self, booking_service, booked, member):
        booking_service.cancel_booking(booked.id, actor_id=member.id, now=NOW)

        with pytest.raises(BookingNotActiveException):
            booking_service.mark_attendance(booked.id, BookingStatus.ATTENDED, now=NOW)

    def test_unknown_booking(self, booking_service):
        with pytest.raises(BookingNotFoundException):
            booking_service.mark_attendance(
                "01K2K8CVN3A55280PFKJD9YHKV", BookingStatus.ATTENDED, now=NOW
            )
