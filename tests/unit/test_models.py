import pytest
from pydantic import ValidationError

from pickup.bookings.models import Booking, BookingCreate


def test_booking_create_ignores_unknown_top_level_fields():
    payload = BookingCreate.model_validate({
        "address": "123 Main St",
        "status": "paid",          # ne doit pas pouvoir être forcé par le client
        "amountCents": 1,
        "isAdmin": True,
        "extra": {"referral": "flyer", "floor": 2},
    })
    booking = Booking.from_create(payload, booking_id="b1", miles=1.0, amount_cents=1000)
    data = booking.to_json()
    assert data["status"] == "pending"
    assert data["amountCents"] == 1000
    assert "isAdmin" not in data
    assert data["extra"] == {"referral": "flyer", "floor": 2}


def test_booking_create_accepts_legacy_pickup_field():
    payload = BookingCreate.model_validate({"address": "1 A St", "pickupDateTime": "2026-10-20T09:00:00Z"})
    assert payload.pickup_date_time_iso == "2026-10-20T09:00:00Z"


@pytest.mark.parametrize("address", ["", "   "])
def test_booking_create_rejects_blank_address(address):
    with pytest.raises(ValidationError):
        BookingCreate.model_validate({"address": address})


def test_booking_create_rejects_nested_extra_values():
    with pytest.raises(ValidationError):
        BookingCreate.model_validate({"address": "1 A St", "extra": {"nested": {"a": 1}}})


def test_booking_json_uses_camel_case_keys():
    payload = BookingCreate.model_validate({
        "address": "1 A St",
        "firstName": "Sam",
        "supplies": {"labelPrint": True},
    })
    data = Booking.from_create(payload, booking_id="b2", miles=0.0, amount_cents=1050).to_json()
    assert data["bookingId"] == "b2"
    assert data["firstName"] == "Sam"
    assert data["supplies"]["labelPrint"] is True
    assert data["paidAtISO"] is None
    assert data["createdAtISO"].endswith("Z")


def test_booking_reads_legacy_record_with_null_supplies():
    booking = Booking.model_validate({
        "bookingId": "old",
        "status": "pending",
        "address": "9 Elm St",
        "supplies": None,
        "someOldField": "x",
    })
    assert booking.supplies.box is False
    assert booking.amount_cents == 0


def test_booking_from_row_drops_values_outside_the_model():
    row = {
        "bookingId": "old",
        "status": "pending",
        "address": "1 A St",
        "notes": 42,
        "amountCents": "lots",
        "extra": {"nested": {"a": 1}},
        "email": "old@example.com",
    }
    booking = Booking.from_row(row)
    assert booking.booking_id == "old"
    assert booking.email == "old@example.com"
    assert booking.notes is None
    assert booking.amount_cents == 0
    assert booking.extra == {}
    # Le dict source n'est pas modifié
    assert row["notes"] == 42


def test_booking_from_row_valid_record_is_unchanged():
    booking = Booking(booking_id="b1", address="9 Elm St", amount_cents=1200)
    assert Booking.from_row(booking.to_json()) == booking
