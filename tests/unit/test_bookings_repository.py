import json

import pytest

from pickup.bookings import repository
from pickup.bookings.models import Booking


def _booking(booking_id: str, **kw) -> Booking:
    return Booking(booking_id=booking_id, address="123 Main St", amount_cents=1000, **kw)


def test_init_store_creates_empty_collection(bookings_file, stored_bookings):
    repository.init_store()
    assert bookings_file.exists()
    assert stored_bookings() == []


def test_insert_then_list_and_get_preserve_order(stored_bookings):
    repository.insert_booking(_booking("a"))
    repository.insert_booking(_booking("b"))

    assert [row["bookingId"] for row in repository.list_bookings()] == ["a", "b"]
    assert repository.get_booking("b")["bookingId"] == "b"
    assert repository.get_booking("zzz") is None
    assert [row["bookingId"] for row in stored_bookings()] == ["a", "b"]


def test_insert_rejects_duplicate_identifier():
    repository.insert_booking(_booking("dup"))
    with pytest.raises(ValueError):
        repository.insert_booking(_booking("dup"))
    assert len(repository.list_bookings()) == 1


def test_mark_paid_transitions_once_and_keeps_first_timestamp():
    repository.insert_booking(_booking("p1"))

    booking, transitioned = repository.mark_paid("p1")
    assert transitioned is True
    assert booking.status == "paid"
    first_paid_at = booking.paid_at_iso
    assert first_paid_at

    again, transitioned_again = repository.mark_paid("p1")
    assert transitioned_again is False
    assert again.status == "paid"
    assert again.paid_at_iso == first_paid_at
    assert repository.get_booking("p1")["paidAtISO"] == first_paid_at


def test_mark_paid_unknown_id_leaves_file_unchanged(bookings_file):
    repository.insert_booking(_booking("x"))
    before = bookings_file.read_bytes()

    assert repository.mark_paid("missing") == (None, False)
    assert bookings_file.read_bytes() == before


def test_mark_paid_keeps_unknown_fields_of_legacy_records(bookings_file, stored_bookings):
    bookings_file.parent.mkdir(parents=True, exist_ok=True)
    bookings_file.write_text(
        '[{"bookingId": "legacy", "status": "pending", "address": "1 Old Rd", "pickupDateTime": "noon"}]'
    )
    booking, transitioned = repository.mark_paid("legacy")
    assert transitioned is True
    row = stored_bookings()[0]
    assert row["status"] == "paid"
    assert row["pickupDateTime"] == "noon"


def _write_rows(bookings_file, rows):
    bookings_file.parent.mkdir(parents=True, exist_ok=True)
    bookings_file.write_text(json.dumps(rows))


def test_reads_return_records_outside_the_model_unchanged(bookings_file):
    legacy = {"bookingId": "legacy-1", "status": "pending", "address": "1 A St", "notes": 42, "source": "flyer"}
    _write_rows(bookings_file, [legacy])

    assert repository.list_bookings() == [legacy]
    assert repository.get_booking("legacy-1") == legacy


def test_mark_paid_on_record_outside_the_model(bookings_file, stored_bookings):
    _write_rows(bookings_file, [
        {"bookingId": "legacy-1", "status": "pending", "address": "1 A St", "notes": 42, "supplies": "box"},
    ])

    booking, transitioned = repository.mark_paid("legacy-1")

    assert transitioned is True
    assert booking.status == "paid"
    assert booking.address == "1 A St"
    assert booking.notes is None
    row = stored_bookings()[0]
    assert row["status"] == "paid"
    assert row["paidAtISO"]
    # Valeurs d'origine conservées sur disque
    assert row["notes"] == 42
    assert row["supplies"] == "box"

    again, transitioned_again = repository.mark_paid("legacy-1")
    assert transitioned_again is False
    assert again.paid_at_iso == row["paidAtISO"]
