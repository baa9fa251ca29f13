import pytest

from salon.domain.scheduling.availability_service import AvailabilityService
from salon.models import Appointment, AppointmentStatus, Service
from salon.shared.errors import ValidationError

from conftest import MONDAY, SATURDAY, SUNDAY


def book(
    db, pro, time, service_id="cut", status=AppointmentStatus.CONFIRMED, client_id="client-2", **fields
):
    appointment = Appointment(
        client_id=client_id,
        professional_id=pro,
        service_id=service_id,
        date=MONDAY,
        time=time,
        status=status.value,
        **fields,
    )
    db.add(appointment)
    db.commit()
    return appointment


def test_break_is_excluded(db):
    slots = AvailabilityService(db).get_available_slots(MONDAY, ["massage"], "pro-a")

    assert "11:00" in slots  # ends exactly when the break starts
    assert "13:00" in slots  # starts exactly when the break ends
    assert "11:15" not in slots
    assert "11:30" not in slots
    assert "12:30" not in slots


def test_buffer_counts_towards_duration(db):
    # color is 60 minutes plus a 15 minute buffer
    slots = AvailabilityService(db).get_available_slots(MONDAY, ["color"], "pro-a")

    assert slots[0] == "09:00"
    assert slots[-1] == "16:45"
    assert "10:45" in slots
    assert "11:00" not in slots


def test_slots_are_a_sorted_union_across_professionals(db):
    slots = AvailabilityService(db).get_available_slots(MONDAY, ["cut"])

    # pro-a is on break, pro-b is not
    assert "12:00" in slots
    # only pro-a works until 18:00
    assert slots[-1] == "17:30"
    assert slots == sorted(set(slots))


def test_only_professionals_working_that_day(db):
    service = AvailabilityService(db)

    assert service.get_available_slots(SATURDAY, ["cut"])[-1] == "16:30"
    assert service.get_available_slots(SUNDAY, ["cut"]) == []


def test_cart_needs_a_professional_with_every_specialty(db):
    service = AvailabilityService(db)

    assert service.get_available_slots(MONDAY, ["cut", "nails"], "pro-a") == []
    assert service.get_available_slots(MONDAY, ["color", "nails"]) == []
    assert service.get_available_slots(MONDAY, ["cut", "nails"])[0] == "09:00"


def test_existing_appointments_block_overlapping_starts(db):
    book(db, "pro-b", "10:00", service_id="nails")  # 10:00-10:45
    slots = AvailabilityService(db).get_available_slots(MONDAY, ["nails"], "pro-b")

    assert "09:15" in slots  # ends 10:00
    assert "09:30" not in slots
    assert "10:30" not in slots
    assert "10:45" in slots


def test_cancelled_appointments_do_not_occupy(db):
    book(db, "pro-b", "10:00", service_id="nails", status=AppointmentStatus.CANCELLED)
    slots = AvailabilityService(db).get_available_slots(MONDAY, ["nails"], "pro-b")

    assert "10:00" in slots


def test_custom_duration_and_blocks_are_honoured(db):
    book(db, "pro-b", "09:00", custom_duration=90)
    book(
        db,
        "pro-b",
        "14:00",
        service_id="BLOCK",
        status=AppointmentStatus.BLOCKED,
        client_id=None,
        custom_duration=60,
    )
    slots = AvailabilityService(db).get_available_slots(MONDAY, ["nails"], "pro-b")

    assert "10:15" not in slots
    assert "10:30" in slots
    assert "13:30" not in slots
    assert "14:00" not in slots
    assert "15:00" in slots


def test_unknown_service_falls_back_to_sixty_minutes(db):
    book(db, "pro-b", "09:00", service_id="discontinued")
    slots = AvailabilityService(db).get_available_slots(MONDAY, ["cut"], "pro-b")

    assert "09:30" not in slots
    assert "10:00" in slots


def test_explicit_duration_overrides_cart(db):
    slots = AvailabilityService(db).get_available_slots(
        MONDAY, ["cut"], "pro-b", explicit_duration=120
    )

    assert slots[-1] == "15:00"


def test_invalid_requests(db):
    service = AvailabilityService(db)

    with pytest.raises(ValidationError):
        service.get_available_slots(MONDAY, [])
    with pytest.raises(ValidationError):
        service.get_available_slots(MONDAY, ["cut"], explicit_duration=0)
    with pytest.raises(ValidationError):
        service.get_available_slots("not-a-date", ["cut"])


def test_zero_total_duration_has_no_slots(db):
    db.add(Service(id="free-check", name="Check-in", duration_minutes=0, price=0))
    db.commit()

    assert AvailabilityService(db).get_available_slots(MONDAY, ["free-check"]) == []


def test_slot_computation_is_idempotent(db):
    book(db, "pro-a", "10:00", service_id="massage")
    service = AvailabilityService(db)

    first = service.get_available_slots(MONDAY, ["cut"])
    second = service.get_available_slots(MONDAY, ["cut"])

    assert first == second


def test_find_free_professional_uses_roster_order(db):
    service = AvailabilityService(db)

    assert service.find_free_professional(MONDAY, ["cut"], "09:00").id == "pro-a"
    assert service.find_free_professional(MONDAY, ["cut"], "12:00").id == "pro-b"

    book(db, "pro-a", "09:00")
    assert service.find_free_professional(MONDAY, ["cut"], "09:00").id == "pro-b"

    book(db, "pro-b", "09:00")
    assert service.find_free_professional(MONDAY, ["cut"], "09:00") is None
