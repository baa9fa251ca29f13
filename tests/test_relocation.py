import pytest

from salon.domain.finance.repository import FinanceRepository
from salon.domain.scheduling.appointment_service import AppointmentService
from salon.domain.scheduling.availability_service import AvailabilityService
from salon.domain.scheduling.booking_service import BookingService
from salon.domain.scheduling.relocation_service import RelocationService
from salon.domain.settings.repository import SettingsRepository
from salon.models import AppointmentStatus, Transaction
from salon.shared.errors import ConflictError, NotFoundError, ValidationError

from conftest import MONDAY, TUESDAY


def book(db, time, pro="pro-b", service_ids=("cut",)):
    result = BookingService(db).create_booking(
        "client-2", list(service_ids), MONDAY, time, professional_id=pro
    )
    return result["appointments"][0]


def test_move_to_free_slot_keeps_the_ledger(db):
    appointment = book(db, "09:00")
    transactions_before = db.query(Transaction).count()

    moved = RelocationService(db).move_appointment(appointment.id, TUESDAY, "15:00", "pro-a")

    assert (moved.date, moved.time, moved.professional_id) == (TUESDAY, "15:00", "pro-a")
    assert db.query(Transaction).count() == transactions_before
    (transaction,) = FinanceRepository.transactions_for_appointment(db, appointment.id)
    assert transaction.date == MONDAY


def test_move_into_an_occupied_slot_is_a_conflict(db):
    book(db, "10:00")
    appointment = book(db, "09:00")

    with pytest.raises(ConflictError):
        RelocationService(db).move_appointment(appointment.id, MONDAY, "09:45", "pro-b")


def test_move_ignores_the_appointment_itself(db):
    appointment = book(db, "09:00")

    moved = RelocationService(db).move_appointment(appointment.id, MONDAY, "09:15", "pro-b")

    assert moved.time == "09:15"


def test_move_skips_schedule_and_specialty_checks(db):
    # pro-b does not do massages and pro-a is on break at 12:00
    appointment = book(db, "09:00", pro="pro-a", service_ids=("massage",))

    moved = RelocationService(db).move_appointment(appointment.id, MONDAY, "12:00", "pro-b")

    assert moved.professional_id == "pro-b"


def test_move_rules(db):
    appointment = book(db, "09:00")
    service = RelocationService(db)

    with pytest.raises(NotFoundError):
        service.move_appointment(appointment.id, MONDAY, "10:00", "pro-z")
    with pytest.raises(NotFoundError):
        service.move_appointment("missing", MONDAY, "10:00", "pro-a")

    AppointmentService(db).update_status(appointment.id, AppointmentStatus.CANCELLED.value)
    with pytest.raises(ValidationError):
        service.move_appointment(appointment.id, MONDAY, "10:00", "pro-a")


def test_resize_clamps_to_minimum(db):
    appointment = book(db, "09:00")

    resized = RelocationService(db).resize_appointment(appointment.id, 5)

    assert resized.custom_duration == 15
    slots = AvailabilityService(db).get_available_slots(MONDAY, ["cut"], "pro-b")
    assert slots[0] == "09:15"


def test_resize_rejects_non_positive(db):
    appointment = book(db, "09:00")

    with pytest.raises(ValidationError):
        RelocationService(db).resize_appointment(appointment.id, 0)
    with pytest.raises(ValidationError):
        RelocationService(db).resize_appointment(appointment.id, -30)


def test_resize_is_relaxed_by_default(db):
    first = book(db, "09:00")
    book(db, "09:30")

    resized = RelocationService(db).resize_appointment(first.id, 60)

    assert resized.custom_duration == 60


def test_strict_resize_checks_neighbours(db):
    config = SettingsRepository.get_config(db)
    SettingsRepository.update_config(db, config, strict_resize=True)
    first = book(db, "09:00")
    book(db, "09:30")
    service = RelocationService(db)

    with pytest.raises(ConflictError):
        service.resize_appointment(first.id, 60)
    # Growing into free time is fine
    assert service.resize_appointment(first.id, 30).custom_duration == 30


def test_resize_of_completed_appointment_is_refused(db):
    appointment = book(db, "09:00")
    appointments = AppointmentService(db)
    appointments.update_status(appointment.id, AppointmentStatus.CONFIRMED.value)
    appointments.update_status(appointment.id, AppointmentStatus.COMPLETED.value)

    with pytest.raises(ValidationError):
        RelocationService(db).resize_appointment(appointment.id, 45)


def test_block_occupies_time_without_finance(db):
    block = RelocationService(db).create_block(MONDAY, "09:00", 60, "pro-b", "Dentist")

    assert block.status == AppointmentStatus.BLOCKED.value
    assert block.client_id is None
    assert block.service_id == "BLOCK"
    assert block.notes == "Dentist"
    assert db.query(Transaction).count() == 0

    slots = AvailabilityService(db).get_available_slots(MONDAY, ["cut"], "pro-b")
    assert slots[0] == "10:00"


def test_block_rules(db):
    service = RelocationService(db)

    with pytest.raises(ValidationError):
        service.create_block(MONDAY, "09:00", 10, "pro-b", "Too short")
    with pytest.raises(ValidationError):
        service.create_block(MONDAY, "09:00", 481, "pro-b", "Too long")
    with pytest.raises(ValidationError):
        service.create_block(MONDAY, "09:00", 60, "pro-b", "  ")
    with pytest.raises(NotFoundError):
        service.create_block(MONDAY, "09:00", 60, "pro-z", "Nobody")

    assert service.create_block(MONDAY, "09:00", 480, "pro-b", "Full day").custom_duration == 480


def test_block_conflicts_with_bookings(db):
    book(db, "10:00")

    with pytest.raises(ConflictError):
        RelocationService(db).create_block(MONDAY, "09:30", 60, "pro-b", "Meeting")


def test_move_past_midnight_is_rejected(db):
    appointment = book(db, "09:00", pro="pro-a", service_ids=("color",))

    with pytest.raises(ValidationError):
        # 75 minutes from 23:30
        RelocationService(db).move_appointment(appointment.id, MONDAY, "23:30", "pro-a")

    db.expire_all()
    assert AppointmentService(db).get_appointment(appointment.id).time == "09:00"
    moved = RelocationService(db).move_appointment(appointment.id, MONDAY, "22:45", "pro-a")
    assert AppointmentService(db).describe(moved)["endTime"] == "24:00"


def test_resize_past_midnight_is_rejected(db):
    appointment = book(db, "09:00")
    service = RelocationService(db)

    with pytest.raises(ValidationError):
        service.resize_appointment(appointment.id, 15 * 60 + 1)

    assert service.resize_appointment(appointment.id, 15 * 60).custom_duration == 15 * 60


def test_block_past_midnight_is_rejected(db):
    service = RelocationService(db)

    with pytest.raises(ValidationError):
        service.create_block(MONDAY, "23:00", 480, "pro-b", "Late inventory")

    assert AvailabilityService(db).get_available_slots(MONDAY, ["cut"], "pro-b")[0] == "09:00"
    block = service.create_block(MONDAY, "23:00", 60, "pro-b", "Late inventory")
    assert AppointmentService(db).describe(block)["endTime"] == "24:00"
