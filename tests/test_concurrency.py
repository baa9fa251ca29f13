from concurrent.futures import ThreadPoolExecutor

from salon.domain.finance.repository import FinanceRepository
from salon.domain.scheduling.booking_service import BookingService
from salon.domain.scheduling.relocation_service import RelocationService
from salon.domain.scheduling.repository import AppointmentRepository
from salon.models import AppointmentStatus, Transaction
from salon.shared.errors import (
    ConflictError,
    NoProfessionalAvailableError,
    SalonError,
    ValidationError,
)

from conftest import MONDAY


def run_concurrently(sessions, count, action):
    def attempt(index):
        session = sessions()
        try:
            return action(session, index)
        except SalonError as e:
            return e
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=count) as pool:
        return list(pool.map(attempt, range(count)))


def occupying(sessions, professional_id):
    session = sessions()
    try:
        return [
            a
            for a in AppointmentRepository.list_appointments(session, MONDAY, professional_id)
            if a.status != AppointmentStatus.CANCELLED.value
        ]
    finally:
        session.close()


def test_pinned_bookings_for_the_same_slot(file_sessions):
    def book(session, index):
        client_id = "client-1" if index % 2 else "client-2"
        return BookingService(session).create_booking(
            client_id, ["cut"], MONDAY, "09:00", professional_id="pro-b"
        )

    results = run_concurrently(file_sessions, 6, book)

    successes = [r for r in results if isinstance(r, dict)]
    failures = [r for r in results if not isinstance(r, dict)]
    assert len(successes) == 1
    assert all(isinstance(f, ConflictError) for f in failures)
    assert len(occupying(file_sessions, "pro-b")) == 1


def test_any_professional_bookings_spread_then_run_out(file_sessions):
    def book(session, index):
        return BookingService(session).create_booking("client-2", ["cut"], MONDAY, "09:00")

    results = run_concurrently(file_sessions, 4, book)

    successes = [r for r in results if isinstance(r, dict)]
    failures = [r for r in results if not isinstance(r, dict)]
    assert sorted(r["professional_id"] for r in successes) == ["pro-a", "pro-b"]
    assert all(isinstance(f, NoProfessionalAvailableError) for f in failures)


def test_blocks_and_moves_never_overlap(file_sessions):
    session = file_sessions()
    appointment = BookingService(session).create_booking(
        "client-2", ["cut"], MONDAY, "09:00", professional_id="pro-a"
    )["appointments"][0]
    appointment_id = appointment.id
    session.close()

    def act(session, index):
        if index == 0:
            return RelocationService(session).move_appointment(
                appointment_id, MONDAY, "10:00", "pro-b"
            )
        return RelocationService(session).create_block(MONDAY, "10:00", 30, "pro-b", "Stock")

    results = run_concurrently(file_sessions, 4, act)

    assert sum(not isinstance(r, SalonError) for r in results) == 1
    assert len(occupying(file_sessions, "pro-b")) == 1


def test_one_package_credit_pays_for_one_booking(file_sessions):
    # pkg-1 holds a single haircut credit
    def book(session, index):
        return BookingService(session).create_booking(
            "client-1",
            ["cut"],
            MONDAY,
            "09:00",
            professional_id=["pro-a", "pro-b"][index],
            package_id="pkg-1",
        )

    results = run_concurrently(file_sessions, 2, book)

    successes = [r for r in results if isinstance(r, dict)]
    failures = [r for r in results if not isinstance(r, dict)]
    assert len(successes) == 1
    assert all(isinstance(f, ValidationError) for f in failures)

    session = file_sessions()
    try:
        package = FinanceRepository.get_package(session, "pkg-1")
        assert package.remaining_items["cut"] == 0
        usages = session.query(Transaction).filter(Transaction.category == "PACKAGE_USAGE").all()
        assert len(usages) == 1
    finally:
        session.close()
