import pytest

from salon.domain.finance.repository import FinanceRepository
from salon.domain.finance.service import FinanceService
from salon.domain.pricing.schemas import PriceQuote
from salon.domain.scheduling.booking_service import BookingService
from salon.domain.scheduling.repository import AppointmentRepository
from salon.models import Appointment, AppointmentStatus, ClientPackage, Commission, Service
from salon.shared.errors import ConflictError

from conftest import MONDAY

CUT_QUOTE = PriceQuote(serviceId="cut", basePrice=50, finalPrice=50)


def set_credits(db, package_id, items):
    package = db.query(ClientPackage).filter(ClientPackage.id == package_id).one()
    package.remaining_items = items
    db.commit()


def remaining(db, package_id):
    db.expire_all()
    return db.query(ClientPackage).filter(ClientPackage.id == package_id).one().remaining_items


@pytest.fixture
def cut_appointment(db):
    (appointment,) = AppointmentRepository.persist(
        db,
        Appointment(
            client_id="client-1",
            professional_id="pro-b",
            service_id="cut",
            date=MONDAY,
            time="09:00",
            status=AppointmentStatus.PENDING.value,
            client_package_id="pkg-1",
        ),
    )
    return appointment


def cut(db):
    return db.query(Service).filter(Service.id == "cut").one()


def test_package_leg_without_credit_is_left_unpaid(db, cut_appointment):
    set_credits(db, "pkg-1", {"cut": 0})

    FinanceService(db).dispatch_booking_leg(cut_appointment, cut(db), CUT_QUOTE, package_id="pkg-1")

    assert FinanceRepository.transactions_for_appointment(db, cut_appointment.id) == []
    assert db.query(Commission).count() == 0
    assert remaining(db, "pkg-1") == {"cut": 0}


def test_package_leg_for_a_missing_package_is_left_unpaid(db, cut_appointment):
    FinanceService(db).dispatch_booking_leg(cut_appointment, cut(db), CUT_QUOTE, package_id="pkg-gone")

    assert FinanceRepository.transactions_for_appointment(db, cut_appointment.id) == []
    assert db.query(Commission).count() == 0


def test_package_leg_consumes_a_credit_before_recording_usage(db, cut_appointment):
    FinanceService(db).dispatch_booking_leg(cut_appointment, cut(db), CUT_QUOTE, package_id="pkg-1")

    (transaction,) = FinanceRepository.transactions_for_appointment(db, cut_appointment.id)
    assert (transaction.category, transaction.amount) == ("PACKAGE_USAGE", 0)
    assert remaining(db, "pkg-1")["cut"] == 0
    (commission,) = db.query(Commission).all()
    assert commission.amount == 15


def test_booking_takes_the_credit_with_the_appointment(db):
    result = BookingService(db).create_booking(
        "client-1", ["cut"], MONDAY, "09:00", professional_id="pro-b", package_id="pkg-1"
    )

    assert remaining(db, "pkg-1")["cut"] == 0
    (transaction,) = FinanceRepository.transactions_for_appointment(
        db, result["appointments"][0].id
    )
    assert transaction.category == "PACKAGE_USAGE"


def test_rejected_booking_keeps_the_credit(db):
    BookingService(db).create_booking("client-2", ["cut"], MONDAY, "09:00", professional_id="pro-b")

    with pytest.raises(ConflictError):
        BookingService(db).create_booking(
            "client-1", ["cut"], MONDAY, "09:00", professional_id="pro-b", package_id="pkg-1"
        )

    assert remaining(db, "pkg-1")["cut"] == 1


def test_appointment_transactions(db):
    first = BookingService(db).create_booking("client-2", ["massage"], MONDAY, "09:00")
    BookingService(db).create_booking("client-2", ["massage"], MONDAY, "14:00")
    appointment_id = first["appointments"][0].id

    (transaction,) = FinanceService(db).appointment_transactions(appointment_id)

    assert transaction.appointment_id == appointment_id
    assert transaction.amount == 100
    assert FinanceService(db).appointment_transactions("missing") == []
