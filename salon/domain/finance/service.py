"""
Finance service - ledger, commission and loyalty side effects of bookings.

Side effects run after the appointment is persisted. A failing step is logged
and skipped; it never undoes the appointment, and the ledger can be reconciled
from the appointment afterwards.
"""

import logging
import math
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...config import LOYALTY_POINTS_DIVISOR
from ...models import (
    Appointment,
    ClientPackage,
    Commission,
    PointsHistory,
    Service,
    Transaction,
    TransactionCategory,
    TransactionType,
)
from ...shared.errors import NotFoundError, ValidationError
from ..catalog.repository import CatalogRepository
from ..pricing.schemas import PriceQuote
from ..scheduling.locks import package_locks
from .repository import FinanceRepository

logger = logging.getLogger(__name__)


def loyalty_points_for(amount: float) -> int:
    return math.floor(amount / LOYALTY_POINTS_DIVISOR)


def commission_amount(base_amount: float, percentage: float) -> float:
    return round(base_amount * percentage / 100, 2)


class FinanceService:
    """Records ledger entries, commissions, points and package usage"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = FinanceRepository()
        self.catalog = CatalogRepository()

    # ------------------------------------------------------------------
    # Collaborator operations
    # ------------------------------------------------------------------

    def record_transaction(
        self,
        day: date,
        description: str,
        amount: float,
        category: TransactionCategory,
        appointment_id: Optional[str] = None,
        payment_method_id: Optional[str] = None,
        client_package_id: Optional[str] = None,
        type: TransactionType = TransactionType.INCOME,
    ) -> Transaction:
        if amount is None or not math.isfinite(amount) or amount < 0:
            raise ValidationError(f"Invalid transaction amount: {amount}")
        if not description or not description.strip():
            raise ValidationError("Transaction description is required")

        transaction = Transaction(
            date=day,
            description=description,
            amount=amount,
            type=type.value,
            category=category.value,
            appointment_id=appointment_id,
            payment_method_id=payment_method_id,
            client_package_id=client_package_id,
        )
        return self.repo.add_transaction(self.db, transaction)

    def record_commission(
        self, professional_id: str, transaction_id: str, base_amount: float, day: date
    ) -> Optional[Commission]:
        """Commission of base_amount at the professional's rate"""
        pro = self.catalog.get_professional(self.db, professional_id)
        if not pro:
            logger.warning(f"⚠️ No commission recorded: professional {professional_id} not found")
            return None
        commission = Commission(
            professional_id=professional_id,
            transaction_id=transaction_id,
            amount=commission_amount(base_amount, pro.commission_percentage),
            date=day,
            status="PENDING",
        )
        return self.repo.add_commission(self.db, commission)

    def add_loyalty_points(
        self,
        client_id: str,
        points: int,
        transaction_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[PointsHistory]:
        client = self.catalog.get_client(self.db, client_id)
        if not client:
            logger.warning(f"⚠️ No points added: client {client_id} not found")
            return None
        entry = PointsHistory(
            client_id=client_id,
            transaction_id=transaction_id,
            points=points,
            type="EARN" if points > 0 else "REDEEM",
            description=description or "Points adjustment",
        )
        return self.repo.add_points(self.db, client, entry)

    def consume_package_credit(self, package_id: str, service_id: str) -> bool:
        """Spend one credit now, in its own commit; False when none was spent"""
        with package_locks.hold([(package_id,)]):
            self.db.expire_all()
            package = self.repo.get_package(self.db, package_id)
            if not package:
                logger.warning(f"⚠️ Package {package_id} not found; no credit consumed")
                return False
            consumed = self.repo.decrement_package_item(self.db, package, service_id)
        if not consumed:
            logger.warning(f"⚠️ Package {package_id} has no credit left for service {service_id}")
        return consumed

    def reserve_package_credit(
        self, package_id: str, client_id: str, service_id: str, today: date
    ) -> ClientPackage:
        """
        Take one credit inside the caller's unit of work. The caller must hold
        the package lock and commits the credit together with the booking.
        """
        package = self.get_redeemable_package(package_id, client_id, service_id, today)
        self.repo.take_package_item(package, service_id)
        return package

    def get_redeemable_package(
        self, package_id: str, client_id: str, service_id: str, today: date
    ) -> ClientPackage:
        """Validate that a package can pay for one unit of service_id"""
        package = self.repo.get_package(self.db, package_id)
        if not package or package.client_id != client_id:
            raise NotFoundError(f"Package {package_id} not found for this client")
        if package.expiration_date < today:
            raise ValidationError(f"Package {package_id} expired on {package.expiration_date}")
        if (package.remaining_items or {}).get(service_id, 0) <= 0:
            raise ValidationError(f"Package {package_id} has no remaining credit for this service")
        return package

    # ------------------------------------------------------------------
    # Booking side effects
    # ------------------------------------------------------------------

    def dispatch_booking_leg(
        self,
        appointment: Appointment,
        service: Service,
        quote: PriceQuote,
        package_id: Optional[str] = None,
        payment_method_id: Optional[str] = None,
        credit_reserved: bool = False,
    ) -> None:
        """
        Ledger, commission and loyalty effects for one booked appointment.

        credit_reserved means the package credit was already taken together
        with the appointment; otherwise one is consumed here first.
        """
        if package_id:
            self._dispatch_package_leg(appointment, service, package_id, credit_reserved)
        else:
            self._dispatch_paid_leg(appointment, service, quote, payment_method_id)

    def _dispatch_package_leg(
        self, appointment: Appointment, service: Service, package_id: str, credit_reserved: bool
    ):
        if not credit_reserved and not self._safe_consume(appointment, service, package_id):
            logger.error(
                f"❌ Package {package_id} did not cover appointment {appointment.id}; "
                f"no usage recorded and the service is left unpaid"
            )
            return

        transaction = self._safe_transaction(
            appointment,
            description=f"Package usage: {service.name}",
            amount=0,
            category=TransactionCategory.PACKAGE_USAGE,
            client_package_id=package_id,
        )
        if transaction:
            # Professionals are paid on the full service price even when a package covers it
            self._safe_commission(appointment, transaction, service.price)

    def _dispatch_paid_leg(
        self,
        appointment: Appointment,
        service: Service,
        quote: PriceQuote,
        payment_method_id: Optional[str],
    ):
        price = quote.finalPrice
        description = f"Service: {service.name}"
        if quote.discountReason:
            description = f"{description} [{quote.discountReason}]"

        transaction = self._safe_transaction(
            appointment,
            description=description,
            amount=price,
            category=TransactionCategory.SERVICE,
            payment_method_id=payment_method_id,
        )

        points = loyalty_points_for(price)
        if points > 0 and appointment.client_id:
            try:
                self.add_loyalty_points(
                    appointment.client_id,
                    points,
                    transaction.id if transaction else None,
                    f"Points for service: {service.name}",
                )
            except Exception:
                self.db.rollback()
                logger.exception(f"❌ Failed to add loyalty points for {appointment.id}")

        if transaction:
            self._safe_commission(appointment, transaction, price)

    def _safe_consume(self, appointment: Appointment, service: Service, package_id: str) -> bool:
        try:
            return self.consume_package_credit(package_id, service.id)
        except Exception:
            self.db.rollback()
            logger.exception(f"❌ Failed to consume package {package_id} for {appointment.id}")
            return False

    def _safe_transaction(self, appointment: Appointment, **fields) -> Optional[Transaction]:
        try:
            return self.record_transaction(appointment.date, appointment_id=appointment.id, **fields)
        except Exception:
            self.db.rollback()
            logger.exception(f"❌ Failed to record transaction for appointment {appointment.id}")
            return None

    def _safe_commission(self, appointment: Appointment, transaction: Transaction, base: float):
        try:
            self.record_commission(appointment.professional_id, transaction.id, base, appointment.date)
        except Exception:
            self.db.rollback()
            logger.exception(f"❌ Failed to record commission for appointment {appointment.id}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_transactions(self, start: Optional[date] = None, end: Optional[date] = None):
        return self.repo.list_transactions(self.db, start, end)

    def list_commissions(self, professional_id: Optional[str] = None):
        return self.repo.list_commissions(self.db, professional_id)

    def appointment_transactions(self, appointment_id: str) -> list[Transaction]:
        """Ledger entries recorded for one appointment, for reconciliation"""
        return self.repo.transactions_for_appointment(self.db, appointment_id)

    def client_packages(self, client_id: str, today: date) -> list[ClientPackage]:
        return self.repo.active_packages(self.db, client_id, today)

    def points_history(self, client_id: str) -> list[PointsHistory]:
        return self.repo.points_history(self.db, client_id)
