"""Finance repository - Database operations for ledger and loyalty records"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from ...models import Client, ClientPackage, Commission, PointsHistory, Transaction


class FinanceRepository:
    """Repository for transactions, commissions, points and client packages"""

    @staticmethod
    def add_transaction(db: Session, transaction: Transaction) -> Transaction:
        db.add(transaction)
        db.commit()
        db.refresh(transaction)
        return transaction

    @staticmethod
    def list_transactions(
        db: Session, start: Optional[date] = None, end: Optional[date] = None
    ) -> list[Transaction]:
        query = db.query(Transaction)
        if start:
            query = query.filter(Transaction.date >= start)
        if end:
            query = query.filter(Transaction.date <= end)
        return query.order_by(Transaction.date, Transaction.created_at).all()

    @staticmethod
    def transactions_for_appointment(db: Session, appointment_id: str) -> list[Transaction]:
        return db.query(Transaction).filter(Transaction.appointment_id == appointment_id).all()

    @staticmethod
    def add_commission(db: Session, commission: Commission) -> Commission:
        db.add(commission)
        db.commit()
        db.refresh(commission)
        return commission

    @staticmethod
    def list_commissions(db: Session, professional_id: Optional[str] = None) -> list[Commission]:
        query = db.query(Commission)
        if professional_id:
            query = query.filter(Commission.professional_id == professional_id)
        return query.order_by(Commission.date).all()

    @staticmethod
    def add_points(db: Session, client: Client, entry: PointsHistory) -> PointsHistory:
        """Adjust the client's balance and append the history row in one commit"""
        client.loyalty_points = (client.loyalty_points or 0) + entry.points
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    @staticmethod
    def points_history(db: Session, client_id: str) -> list[PointsHistory]:
        return (
            db.query(PointsHistory)
            .filter(PointsHistory.client_id == client_id)
            .order_by(PointsHistory.created_at.desc())
            .all()
        )

    @staticmethod
    def get_package(db: Session, package_id: str) -> Optional[ClientPackage]:
        return db.query(ClientPackage).filter(ClientPackage.id == package_id).first()

    @staticmethod
    def active_packages(db: Session, client_id: str, today: date) -> list[ClientPackage]:
        """Packages the client can still redeem (not expired)"""
        return (
            db.query(ClientPackage)
            .filter(ClientPackage.client_id == client_id, ClientPackage.expiration_date >= today)
            .order_by(ClientPackage.expiration_date)
            .all()
        )

    @staticmethod
    def take_package_item(package: ClientPackage, service_id: str) -> bool:
        """Remove one credit for service_id in the session, leaving the commit to the caller"""
        items = dict(package.remaining_items or {})
        if items.get(service_id, 0) <= 0:
            return False
        items[service_id] -= 1
        package.remaining_items = items
        flag_modified(package, "remaining_items")
        return True

    @staticmethod
    def decrement_package_item(db: Session, package: ClientPackage, service_id: str) -> bool:
        """Remove one credit for service_id; False when there is none left"""
        if not FinanceRepository.take_package_item(package, service_id):
            return False
        db.commit()
        db.refresh(package)
        return True
