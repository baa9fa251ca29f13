"""Pricing repository - promotion queries"""

from sqlalchemy.orm import Session

from ...models import Promotion


class PromotionRepository:
    @staticmethod
    def list_promotions(db: Session) -> list[Promotion]:
        return db.query(Promotion).order_by(Promotion.created_at, Promotion.id).all()

    @staticmethod
    def list_active(db: Session) -> list[Promotion]:
        """Active promotions in creation order; the first match wins"""
        return (
            db.query(Promotion)
            .filter(Promotion.active.is_(True))
            .order_by(Promotion.created_at, Promotion.id)
            .all()
        )

    @staticmethod
    def create(db: Session, promotion: Promotion) -> Promotion:
        db.add(promotion)
        db.commit()
        db.refresh(promotion)
        return promotion
