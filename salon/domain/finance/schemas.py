"""Finance schemas"""

import datetime
from typing import Optional

from pydantic import BaseModel


class TransactionResponse(BaseModel):
    id: str
    date: datetime.date
    description: str
    amount: float
    type: str
    category: str
    appointment_id: Optional[str] = None
    payment_method_id: Optional[str] = None
    client_package_id: Optional[str] = None

    class Config:
        from_attributes = True


class CommissionResponse(BaseModel):
    id: str
    professional_id: str
    transaction_id: str
    amount: float
    date: datetime.date
    status: str

    class Config:
        from_attributes = True


class ClientPackageResponse(BaseModel):
    id: str
    client_id: str
    name: str
    purchase_date: datetime.date
    expiration_date: datetime.date
    remaining_items: dict[str, int]

    class Config:
        from_attributes = True


class PointsHistoryResponse(BaseModel):
    id: str
    client_id: str
    transaction_id: Optional[str] = None
    points: int
    type: str
    description: Optional[str] = None
    created_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True
