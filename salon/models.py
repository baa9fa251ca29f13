import enum
import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_id():
    """Generate a unique string ID"""
    return str(uuid.uuid4())


class AppointmentStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    BLOCKED = "BLOCKED"


class TransactionType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class TransactionCategory(str, enum.Enum):
    SERVICE = "SERVICE"
    PACKAGE_SALE = "PACKAGE_SALE"
    PACKAGE_USAGE = "PACKAGE_USAGE"
    COMMISSION = "COMMISSION"
    REFUND = "REFUND"
    OTHER = "OTHER"


class PromotionType(str, enum.Enum):
    HAPPY_HOUR = "HAPPY_HOUR"
    BIRTHDAY = "BIRTHDAY"


# Synthetic service id carried by administrative blocks
BLOCK_SERVICE_ID = "BLOCK"


class Service(Base):
    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    duration_minutes = Column(Integer, nullable=False)  # Service-only time
    buffer_minutes = Column(Integer, default=0, nullable=False)  # Cleanup/prep after the service
    price = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())

    @property
    def total_minutes(self) -> int:
        return self.duration_minutes + (self.buffer_minutes or 0)


class Professional(Base):
    __tablename__ = "professionals"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    commission_percentage = Column(Float, default=0, nullable=False)  # 0-100
    specialties = Column(JSON, default=list, nullable=False)  # Service IDs
    # Working schedule
    work_days = Column(JSON, default=list, nullable=False)  # 0-6 (Sunday-Saturday)
    work_start = Column(String(5), nullable=False)  # HH:MM
    work_end = Column(String(5), nullable=False)  # HH:MM
    break_start = Column(String(5), nullable=True)  # HH:MM
    break_end = Column(String(5), nullable=True)  # HH:MM
    created_at = Column(DateTime, server_default=func.now())

    appointments = relationship("Appointment", back_populates="professional")


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    birth_date = Column(Date, nullable=True)
    loyalty_points = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    packages = relationship("ClientPackage", back_populates="client")


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_id)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=True)  # Null for blocks
    professional_id = Column(String(36), ForeignKey("professionals.id"), nullable=False, index=True)
    # No FK: blocks carry the synthetic BLOCK id
    service_id = Column(String(36), nullable=False)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(5), nullable=False)  # HH:MM
    status = Column(String(20), default=AppointmentStatus.PENDING.value, nullable=False, index=True)
    custom_duration = Column(Integer, nullable=True)  # Overrides the service duration
    notes = Column(Text, nullable=True)  # Block reason for BLOCKED entries
    client_package_id = Column(String(36), ForeignKey("client_packages.id"), nullable=True)
    payment_method_id = Column(String(36), ForeignKey("payment_methods.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    professional = relationship("Professional", back_populates="appointments")


class ClientPackage(Base):
    __tablename__ = "client_packages"

    id = Column(String(36), primary_key=True, default=generate_id)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    purchase_date = Column(Date, nullable=False)
    expiration_date = Column(Date, nullable=False)
    remaining_items = Column(JSON, default=dict, nullable=False)  # {service_id: count}

    client = relationship("Client", back_populates="packages")


class Promotion(Base):
    __tablename__ = "promotions"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)  # HAPPY_HOUR, BIRTHDAY
    discount_percentage = Column(Float, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    # HAPPY_HOUR rule
    days_of_week = Column(JSON, nullable=True)  # 0-6 (Sunday-Saturday)
    start_hour = Column(String(5), nullable=True)  # HH:MM
    end_hour = Column(String(5), nullable=True)  # HH:MM
    created_at = Column(DateTime, server_default=func.now())


class PaymentMethod(Base):
    __tablename__ = "payment_methods"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    active = Column(Boolean, default=True, nullable=False)


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=generate_id)
    date = Column(Date, nullable=False)
    description = Column(String(500), nullable=False)
    amount = Column(Float, nullable=False)
    type = Column(String(20), nullable=False)  # INCOME, EXPENSE
    category = Column(String(30), nullable=False)
    appointment_id = Column(String(36), ForeignKey("appointments.id"), nullable=True)
    payment_method_id = Column(String(36), nullable=True)
    client_package_id = Column(String(36), nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Commission(Base):
    __tablename__ = "commissions"

    id = Column(String(36), primary_key=True, default=generate_id)
    professional_id = Column(String(36), ForeignKey("professionals.id"), nullable=False, index=True)
    transaction_id = Column(String(36), ForeignKey("transactions.id"), nullable=False)
    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False)
    status = Column(String(20), default="PENDING", nullable=False)  # PENDING, PAID, CANCELLED


class PointsHistory(Base):
    __tablename__ = "points_history"

    id = Column(String(36), primary_key=True, default=generate_id)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)
    transaction_id = Column(String(36), nullable=True)
    points = Column(Integer, nullable=False)
    type = Column(String(10), nullable=False)  # EARN, REDEEM
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class SalonConfig(Base):
    __tablename__ = "salon_config"

    id = Column(Integer, primary_key=True)
    cancellation_window_hours = Column(Integer, nullable=False)
    strict_resize = Column(Boolean, default=False, nullable=False)  # Re-validate conflicts on resize
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
