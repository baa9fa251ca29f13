import os
from datetime import date

# Must be set before the salon package reads its configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from salon.database import Base, SessionLocal, build_engine, engine  # noqa: E402
from salon.models import (  # noqa: E402
    ClientPackage,
    Client,
    PaymentMethod,
    Professional,
    Service,
)

# 2030-01-07 is a Monday
MONDAY = date(2030, 1, 7)
TUESDAY = date(2030, 1, 8)
SATURDAY = date(2030, 1, 12)
SUNDAY = date(2030, 1, 13)


def seed_catalog(session):
    """
    Two professionals:
      pro-a  Mon-Fri 09:00-18:00, break 12:00-13:00, cut/color/massage, 40%
      pro-b  Mon-Sat 09:00-17:00, no break, cut/nails, 30%
    """
    session.add_all(
        [
            Service(id="cut", name="Haircut", duration_minutes=30, buffer_minutes=0, price=50),
            Service(id="color", name="Coloring", duration_minutes=60, buffer_minutes=15, price=120),
            Service(id="massage", name="Massage", duration_minutes=60, buffer_minutes=0, price=100),
            Service(id="nails", name="Manicure", duration_minutes=45, buffer_minutes=0, price=40),
        ]
    )
    session.add_all(
        [
            Professional(
                id="pro-a",
                name="Ana",
                commission_percentage=40,
                specialties=["cut", "color", "massage"],
                work_days=[1, 2, 3, 4, 5],
                work_start="09:00",
                work_end="18:00",
                break_start="12:00",
                break_end="13:00",
            ),
            Professional(
                id="pro-b",
                name="Bruno",
                commission_percentage=30,
                specialties=["cut", "nails"],
                work_days=[1, 2, 3, 4, 5, 6],
                work_start="09:00",
                work_end="17:00",
            ),
        ]
    )
    session.add_all(
        [
            Client(id="client-1", name="Carla", birth_date=date(1990, 1, 15), loyalty_points=0),
            Client(id="client-2", name="Diego", birth_date=date(1985, 6, 2), loyalty_points=0),
        ]
    )
    session.add_all(
        [
            PaymentMethod(id="pix", name="PIX", active=True),
            PaymentMethod(id="old-card", name="Old card", active=False),
        ]
    )
    session.add_all(
        [
            ClientPackage(
                id="pkg-1",
                client_id="client-1",
                name="Haircut x2",
                purchase_date=date(2029, 12, 1),
                expiration_date=date(2099, 12, 31),
                remaining_items={"cut": 1, "nails": 0},
            ),
            ClientPackage(
                id="pkg-expired",
                client_id="client-1",
                name="Old haircut pack",
                purchase_date=date(1999, 1, 1),
                expiration_date=date(2000, 1, 1),
                remaining_items={"cut": 5},
            ),
        ]
    )
    session.commit()


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    seed_catalog(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    from salon.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def file_sessions(tmp_path):
    """Session factory over a file-backed SQLite database, for multi-threaded tests"""
    file_engine = build_engine(f"sqlite:///{tmp_path / 'salon.db'}")
    Base.metadata.create_all(bind=file_engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=file_engine)
    session = factory()
    seed_catalog(session)
    session.close()
    try:
        yield factory
    finally:
        file_engine.dispose()
