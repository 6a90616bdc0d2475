"""
Pytest configuration and fixtures.

Tests run against an in-memory SQLite database created per test, with a
seeded business and a clock pinned to Monday 2026-11-02 08:00 UTC.
"""
import os

# Must be set before booking_api builds its engine and settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import date, datetime, time
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from booking_api.config.database import get_db
from booking_api.core.clock import FixedClock, get_clock
from booking_api.main import app
from booking_api.models import Base, BookingPolicy, Business, BusinessHours, Service
from booking_api.schemas.appointment import AppointmentCreateRequest
from booking_api.services.appointment.appointment_service import AppointmentService
from booking_api.services.availability.availability_service import AvailabilityService

NOW = datetime(2026, 11, 2, 8, 0)  # Monday

MONDAY = date(2026, 11, 2)
TUESDAY = date(2026, 11, 3)
WEDNESDAY = date(2026, 11, 4)
SATURDAY = date(2026, 11, 7)
SUNDAY = date(2026, 11, 8)


def seed_business(db, name="Test Salon", timezone="UTC", with_schedule=True):
    business = Business(name=name, timezone=timezone)
    db.add(business)
    db.flush()

    if with_schedule:
        for dow in range(7):
            is_open = 1 <= dow <= 5
            db.add(BusinessHours(
                business_id=business.id,
                day_of_week=dow,
                is_open=is_open,
                open_time=time(9, 0) if is_open else None,
                close_time=time(17, 0) if is_open else None,
            ))
        db.add(BookingPolicy(
            business_id=business.id,
            default_duration=30,
            buffer_time=10,
            max_advance_booking_days=30,
            min_advance_booking_hours=2,
            allow_same_day_booking=True,
        ))

    db.commit()
    db.refresh(business)
    return business


@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def business(db):
    """Open Mon-Fri 09:00-17:00, 30 minute default, 10 minute buffer"""
    return seed_business(db)


@pytest.fixture
def bare_business(db):
    """A business with no hours or policy stored yet"""
    return seed_business(db, name="New Studio", with_schedule=False)


@pytest.fixture
def service(db, business):
    svc = Service(business_id=business.id, name="Haircut", price=Decimal("45.00"))
    db.add(svc)
    db.commit()
    db.refresh(svc)
    return svc


@pytest.fixture
def long_service(db, business):
    svc = Service(business_id=business.id, name="Colouring", price=Decimal("120.00"), duration=60)
    db.add(svc)
    db.commit()
    db.refresh(svc)
    return svc


@pytest.fixture
def availability_service(db, clock):
    return AvailabilityService(db, clock)


@pytest.fixture
def appointment_service(db, clock):
    return AppointmentService(db, clock)


@pytest.fixture
def book(appointment_service, business, service):
    """Book on the seeded business: book(TUESDAY, "10:00", duration=...)"""
    def _book(day, start_time, **kwargs):
        request = AppointmentCreateRequest(
            client_id=kwargs.pop("client_id", "client-1"),
            service_id=kwargs.pop("service_id", service.id),
            date=day,
            start_time=start_time,
            **kwargs
        )
        return appointment_service.create_appointment(business.id, request)
    return _book


@pytest.fixture
def client(db, clock):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
