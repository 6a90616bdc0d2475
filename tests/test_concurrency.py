"""
Two clients racing for the same slot against a file-backed SQLite database.

Run with: pytest tests/test_concurrency.py -v
"""
import threading
from datetime import date, datetime, time
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from booking_api.core.clock import FixedClock
from booking_api.core.exceptions import ConflictError
from booking_api.models import Appointment, Base, BookingPolicy, Business, BusinessHours, Service
from booking_api.schemas.appointment import AppointmentCreateRequest
from booking_api.services.appointment.appointment_service import AppointmentService


TUESDAY = date(2026, 11, 3)


def test_only_one_of_two_concurrent_bookings_succeeds(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autoflush=False)

    with Session() as db:
        business = Business(name="Race Salon", timezone="UTC")
        db.add(business)
        db.flush()
        db.add(BusinessHours(business_id=business.id, day_of_week=2, is_open=True,
                             open_time=time(9, 0), close_time=time(17, 0)))
        db.add(BookingPolicy(business_id=business.id, default_duration=30, buffer_time=10,
                             max_advance_booking_days=30, min_advance_booking_hours=2,
                             allow_same_day_booking=True))
        service = Service(business_id=business.id, name="Haircut", price=Decimal("45.00"))
        db.add(service)
        db.commit()
        business_id, service_id = business.id, service.id

    clock = FixedClock(datetime(2026, 11, 2, 8, 0))
    barrier = threading.Barrier(2)
    results = []
    lock = threading.Lock()

    def attempt(client_id):
        with Session() as db:
            booking = AppointmentService(db, clock)
            request = AppointmentCreateRequest(
                client_id=client_id, service_id=service_id, date=TUESDAY, start_time="10:00"
            )
            barrier.wait()
            try:
                appt = booking.create_appointment(business_id, request)
                outcome = ("ok", appt.id)
            except ConflictError as e:
                outcome = ("conflict", e)
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=attempt, args=(f"client-{i}",)) for i in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)

    assert sorted(kind for kind, _ in results) == ["conflict", "ok"]

    with Session() as db:
        stored = db.query(Appointment).filter(Appointment.business_id == business_id).all()
        assert len(stored) == 1

    engine.dispose()
