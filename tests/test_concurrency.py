"""Concurrent bookings against a file-backed SQLite database"""

import threading
from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from agenda.database import Base, begin_write, create_db_engine
from agenda.domain.appointments.repository import AppointmentRepository
from agenda.domain.appointments.schemas import AppointmentCreate
from agenda.domain.appointments.service import AppointmentService
from agenda.exceptions import ConflictError
from agenda.models import Appointment, Service, User


@pytest.fixture
def file_session_factory(tmp_path):
    engine = create_db_engine(
        f"sqlite:///{tmp_path / 'agenda.db'}", connect_args={"timeout": 30}
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    finally:
        engine.dispose()


@pytest.fixture
def seeded(file_session_factory):
    with file_session_factory() as db:
        user = User(firebase_uid="owner", email="owner@example.com")
        db.add(user)
        db.commit()
        service = Service(user_id=user.id, name="Haircut", duration=60, price=20)
        db.add(service)
        db.commit()
        return user.id, service.id


def book_concurrently(session_factory, owner_id, requests):
    barrier = threading.Barrier(len(requests))
    results = [None] * len(requests)

    def worker(index, data):
        db = session_factory()
        try:
            barrier.wait()
            results[index] = AppointmentService(db).check_and_create(owner_id, data).id
        except ConflictError as e:
            results[index] = e
        finally:
            db.close()

    threads = [threading.Thread(target=worker, args=(i, data)) for i, data in enumerate(requests)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return results


def request_at(service_id, start, name):
    return AppointmentCreate(
        serviceId=service_id, clientName=name, clientPhone="3001234567", startTime=start
    )


def test_same_slot_is_booked_once(file_session_factory, seeded):
    owner_id, service_id = seeded
    start = datetime(2030, 1, 7, 10, 0)

    results = book_concurrently(
        file_session_factory,
        owner_id,
        [request_at(service_id, start, "Ana"), request_at(service_id, start, "Bruno")],
    )

    winners = [r for r in results if isinstance(r, str)]
    losers = [r for r in results if isinstance(r, ConflictError)]
    assert len(winners) == 1
    assert len(losers) == 1
    assert losers[0].details["conflictingAppointmentId"] == winners[0]

    with file_session_factory() as db:
        assert db.query(Appointment).count() == 1


def test_overlapping_ranges_are_booked_once(file_session_factory, seeded):
    owner_id, service_id = seeded

    results = book_concurrently(
        file_session_factory,
        owner_id,
        [
            request_at(service_id, datetime(2030, 1, 7, 10, 0), "Ana"),
            request_at(service_id, datetime(2030, 1, 7, 10, 30), "Bruno"),
            request_at(service_id, datetime(2030, 1, 7, 9, 30), "Carla"),
        ],
    )

    assert sum(isinstance(r, str) for r in results) == 1
    assert sum(isinstance(r, ConflictError) for r in results) == 2


def test_disjoint_ranges_all_succeed(file_session_factory, seeded):
    owner_id, service_id = seeded

    results = book_concurrently(
        file_session_factory,
        owner_id,
        [request_at(service_id, datetime(2030, 1, 7, hour, 0), f"Client {hour}") for hour in (9, 10, 11)],
    )

    assert all(isinstance(r, str) for r in results)


def test_reads_do_not_wait_on_a_booking_in_progress(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'agenda.db'}", connect_args={"timeout": 1})
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

    with factory() as db:
        owner_a = User(firebase_uid="owner-a", email="a@example.com")
        owner_b = User(firebase_uid="owner-b", email="b@example.com")
        db.add_all([owner_a, owner_b])
        db.commit()
        owner_a_id, owner_b_id = owner_a.id, owner_b.id

    writer, reader, second_writer = factory(), factory(), factory()
    try:
        begin_write(writer)
        AppointmentRepository.lock_owner(writer, owner_a_id)

        appointments = AppointmentService(reader)
        assert appointments.list_appointments(owner_b_id) == []
        slots = appointments.day_slots(owner_b_id, datetime(2030, 1, 7).date(), 60)
        assert len(slots) == 10
        reader.commit()

        # Writers still queue behind the open booking
        with pytest.raises(OperationalError):
            begin_write(second_writer)
    finally:
        writer.rollback()
        for session in (writer, reader, second_writer):
            session.close()
        engine.dispose()
