import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite://')

from nexsched.core.clinic import build_clinic_settings  # noqa: E402
from nexsched.database import Base  # noqa: E402
from nexsched.models import appointment, dentist, service  # noqa: E402,F401
from nexsched.repositories.catalog_repository import CatalogRepository  # noqa: E402
from nexsched.services.appointment_service import BookingLocks  # noqa: E402

HOLIDAY = '2026-01-07'


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    factory = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = factory()
    try:
        CatalogRepository.seed_defaults(db)
    finally:
        db.close()
    return factory


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clinic_settings():
    return build_clinic_settings(slot_duration_minutes=30, holidays=[HOLIDAY])


@pytest.fixture
def booking_locks():
    return BookingLocks()
