"""
conftest.py
===========
Shared fixtures. CLINIC_DB is pointed at a temporary file before the
application modules are imported so tests never touch data/clinic.db.
"""

import os
import sys
import tempfile

_db_dir = tempfile.mkdtemp(prefix="clinic-queue-tests-")
os.environ["CLINIC_DB"] = os.path.join(_db_dir, "test.db")

# Ensure the package is importable when running from a plain checkout
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clinic_queue.models import Base
from clinic_queue.repository import seed_symptom_catalog


@pytest.fixture
def db():
    """In-memory SQLite session with the default symptom catalog loaded."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    seed_symptom_catalog(session)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def now():
    return datetime.datetime(2024, 3, 14, 9, 30)
