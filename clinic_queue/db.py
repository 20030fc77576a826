"""
db.py
=====
Engine and session management for the clinic queue database.
The SQLite file location comes from CLINIC_DB (default data/clinic.db).
"""

import os
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

DB_PATH = os.getenv("CLINIC_DB", "data/clinic.db")


def build_engine(db_path: str = DB_PATH):
    """SQLite engine for db_path, creating the parent directory when needed."""
    db_dir = os.path.dirname(db_path)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)
    # sessions are handed across FastAPI's worker threads
    return create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})


engine = build_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """FastAPI dependency: one session per request, always closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope():
    """Session for work outside a request (startup seeding)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(Base, bind=None):
    """Create any missing tables. Called once on startup."""
    Base.metadata.create_all(bind=bind or engine)
