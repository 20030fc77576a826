"""
models.py
=========
SQLAlchemy ORM models for the clinic intake and triage queue.
Contains tables for:
 - Symptom  (urgency weight catalog)
 - Doctor   (availability + load counters)
 - Token    (one patient's intake record and queue ticket)
"""

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Enum
)
from sqlalchemy.orm import declarative_base
import datetime
import enum

# SQLAlchemy Base class
Base = declarative_base()

# ---------------------------------------------------------------------------
# ENUM DEFINITIONS
# ---------------------------------------------------------------------------

class Department(str, enum.Enum):
    """Closed set of clinical departments a token can queue in."""
    general = "General"
    cardiology = "Cardiology"
    neurology = "Neurology"
    orthopedics = "Orthopedics"
    pediatrics = "Pediatrics"


class Gender(str, enum.Enum):
    male = "Male"
    female = "Female"
    other = "Other"


class UrgencyTier(str, enum.Enum):
    """Coarse urgency bucket derived from the triage score."""
    critical = "Critical"
    moderate = "Moderate"
    low = "Low"


class TokenStatus(str, enum.Enum):
    """Token lifecycle. Transitions only move forward."""
    waiting = "waiting"
    in_progress = "in-progress"
    completed = "completed"


# Position of each status in the forward-only lifecycle
STATUS_ORDER = {
    TokenStatus.waiting: 0,
    TokenStatus.in_progress: 1,
    TokenStatus.completed: 2,
}


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


def _now():
    return datetime.datetime.now()


# ---------------------------------------------------------------------------
# TABLE DEFINITIONS
# ---------------------------------------------------------------------------

class Symptom(Base):
    """Symptom name (lowercased, unique) and its urgency weight 1-10."""
    __tablename__ = "symptoms"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    weight = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_now)


class Doctor(Base):
    """Stores doctor profile, availability and daily load counters."""
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    # lowercased, honorific-free name used for exact lookups
    name_key = Column(String, nullable=False, unique=True)
    department = Column(Enum(Department, values_callable=_enum_values), nullable=False)
    specialization = Column(String, nullable=False)
    max_patients_per_hour = Column(Integer, nullable=False)
    current_queue_length = Column(Integer, nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)
    preference_count_today = Column(Integer, nullable=False, default=0)
    last_reset_date = Column(DateTime, nullable=False, default=_now)


class Token(Base):
    """Tracks one patient's triage result, queue status and optional doctor."""
    __tablename__ = "tokens"

    id = Column(Integer, primary_key=True)
    token = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(Enum(Gender, values_callable=_enum_values), nullable=False)
    department = Column(Enum(Department, values_callable=_enum_values), nullable=False, index=True)
    symptoms = Column(JSON, nullable=False)
    priority_score = Column(Integer, nullable=False, default=1)
    urgency = Column(Enum(UrgencyTier, values_callable=_enum_values), nullable=False, default=UrgencyTier.low)
    status = Column(
        Enum(TokenStatus, values_callable=_enum_values),
        nullable=False,
        default=TokenStatus.waiting,
        index=True,
    )
    estimated_wait_minutes = Column(Integer, nullable=False, default=0)
    # weak reference: looked up by id, never loaded through the token
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=_now)
    updated_at = Column(DateTime, default=_now, onupdate=_now)