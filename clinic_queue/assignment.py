"""
assignment.py
=============
Preferred-doctor routing:
 - name normalization at the request boundary
 - lazy daily reset of the preference counter
 - best-effort binding of a token to an available doctor
"""

import datetime
import re
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from .logger import get_logger
from .models import Doctor

logger = get_logger(__name__)

NO_PREFERENCE = "no-preference"

_HONORIFIC = re.compile(r"^\s*dr\.?\s+|^\s*dr\.", re.IGNORECASE)


def strip_honorific(name: str) -> str:
    """'Dr. Sarah  Johnson' -> 'Sarah Johnson'."""
    return " ".join(_HONORIFIC.sub("", name or "").split())


def doctor_name_key(name: str) -> str:
    """Lookup key for a doctor: honorific removed, whitespace collapsed, lowercased."""
    return strip_honorific(name).lower()


def wants_preferred_doctor(preferred: Optional[str]) -> bool:
    if preferred is None:
        return False
    value = preferred.strip()
    return bool(value) and value.lower() != NO_PREFERENCE


def reset_preference_count_if_stale(doctor: Doctor, now: Optional[datetime.datetime] = None) -> bool:
    """
    Zero the daily preference counter when the stored reset date is not
    today. Compares calendar day, month and year, not elapsed time.
    Returns True when the counter was reset.
    """
    now = now or datetime.datetime.now()
    last = doctor.last_reset_date
    if last is not None and (last.day, last.month, last.year) == (now.day, now.month, now.year):
        return False
    doctor.preference_count_today = 0
    doctor.last_reset_date = now
    return True


def resolve_preferred_doctor(db: Session, preferred: Optional[str],
                             now: Optional[datetime.datetime] = None) -> Optional[Doctor]:
    """
    Bind to the requested doctor when they exist and are available.

    Returns the doctor after incrementing their queue length and daily
    preference count by one, or None (no mutation) when there is no
    preference, the name is unknown, or the doctor is unavailable.
    Changes are flushed but not committed: the caller commits them
    together with the token that references the doctor.
    """
    if not wants_preferred_doctor(preferred):
        return None

    key = doctor_name_key(preferred)
    doctor = db.query(Doctor).filter(Doctor.name_key == key).one_or_none()
    if doctor is None:
        logger.info("Preferred doctor %r not found, token stays unassigned", preferred)
        return None
    if not doctor.is_available:
        logger.info("Preferred doctor %s is unavailable, token stays unassigned", doctor.name)
        return None

    if reset_preference_count_if_stale(doctor, now):
        db.flush()

    # Conditional increment: the availability check and the counter update
    # happen in one statement.
    result = db.execute(
        update(Doctor)
        .where(Doctor.id == doctor.id, Doctor.is_available.is_(True))
        .values(
            current_queue_length=Doctor.current_queue_length + 1,
            preference_count_today=Doctor.preference_count_today + 1,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.info("Doctor %s became unavailable during assignment", doctor.name)
        return None

    db.refresh(doctor)
    logger.info(
        "Assigned doctor %s (queue=%d, preferred today=%d)",
        doctor.name, doctor.current_queue_length, doctor.preference_count_today,
    )
    return doctor
