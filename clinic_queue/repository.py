"""
repository.py
=============
Persistence operations used by the intake workflow and the API:
symptom catalog, doctor roster and token records.
"""

import datetime
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .assignment import doctor_name_key, reset_preference_count_if_stale, strip_honorific
from .errors import DuplicateName, DuplicateToken, NotFound, ValidationError
from .logger import get_logger
from .models import Department, Doctor, Symptom, Token, TokenStatus
from .triage import DEFAULT_SYMPTOM_WEIGHTS, normalize_symptom

logger = get_logger(__name__)

MIN_WEIGHT, MAX_WEIGHT = 1, 10
MIN_PATIENTS_PER_HOUR, MAX_PATIENTS_PER_HOUR = 1, 10


def parse_department(value) -> Department:
    """Department member from a member or its display value ('Cardiology')."""
    try:
        return Department(value)
    except ValueError:
        raise ValidationError(f"Unknown department: {value!r}") from None


# ---------------------------------------------------------------------------
# SYMPTOM CATALOG
# ---------------------------------------------------------------------------

def list_symptoms(db: Session) -> List[Symptom]:
    return db.query(Symptom).order_by(Symptom.weight.desc(), Symptom.name).all()


def load_symptom_catalog(db: Session) -> Dict[str, int]:
    """Symptom name -> weight mapping consumed by the triage scorer."""
    return {name: weight for name, weight in db.query(Symptom.name, Symptom.weight)}


def add_symptom(db: Session, name: str, weight: int) -> Symptom:
    key = normalize_symptom(name or "")
    if not key:
        raise ValidationError("Symptom name is required")
    if not isinstance(weight, int) or not MIN_WEIGHT <= weight <= MAX_WEIGHT:
        raise ValidationError(f"Symptom weight must be between {MIN_WEIGHT} and {MAX_WEIGHT}")
    if db.query(Symptom).filter(Symptom.name == key).first() is not None:
        raise DuplicateName(f"A symptom named '{key}' already exists")

    symptom = Symptom(name=key, weight=weight)
    db.add(symptom)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateName(f"A symptom named '{key}' already exists")
    db.refresh(symptom)
    logger.info("Added symptom %s (weight %d)", key, weight)
    return symptom


def seed_symptom_catalog(db: Session, defaults: Dict[str, int] = DEFAULT_SYMPTOM_WEIGHTS) -> int:
    """Insert any built-in symptoms missing from the table. Returns how many were added."""
    existing = {name for (name,) in db.query(Symptom.name)}
    missing = [Symptom(name=name, weight=weight)
               for name, weight in defaults.items() if name not in existing]
    if missing:
        db.add_all(missing)
        db.commit()
    return len(missing)


# ---------------------------------------------------------------------------
# DOCTORS
# ---------------------------------------------------------------------------

def list_doctors(db: Session, now: Optional[datetime.datetime] = None) -> List[Doctor]:
    """All doctors, including unavailable ones. Applies the lazy daily counter reset."""
    doctors = db.query(Doctor).order_by(Doctor.id).all()
    if any([reset_preference_count_if_stale(d, now) for d in doctors]):
        db.commit()
    return doctors


def get_doctor(db: Session, doctor_id: int) -> Doctor:
    doctor = db.get(Doctor, doctor_id)
    if doctor is None:
        raise NotFound("Doctor not found")
    return doctor


def add_doctor(db: Session, name: str, department, specialization: str,
               max_patients_per_hour: int) -> Doctor:
    clean_name = strip_honorific(name or "")
    if not clean_name:
        raise ValidationError("Doctor name is required")
    dept = parse_department(department)
    if not specialization or not specialization.strip():
        raise ValidationError("Specialization is required")
    if (not isinstance(max_patients_per_hour, int)
            or not MIN_PATIENTS_PER_HOUR <= max_patients_per_hour <= MAX_PATIENTS_PER_HOUR):
        raise ValidationError(
            f"Max patients per hour must be between {MIN_PATIENTS_PER_HOUR} and {MAX_PATIENTS_PER_HOUR}"
        )

    key = doctor_name_key(clean_name)
    if db.query(Doctor).filter(Doctor.name_key == key).first() is not None:
        raise DuplicateName("A doctor with this name already exists")

    doctor = Doctor(
        name=clean_name,
        name_key=key,
        department=dept,
        specialization=specialization.strip(),
        max_patients_per_hour=max_patients_per_hour,
        current_queue_length=0,
        is_available=True,
        preference_count_today=0,
        last_reset_date=datetime.datetime.now(),
    )
    db.add(doctor)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateName("A doctor with this name already exists")
    db.refresh(doctor)
    logger.info("Added doctor %s (%s)", doctor.name, dept.value)
    return doctor


def set_doctor_availability(db: Session, doctor_id: int, is_available: bool,
                            now: Optional[datetime.datetime] = None) -> Doctor:
    doctor = get_doctor(db, doctor_id)
    reset_preference_count_if_stale(doctor, now)
    doctor.is_available = bool(is_available)
    db.commit()
    db.refresh(doctor)
    logger.info("Doctor %s availability set to %s", doctor.name, doctor.is_available)
    return doctor


# ---------------------------------------------------------------------------
# TOKENS
# ---------------------------------------------------------------------------

def count_waiting_tokens(db: Session, department) -> int:
    dept = parse_department(department)
    return db.query(Token).filter(
        Token.department == dept,
        Token.status == TokenStatus.waiting,
    ).count()


def count_all_tokens(db: Session) -> int:
    return db.query(func.count(Token.id)).scalar() or 0


def create_token(db: Session, token: Token) -> Token:
    """
    Persist a token together with any pending doctor counter changes in
    the same session. On a token-number collision everything is rolled back.
    """
    db.add(token)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateToken(f"Token number {token.token} is already in use")
    db.refresh(token)
    return token


def get_token(db: Session, token_id: int) -> Token:
    token = db.get(Token, token_id)
    if token is None:
        raise NotFound("Token not found")
    return token


def list_tokens(db: Session) -> List[Token]:
    """Raw token listing, newest first."""
    return db.query(Token).order_by(Token.created_at.desc(), Token.id.desc()).all()
