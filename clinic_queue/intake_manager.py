"""
intake_manager.py
=================
This module handles the intake workflow:
 - Validates a patient registration
 - Scores symptoms and derives the urgency tier
 - Estimates the wait from the current department queue
 - Binds the preferred doctor when possible
 - Issues the token number and persists the token
It also owns token status changes and "call next patient".
"""

import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy import update
from sqlalchemy.orm import Session

from . import repository
from .assignment import resolve_preferred_doctor
from .errors import NotFound, ValidationError
from .logger import get_logger
from .models import (
    Department, Gender, Token, TokenStatus, STATUS_ORDER
)
from .queue_policy import WaitingQueue
from .token_numbers import issue_lock, next_token_number
from .triage import (
    assign_urgency_tier, calculate_priority, estimate_wait_time, normalize_symptom
)

logger = get_logger(__name__)

MIN_AGE, MAX_AGE = 0, 120


def _parse_gender(value) -> Gender:
    try:
        return Gender(value)
    except ValueError:
        raise ValidationError(f"Unknown gender: {value!r}") from None


def _parse_status(value) -> TokenStatus:
    try:
        return TokenStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown status: {value!r}") from None


# ---------------------------------------------------------------------------
# PATIENT INTAKE
# ---------------------------------------------------------------------------

def register_patient(db: Session, name: str, age: int, gender, department,
                     symptoms: Sequence[str], preferred_doctor: Optional[str] = None,
                     now: Optional[datetime.datetime] = None) -> Token:
    """
    Register a patient and issue their queue token.
    Steps:
      1. Validate every field (nothing is written on failure)
      2. Score symptoms and classify the urgency tier
      3. Estimate the wait from the department's waiting count
      4. Resolve the preferred doctor (soft fallback to unassigned)
      5. Generate the token number and commit token + doctor counters together
    """
    now = now or datetime.datetime.now()

    # 1. Validation
    if not name or not name.strip():
        raise ValidationError("Patient name is required")
    if not isinstance(age, int) or not MIN_AGE <= age <= MAX_AGE:
        raise ValidationError(f"Age must be between {MIN_AGE} and {MAX_AGE}")
    gender = _parse_gender(gender)
    department = repository.parse_department(department)
    if not symptoms:
        raise ValidationError("At least one symptom is required")

    # 2. Triage
    catalog = repository.load_symptom_catalog(db)
    score = calculate_priority(symptoms, catalog)
    tier = assign_urgency_tier(score)
    logger.info("Triage for %s: score=%d tier=%s", name, score, tier.value)

    with issue_lock:
        # 3. Wait estimate from the queue as it stands right now
        queue_depth = repository.count_waiting_tokens(db, department)
        wait = estimate_wait_time(queue_depth, department)

        # 4. Preferred doctor
        try:
            doctor = resolve_preferred_doctor(db, preferred_doctor, now)

            # 5. Token
            token = Token(
                token=next_token_number(db, now),
                name=name.strip(),
                age=age,
                gender=gender,
                department=department,
                symptoms=[normalize_symptom(s) for s in symptoms],
                priority_score=score,
                urgency=tier,
                status=TokenStatus.waiting,
                estimated_wait_minutes=wait,
                doctor_id=doctor.id if doctor else None,
                created_at=now,
            )
        except Exception:
            db.rollback()
            raise
        token = repository.create_token(db, token)

    logger.info(
        "Issued token %s: %s queue depth=%d wait=%d min doctor=%s",
        token.token, department.value, queue_depth, wait,
        doctor.name if doctor else "-",
    )
    return token


# ---------------------------------------------------------------------------
# STATUS CHANGES
# ---------------------------------------------------------------------------

def update_token_status(db: Session, token_id: int, status) -> Token:
    """
    Move a token forward through waiting -> in-progress -> completed.
    Setting the current status again is a no-op; moving backwards is rejected.
    """
    new_status = _parse_status(status)
    token = repository.get_token(db, token_id)
    if token.status == new_status:
        return token

    allowed_from = [s for s, pos in STATUS_ORDER.items() if pos < STATUS_ORDER[new_status]]
    result = db.execute(
        update(Token)
        .where(Token.id == token_id, Token.status.in_(allowed_from))
        .values(status=new_status, updated_at=datetime.datetime.now())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        db.refresh(token)
        if token.status == new_status:
            return token
        logger.warning("Rejected status change for token %s: %s -> %s",
                       token.token, token.status.value, new_status.value)
        raise ValidationError(
            f"Cannot move token from '{token.status.value}' to '{new_status.value}'"
        )
    db.commit()
    db.refresh(token)
    logger.info("Token %s is now %s", token.token, token.status.value)
    return token


def call_next_patient(db: Session, department) -> Token:
    """Start the consultation for the first waiting token in service order."""
    department = repository.parse_department(department)
    waiting = db.query(Token).filter(
        Token.department == department,
        Token.status == TokenStatus.waiting,
    ).order_by(Token.id).all()

    queue = WaitingQueue(waiting)
    while len(queue):
        token = queue.pop()
        try:
            return update_token_status(db, token.id, TokenStatus.in_progress)
        except ValidationError:
            # taken by a concurrent caller; try the next one
            continue
    raise NotFound(f"No patients waiting in {department.value}")


def waiting_counts(db: Session) -> Dict[str, int]:
    """Number of waiting tokens per department, every department included."""
    return {
        dept.value: repository.count_waiting_tokens(db, dept)
        for dept in Department
    }


def department_tokens(db: Session, department) -> List[Token]:
    department = repository.parse_department(department)
    return db.query(Token).filter(Token.department == department).all()
