"""
triage.py
=========
Pure triage functions: symptom list -> priority score -> urgency tier,
and queue depth -> estimated wait. No database access here; callers pass
the symptom catalog in.
"""

from typing import Iterable, Mapping, Union

from .errors import InvalidInput, ValidationError
from .models import Department, UrgencyTier

# Built-in catalog, seeded into the symptoms table on startup
DEFAULT_SYMPTOM_WEIGHTS = {
    "chest pain": 9,
    "shortness of breath": 8,
    "severe bleeding": 10,
    "unconsciousness": 10,
    "high fever": 6,
    "vomiting": 5,
    "mild fever": 4,
    "headache": 3,
    "cough": 2,
    "sore throat": 2,
    "stiff neck": 7,
}

UNKNOWN_SYMPTOM_WEIGHT = 1

# Symptom pairs that override the per-symptom maximum. First match wins.
COMBINATION_OVERRIDES = (
    (frozenset({"fever", "stiff neck"}), 9),
    (frozenset({"cough", "chest pain"}), 8),
)

CRITICAL_THRESHOLD = 8
MODERATE_THRESHOLD = 5

# Department-specific average consultation times (in minutes)
CONSULTATION_MINUTES = {
    Department.general.value: 10,
    Department.cardiology.value: 15,
    Department.neurology.value: 20,
    Department.orthopedics.value: 15,
    Department.pediatrics.value: 12,
}
DEFAULT_CONSULTATION_MINUTES = 15


def normalize_symptom(name: str) -> str:
    """Catalog key for a symptom: trimmed and lowercased."""
    return " ".join(str(name).split()).lower()


def calculate_priority(symptoms: Iterable[str],
                       catalog: Mapping[str, int] = DEFAULT_SYMPTOM_WEIGHTS) -> int:
    """
    Convert a symptom list into an integer priority score.

    Combination overrides are checked first (fever + stiff neck = 9,
    cough + chest pain = 8). Otherwise the score is the highest catalog
    weight among the symptoms, unknown symptoms weighing 1.
    """
    if isinstance(symptoms, str):
        raise InvalidInput("symptoms must be a list of symptom names")

    names = [normalize_symptom(s) for s in symptoms]
    if not names:
        raise InvalidInput("at least one symptom is required")
    if not all(names):
        raise InvalidInput("symptom names must not be blank")

    present = set(names)
    for combination, score in COMBINATION_OVERRIDES:
        if combination <= present:
            return score

    return max(catalog.get(name, UNKNOWN_SYMPTOM_WEIGHT) for name in present)


def assign_urgency_tier(score: int) -> UrgencyTier:
    """Map a priority score onto Critical / Moderate / Low."""
    if score >= CRITICAL_THRESHOLD:
        return UrgencyTier.critical
    if score >= MODERATE_THRESHOLD:
        return UrgencyTier.moderate
    return UrgencyTier.low


def estimate_wait_time(queue_depth: int, department: Union[Department, str]) -> int:
    """
    Estimated minutes until a new token is seen: number of tokens already
    waiting in the department times its average consultation length.
    Unrecognized departments use 15 minutes.
    """
    if queue_depth < 0:
        raise ValidationError("queue depth cannot be negative")
    key = department.value if isinstance(department, Department) else department
    return queue_depth * CONSULTATION_MINUTES.get(key, DEFAULT_CONSULTATION_MINUTES)
