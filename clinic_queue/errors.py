"""
errors.py
=========
Domain exceptions raised by the triage core and persistence layer.
The API layer maps them onto HTTP status codes in main.py.
"""


class ClinicQueueError(Exception):
    """Base class for every rejection raised by this package."""


class ValidationError(ClinicQueueError):
    """Missing or out-of-range field (empty symptoms, bad age, unknown department...)."""


class InvalidInput(ValidationError):
    """Raised by the triage scorer for an unusable symptom list."""


class DuplicateName(ClinicQueueError):
    """A symptom or doctor with the same normalized name already exists."""


class DuplicateToken(ClinicQueueError):
    """A token number collided with an existing one."""


class NotFound(ClinicQueueError):
    """Referenced token or doctor does not exist."""
