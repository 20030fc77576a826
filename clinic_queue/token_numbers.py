"""
token_numbers.py
================
Human-readable token numbers: '#' + hour letter + running sequence,
e.g. '#J0042' for the 42nd token, issued between 09:00 and 09:59.
"""

import datetime
import threading
from typing import Optional

from sqlalchemy.orm import Session

from .repository import count_all_tokens

# Held from the token count until the new token is committed so that
# concurrent intakes in this process never read the same count.
issue_lock = threading.Lock()


def hour_letter(hour: int) -> str:
    return chr(ord("A") + hour % 24)


def format_token_number(hour: int, sequence: int) -> str:
    return f"#{hour_letter(hour)}{sequence:04d}"


def next_token_number(db: Session, now: Optional[datetime.datetime] = None) -> str:
    """Next number in the global sequence (all departments, all days)."""
    now = now or datetime.datetime.now()
    return format_token_number(now.hour, count_all_tokens(db) + 1)
