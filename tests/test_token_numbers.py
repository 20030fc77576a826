"""
test_token_numbers.py
=====================
Token number format and sequencing.
"""

import datetime

from clinic_queue.intake_manager import register_patient
from clinic_queue.token_numbers import format_token_number, hour_letter, next_token_number


def test_hour_letter():
    assert hour_letter(0) == "A"
    assert hour_letter(9) == "J"
    assert hour_letter(23) == "X"
    assert hour_letter(24) == "A"


def test_format_pads_sequence():
    assert format_token_number(9, 1) == "#J0001"
    assert format_token_number(13, 42) == "#N0042"
    assert format_token_number(0, 12345) == "#A12345"


def test_first_token_number(db, now):
    assert next_token_number(db, now) == "#J0001"


def test_sequential_tokens_never_repeat(db, now):
    issued = [
        register_patient(db, f"Patient {i}", 30, "Other", "General", ["headache"], now=now).token
        for i in range(5)
    ]
    assert issued == ["#J0001", "#J0002", "#J0003", "#J0004", "#J0005"]
    assert len(set(issued)) == len(issued)


def test_sequence_runs_across_departments_and_hours(db, now):
    register_patient(db, "A", 30, "Male", "General", ["cough"], now=now)
    later = now + datetime.timedelta(hours=5)
    token = register_patient(db, "B", 30, "Female", "Neurology", ["cough"], now=later)
    assert token.token == "#O0002"
