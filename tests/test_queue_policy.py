"""
test_queue_policy.py
====================
Service ordering and per-department status partitioning.
"""

import datetime

from clinic_queue.models import Department, Token, TokenStatus
from clinic_queue.queue_policy import WaitingQueue, department_board, service_order

T0 = datetime.datetime(2024, 3, 14, 9, 0)


def make_token(id, score, minutes=0, department=Department.general,
               status=TokenStatus.waiting):
    return Token(
        id=id,
        token=f"#J{id:04d}",
        priority_score=score,
        department=department,
        status=status,
        created_at=T0 + datetime.timedelta(minutes=minutes),
    )


def test_highest_score_first():
    tokens = [make_token(1, 3), make_token(2, 9), make_token(3, 5)]
    assert [t.id for t in service_order(tokens)] == [2, 3, 1]


def test_equal_scores_served_by_arrival():
    tokens = [make_token(1, 5, minutes=10), make_token(2, 5, minutes=2), make_token(3, 5, minutes=5)]
    assert [t.id for t in service_order(tokens)] == [2, 3, 1]


def test_only_waiting_tokens_are_ordered():
    tokens = [
        make_token(1, 10, status=TokenStatus.in_progress),
        make_token(2, 2),
        make_token(3, 8, status=TokenStatus.completed),
    ]
    assert [t.id for t in service_order(tokens)] == [2]


def test_department_board_partitions_by_status():
    tokens = [
        make_token(1, 2, minutes=0),
        make_token(2, 9, minutes=1),
        make_token(3, 7, minutes=2, status=TokenStatus.in_progress),
        make_token(4, 4, minutes=3, status=TokenStatus.completed),
        make_token(5, 10, minutes=4, department=Department.cardiology),
    ]
    board = department_board(tokens, Department.general)

    assert [t.id for t in board["waiting"]] == [2, 1]
    assert [t.id for t in board["in_progress"]] == [3]
    assert [t.id for t in board["completed"]] == [4]


def test_waiting_queue_pops_in_service_order():
    tokens = [make_token(1, 4, minutes=0), make_token(2, 8, minutes=1),
              make_token(3, 4, minutes=2), make_token(4, 8, minutes=3)]
    queue = WaitingQueue(tokens)

    assert len(queue) == 4
    assert queue.peek().id == 2
    assert [queue.pop().id for _ in range(4)] == [2, 4, 1, 3]
    assert queue.pop() is None
    assert queue.peek() is None
