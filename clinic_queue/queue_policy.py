"""
queue_policy.py
===============
Service order for a department queue: highest priority score first,
earliest arrival first among equal scores.
"""

import heapq
from typing import Dict, Iterable, List, Optional

from .models import Department, Token, TokenStatus


def service_key(token: Token):
    """Sort key: score descending, then creation time, then id."""
    return (-token.priority_score, token.created_at, token.id or 0)


def service_order(tokens: Iterable[Token]) -> List[Token]:
    """Waiting tokens in the order they should be seen."""
    return sorted(
        (t for t in tokens if t.status == TokenStatus.waiting),
        key=service_key,
    )


def department_board(tokens: Iterable[Token], department: Department) -> Dict[str, List[Token]]:
    """
    Partition one department's tokens by status. Only the waiting bucket is
    priority ordered; in-progress and completed keep creation order.
    """
    mine = sorted(
        (t for t in tokens if t.department == department),
        key=lambda t: (t.created_at, t.id or 0),
    )
    return {
        "waiting": service_order(mine),
        "in_progress": [t for t in mine if t.status == TokenStatus.in_progress],
        "completed": [t for t in mine if t.status == TokenStatus.completed],
    }


class WaitingQueue:
    """
    Heap of waiting tokens that pops them in service order.
    Entries are (-score, created_at, insertion counter, token).
    """

    def __init__(self, tokens: Iterable[Token] = ()):
        self._heap = []
        self._counter = 0
        for token in tokens:
            self.push(token)

    def push(self, token: Token) -> None:
        self._counter += 1
        heapq.heappush(
            self._heap,
            (-token.priority_score, token.created_at, self._counter, token),
        )

    def pop(self) -> Optional[Token]:
        if not self._heap:
            return None
        return heapq.heappop(self._heap)[-1]

    def peek(self) -> Optional[Token]:
        return self._heap[0][-1] if self._heap else None

    def __len__(self) -> int:
        return len(self._heap)
