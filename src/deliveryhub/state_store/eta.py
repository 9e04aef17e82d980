"""EtaScheduler - projected completion dates for open tickets."""

from __future__ import annotations

import heapq
import math
from collections.abc import Sequence
from datetime import date, timedelta

from deliveryhub.stages import Stage
from deliveryhub.tickets import ETAProjection, ETAResult, Ticket, priority_rank

CLOSED_STAGES = frozenset({Stage.DONE, Stage.CANCELLED, Stage.DEPLOYED_TO_PROD})
DEFAULT_SIZE_DAYS = 1.0


def add_business_days(start: date, days: int) -> date:
    """The date ``days`` working days after ``start``, skipping weekends."""
    current = start
    remaining = days
    while remaining > 0:
        current += timedelta(days=1)
        if current.weekday() < 5:
            remaining -= 1
    return current


class EtaScheduler:
    """Greedy scheduler spreading open tickets over ``dev_count`` developers.

    Tickets are taken in order (prioritized ids first, then priority, then
    sort order) and each goes to the developer with the least booked work.
    """

    def __init__(self, today: date | None = None) -> None:
        self._today = today

    @property
    def today(self) -> date:
        return self._today or date.today()

    def project(
        self,
        tickets: Sequence[Ticket],
        dev_count: int,
        prioritized_ids: Sequence[str] | None = None,
    ) -> ETAResult:
        """Schedule ``tickets`` and report which ones prioritization delayed.

        Raises:
            ValueError: If ``dev_count`` is less than 1.
        """
        if dev_count < 1:
            raise ValueError(f"dev_count must be at least 1, got {dev_count}")

        prioritized = list(dict.fromkeys(prioritized_ids or ()))
        etas = self._schedule(tickets, dev_count, prioritized)
        pushed_back: list[str] = []
        if prioritized:
            baseline = self._schedule(tickets, dev_count, [])
            pushed_back = [tid for tid, eta in etas.items() if eta > baseline[tid]]

        return ETAResult(
            tickets=[ETAProjection(ticket_id=tid, calculated_eta=eta) for tid, eta in etas.items()],
            pushed_back=pushed_back,
        )

    def _schedule(
        self, tickets: Sequence[Ticket], dev_count: int, prioritized: list[str]
    ) -> dict[str, date]:
        rank = {tid: i for i, tid in enumerate(prioritized)}
        open_tickets = [t for t in tickets if t.is_active and t.stage not in CLOSED_STAGES]
        ordered = sorted(
            open_tickets,
            key=lambda t: (
                rank.get(t.id, len(rank)),
                priority_rank(t.priority),
                t.sort_order if t.sort_order is not None else math.inf,
            ),
        )

        # (booked days, developer index)
        loads = [(0.0, i) for i in range(dev_count)]
        heapq.heapify(loads)
        etas: dict[str, date] = {}
        for ticket in ordered:
            booked, dev = heapq.heappop(loads)
            size = ticket.developer_days_size or DEFAULT_SIZE_DAYS
            booked += size
            etas[ticket.id] = add_business_days(self.today, math.ceil(booked))
            heapq.heappush(loads, (booked, dev))
        return etas
