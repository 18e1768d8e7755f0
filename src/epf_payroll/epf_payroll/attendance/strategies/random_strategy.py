from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Sequence

from ...employees.model import Probabilities
from ...shifts.resolver import DayContext
from .calc_strategy import CalcStrategy

OT_MINUTES_CHOICES = (30, 60, 90, 120, 150, 180)


def _chance(rng: random.Random, percent: float) -> bool:
    return rng.random() * 100 < percent


class RandomStrategy(CalcStrategy):
    """Simulated attendance for companies without attendance hardware.

    Each day of the period is drawn with the employee's probabilities; the
    simulated pairs are then valued like measured ones. Reproducible when the
    injected ``random.Random`` is seeded.
    """

    requires_attendance = False
    simulates = True

    def simulate_pairs(
        self,
        *,
        days: Sequence[DayContext],
        probabilities: Probabilities,
        rng: random.Random,
    ) -> list[tuple[datetime, datetime]]:
        pairs = []
        for day in days:
            if day.is_holiday:
                works = _chance(rng, probabilities.work_on_holiday)
            elif not day.expects_work:
                works = _chance(rng, probabilities.work_on_off)
            else:
                works = not _chance(rng, probabilities.absent)
            if not works:
                continue

            start = day.expected_start or day.shift_start
            end = day.expected_end or day.shift_end
            in_time = start - timedelta(minutes=rng.randint(0, 15))
            out_time = end + timedelta(minutes=rng.randint(0, 10))
            if day.expects_work and _chance(rng, probabilities.late):
                in_time = start + timedelta(minutes=rng.randint(5, 60))
            if day.expects_work and _chance(rng, probabilities.ot):
                out_time = end + timedelta(minutes=rng.choice(OT_MINUTES_CHOICES))
            pairs.append((in_time, out_time))
        return pairs
