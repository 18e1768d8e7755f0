from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable


@dataclass(frozen=True)
class PairingResult:
    pairs: tuple[tuple[datetime, datetime], ...]
    unpaired: tuple[datetime, ...]


def pair_punches(punches: Iterable[datetime], *, max_span_hours: int) -> PairingResult:
    """Pair sorted punches into (in, out).

    A punch pairs with the next one when that one is strictly later and no
    more than ``max_span_hours`` away; otherwise it is left unpaired.
    Duplicate timestamps are collapsed.
    """
    ordered = sorted(set(punches))
    max_span = timedelta(hours=max_span_hours)
    pairs = []
    unpaired = []
    i = 0
    while i < len(ordered):
        current = ordered[i]
        if i + 1 < len(ordered) and ordered[i + 1] - current <= max_span:
            pairs.append((current, ordered[i + 1]))
            i += 2
            continue
        unpaired.append(current)
        i += 1
    return PairingResult(pairs=tuple(pairs), unpaired=tuple(unpaired))
