from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .constants import (
    CBSL_REFERENCE_URL,
    DEFAULT_ETF_RATE,
    DEFAULT_MAX_SHIFT_SPAN_HOURS,
    DEFAULT_OT_MULTIPLIER,
)
from .enums import ShiftSelection


@dataclass(frozen=True)
class EngineSettings:
    """Tunables of the computation engine, built once from the settings module."""

    etf_rate: Decimal = DEFAULT_ETF_RATE
    ot_multiplier: Decimal = DEFAULT_OT_MULTIPLIER
    shift_selection: ShiftSelection = ShiftSelection.NEAREST_START
    random_seed: Optional[str] = None
    max_shift_span_hours: int = DEFAULT_MAX_SHIFT_SPAN_HOURS
    max_workers: int = 4
    timeout_base_seconds: float = 10.0
    timeout_per_employee_seconds: float = 0.5
    reference_lookup_url: str = CBSL_REFERENCE_URL
    reference_lookup_timeout: float = 15.0

    def generation_timeout(self, employee_count: int) -> float:
        return self.timeout_base_seconds + self.timeout_per_employee_seconds * max(int(employee_count), 0)

    @classmethod
    def from_module(cls, settings) -> "EngineSettings":
        seed = getattr(settings, "RANDOM_SEED", None)
        return cls(
            etf_rate=Decimal(str(getattr(settings, "ETF_RATE", DEFAULT_ETF_RATE))),
            ot_multiplier=Decimal(str(getattr(settings, "OT_MULTIPLIER", DEFAULT_OT_MULTIPLIER))),
            shift_selection=ShiftSelection(getattr(settings, "SHIFT_SELECTION", ShiftSelection.NEAREST_START.value)),
            random_seed=str(seed) if seed not in (None, "") else None,
            max_shift_span_hours=int(getattr(settings, "MAX_SHIFT_SPAN_HOURS", DEFAULT_MAX_SHIFT_SPAN_HOURS)),
            max_workers=int(getattr(settings, "GENERATION_MAX_WORKERS", 4)),
            timeout_base_seconds=float(getattr(settings, "GENERATION_TIMEOUT_BASE_SECONDS", 10.0)),
            timeout_per_employee_seconds=float(getattr(settings, "GENERATION_TIMEOUT_PER_EMPLOYEE_SECONDS", 0.5)),
            reference_lookup_url=str(getattr(settings, "REFERENCE_LOOKUP_URL", CBSL_REFERENCE_URL)),
            reference_lookup_timeout=float(getattr(settings, "REFERENCE_LOOKUP_TIMEOUT", 15.0)),
        )
