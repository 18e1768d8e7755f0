from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import OtMethod
from .strategies.base import HoursStrategy
from .strategies.calc_strategy import CalcStrategy
from .strategies.no_ot_strategy import NoOtStrategy
from .strategies.random_strategy import RandomStrategy


@dataclass
class HoursStrategyFactory:
    """Factory Pattern: choose the hours strategy for an OT method."""

    def for_method(self, ot_method: OtMethod) -> HoursStrategy:
        if ot_method == OtMethod.NO_OT:
            return NoOtStrategy()
        if ot_method == OtMethod.CALC:
            return CalcStrategy()
        return RandomStrategy()
