from __future__ import annotations

from datetime import datetime

from src.epf_payroll.epf_payroll.attendance.pairing import pair_punches


def test_pairs_consecutive_punches():
    punches = [datetime(2024, 3, 4, 17), datetime(2024, 3, 4, 8), datetime(2024, 3, 5, 8), datetime(2024, 3, 5, 17)]

    result = pair_punches(punches, max_span_hours=20)

    assert result.pairs == (
        (datetime(2024, 3, 4, 8), datetime(2024, 3, 4, 17)),
        (datetime(2024, 3, 5, 8), datetime(2024, 3, 5, 17)),
    )
    assert result.unpaired == ()


def test_punch_without_partner_in_span_is_unpaired():
    punches = [datetime(2024, 3, 4, 8), datetime(2024, 3, 5, 8), datetime(2024, 3, 5, 17)]

    result = pair_punches(punches, max_span_hours=20)

    assert result.unpaired == (datetime(2024, 3, 4, 8),)
    assert result.pairs == ((datetime(2024, 3, 5, 8), datetime(2024, 3, 5, 17)),)


def test_duplicate_punches_collapse():
    punches = [datetime(2024, 3, 4, 8), datetime(2024, 3, 4, 8), datetime(2024, 3, 4, 17)]

    result = pair_punches(punches, max_span_hours=20)

    assert len(result.pairs) == 1
    assert result.unpaired == ()


def test_overnight_pair_within_span():
    punches = [datetime(2024, 3, 4, 20), datetime(2024, 3, 5, 6)]

    result = pair_punches(punches, max_span_hours=20)

    assert result.pairs == ((datetime(2024, 3, 4, 20), datetime(2024, 3, 5, 6)),)
