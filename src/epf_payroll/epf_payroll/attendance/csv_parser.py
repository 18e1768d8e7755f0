from __future__ import annotations

import re
from typing import Iterable

from ..common.datetime_utils import period_end_moment, prior_month_cutoff, parse_timestamp, to_iso_z
from ..common.validators import require_period
from ..core.enums import IdentifierType
from ..core.exceptions import CsvFormatError
from ..employees.model import Employee
from .model import CsvEntry, CsvParseResult, AttendanceWarning

_TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$")


def _detect_identifier_type(header: str) -> IdentifierType:
    lowered = header.strip().lower()
    if lowered.startswith("employee,"):
        return IdentifierType.EMPLOYEE_ID
    if lowered.startswith("memberno,"):
        return IdentifierType.MEMBER_NO
    raise CsvFormatError(1, "header must start with 'employee,' or 'memberno,'")


def _identifier_of(employee: Employee, identifier_type: IdentifierType) -> str:
    if identifier_type == IdentifierType.MEMBER_NO:
        return str(employee.member_no)
    return employee.employee_id


class InOutCsvParser:
    """Parse and validate attendance CSV text.

    Format: a header line starting with ``employee,`` or ``memberno,``
    (case-insensitive), then ``identifier,YYYY-MM-DDTHH:mm:ss`` rows. The
    first malformed row aborts parsing with its 1-based line number; period
    and roster findings are returned as warnings.
    """

    def parse(self, text: str, *, period: str, roster: Iterable[Employee]) -> CsvParseResult:
        period = require_period(period)
        lines = (text or "").lstrip("\ufeff").splitlines()
        if not lines or not lines[0].strip():
            raise CsvFormatError(1, "missing header line")

        identifier_type = _detect_identifier_type(lines[0])
        entries = [self._parse_row(line_no, line, identifier_type) for line_no, line in self._data_lines(lines)]

        active = {_identifier_of(e, identifier_type): e for e in roster if e.active}
        warnings = self._period_warnings(entries, period) + self._roster_warnings(entries, active)
        resolved = {entry.identifier: active[entry.identifier].employee_id for entry in entries if entry.identifier in active}
        return CsvParseResult(
            identifier_type=identifier_type,
            entries=tuple(entries),
            warnings=tuple(warnings),
            resolved=resolved,
        )

    @staticmethod
    def _data_lines(lines: list[str]):
        for index, line in enumerate(lines[1:], start=2):
            if line.strip():
                yield index, line

    @staticmethod
    def _parse_row(line_no: int, line: str, identifier_type: IdentifierType) -> CsvEntry:
        parts = [p.strip() for p in line.split(",")]
        if len(parts) < 2:
            raise CsvFormatError(line_no, "expected 'identifier,timestamp'")
        identifier, raw_ts = parts[0], parts[1]
        if not identifier:
            raise CsvFormatError(line_no, "identifier is empty")
        if not _TIMESTAMP.match(raw_ts):
            raise CsvFormatError(line_no, f"timestamp {raw_ts!r} must match YYYY-MM-DDTHH:mm:ss")
        try:
            timestamp = parse_timestamp(raw_ts)
        except ValueError:
            raise CsvFormatError(line_no, f"timestamp {raw_ts!r} is not a valid date/time")
        return CsvEntry(line_no=line_no, identifier=identifier, timestamp=timestamp, identifier_type=identifier_type)

    @staticmethod
    def _period_warnings(entries: list[CsvEntry], period: str) -> list[AttendanceWarning]:
        end = period_end_moment(period)
        cutoff = prior_month_cutoff(period)
        warnings = []
        for entry in entries:
            if entry.timestamp > end:
                warnings.append(
                    AttendanceWarning(
                        code="after_period",
                        message=f"{to_iso_z(entry.timestamp)} is after the end of {period}",
                        line_no=entry.line_no,
                        identifier=entry.identifier,
                    )
                )
            elif entry.timestamp < cutoff:
                warnings.append(
                    AttendanceWarning(
                        code="before_prior_month",
                        message=f"{to_iso_z(entry.timestamp)} is before {cutoff:%Y-%m-%d}",
                        line_no=entry.line_no,
                        identifier=entry.identifier,
                    )
                )
        return warnings

    @staticmethod
    def _roster_warnings(entries: list[CsvEntry], active: dict[str, Employee]) -> list[AttendanceWarning]:
        warnings = []
        seen = {entry.identifier for entry in entries}
        for identifier, employee in active.items():
            if identifier not in seen:
                warnings.append(
                    AttendanceWarning(
                        code="employee_missing",
                        message=f"No attendance for active employee {employee.name} ({identifier})",
                        identifier=identifier,
                    )
                )
        unknown = []
        for entry in entries:
            if entry.identifier not in active and entry.identifier not in unknown:
                unknown.append(entry.identifier)
        for identifier in unknown:
            warnings.append(
                AttendanceWarning(
                    code="unknown_identifier",
                    message=f"{identifier} does not match any active employee",
                    identifier=identifier,
                )
            )
        return warnings
