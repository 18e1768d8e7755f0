from __future__ import annotations

import logging
import random
from concurrent.futures import ThreadPoolExecutor, wait
from contextlib import ExitStack
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..attendance.csv_parser import InOutCsvParser
from ..attendance.model import AttendanceWarning, CsvParseResult, InOutEvent
from ..calendars.model import HolidayCalendar
from ..calendars.repository import HolidayRepository
from ..common.datetime_utils import period_bounds
from ..common.locks import KeyedLocks, company_period_key, salary_key
from ..common.validators import require_period
from ..companies.access import load_company
from ..companies.model import Company
from ..companies.repository import CompanyRepository
from ..core.context import RequestContext
from ..core.enums import CalendarName, GenerationMode
from ..core.exceptions import ConflictError, DomainError, GenerationTimeoutError, NotFoundError, ValidationError
from ..core.settings import EngineSettings
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..employees.resolution import resolve_employee
from ..purchases.gate import EntitlementGate
from ..shifts.resolver import ShiftResolver
from .aggregator import AggregateResult, SalaryAggregator
from .calculator.base import SalaryCalculator
from .calculator.standard_calculator import StandardSalaryCalculator
from .model import Salary
from .repository import SalaryRepository

logger = logging.getLogger(__name__)

# Fields a user may change on a generated salary; identity fields stay fixed.
EDITABLE_FIELDS = ("basic", "holidayPay", "inOut", "ot", "noPay", "paymentStructure", "advanceAmount", "remark")


@dataclass(frozen=True)
class EmployeeFailure:
    employee_id: str
    message: str
    kind: str

    def to_dict(self) -> dict:
        return {"employeeId": self.employee_id, "message": self.message, "kind": self.kind}


@dataclass(frozen=True)
class GenerationResult:
    salaries: tuple[Salary, ...] = ()
    exists: tuple[str, ...] = ()
    errors: tuple[EmployeeFailure, ...] = ()
    warnings: tuple[AttendanceWarning, ...] = ()

    def to_dict(self) -> dict:
        return {
            "salaries": [s.to_dict() for s in self.salaries],
            "exists": list(self.exists),
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass(frozen=True)
class CommitResult:
    saved: tuple[Salary, ...] = ()
    exists: tuple[str, ...] = ()


@dataclass(frozen=True)
class _Job:
    employee: Employee
    mode: GenerationMode
    punches: Optional[list] = None
    events: Optional[Sequence[InOutEvent]] = None
    existing: Optional[Salary] = None


class SalaryService:
    """Salary generation for a company-period.

    ``preview`` computes without writing; ``commit`` persists with a
    compare-and-insert per (employee, period). ``generate_salaries`` chains the
    two. Employees are computed independently on a thread pool; one employee's
    failure is reported in ``errors`` and the rest of the batch continues.
    """

    def __init__(
        self,
        *,
        companies: CompanyRepository,
        employees: EmployeeRepository,
        salaries: SalaryRepository,
        holidays: HolidayRepository,
        gate: EntitlementGate,
        settings: EngineSettings,
        locks: KeyedLocks | None = None,
        calculator: SalaryCalculator | None = None,
        aggregator: SalaryAggregator | None = None,
        csv_parser: InOutCsvParser | None = None,
    ):
        self._companies = companies
        self._employees = employees
        self._salaries = salaries
        self._holidays = holidays
        self._gate = gate
        self._settings = settings
        self._locks = locks or KeyedLocks()
        self._calculator = calculator or StandardSalaryCalculator()
        self._aggregator = aggregator or SalaryAggregator(
            resolver=ShiftResolver(settings.shift_selection),
            calculator=self._calculator,
            settings=settings,
        )
        self._parser = csv_parser or InOutCsvParser()

    def _get_company(self, ctx: RequestContext, company_id: str) -> Company:
        return load_company(self._companies, ctx, company_id)

    def _load_calendars(self, period: str) -> dict[CalendarName, HolidayCalendar]:
        start, end = period_bounds(period)
        holidays = list(self._holidays.list_range(start=start, end=end))
        return {name: HolidayCalendar.of(name, holidays) for name in CalendarName}

    def _rng_for(self, employee_id: str, period: str) -> random.Random:
        if self._settings.random_seed is None:
            return random.Random()
        return random.Random(f"{self._settings.random_seed}:{employee_id}:{period}")

    def preview(
        self,
        ctx: RequestContext,
        *,
        company_id: str,
        period: str,
        employee_ids: Optional[Iterable[str]] = None,
        in_out_csv: Optional[str] = None,
        update: bool = False,
        existing_salaries: Optional[Iterable[Salary]] = None,
    ) -> GenerationResult:
        period = require_period(period)
        company = self._get_company(ctx, company_id)
        self._gate.check(ctx, company, period)

        roster = list(self._employees.list_for_company(company.company_id, active_only=False))
        if employee_ids is not None:
            targets = list(self._employees.list_by_ids(company.company_id, employee_ids))
        else:
            targets = [e for e in roster if e.active]
        if not targets:
            raise ValidationError("No active employees found for the company")

        warnings: list[AttendanceWarning] = []
        punches: dict[str, list] = {}
        if in_out_csv:
            parsed = self._parser.parse(in_out_csv, period=period, roster=roster)
            warnings.extend(parsed.warnings)
            punches = parsed.punches_by_employee()

        stored = {s.employee_id: s for s in self._salaries.list_for_employees([e.employee_id for e in targets], period)}
        edited = {s.employee_id: s for s in (existing_salaries or ())}

        jobs: list[_Job] = []
        exists: list[str] = []
        for employee in targets:
            existing = stored.get(employee.employee_id)
            if existing and not update:
                exists.append(employee.employee_id)
                continue
            if existing is None:
                jobs.append(_Job(employee=employee, mode=GenerationMode.GENERATE, punches=punches.get(employee.employee_id)))
                continue
            caller_copy = edited.get(employee.employee_id)
            if in_out_csv:
                jobs.append(
                    _Job(
                        employee=employee,
                        mode=GenerationMode.REGENERATE,
                        punches=punches.get(employee.employee_id),
                        existing=existing,
                    )
                )
            else:
                jobs.append(
                    _Job(
                        employee=employee,
                        mode=GenerationMode.UPDATE,
                        events=caller_copy.in_out if caller_copy else None,
                        existing=existing,
                    )
                )

        outcomes = self._run_jobs(company, period, jobs)

        salaries: list[Salary] = []
        errors: list[EmployeeFailure] = []
        for job, outcome in zip(jobs, outcomes):
            if isinstance(outcome, DomainError):
                logger.warning("Salary generation failed for %s %s: %s", job.employee.employee_id, period, outcome.message)
                errors.append(EmployeeFailure(employee_id=job.employee.employee_id, message=outcome.message, kind=outcome.kind))
                continue
            salaries.append(outcome.salary)
            warnings.extend(outcome.warnings)

        return GenerationResult(
            salaries=tuple(salaries),
            exists=tuple(exists),
            errors=tuple(errors),
            warnings=tuple(warnings),
        )

    def _run_jobs(self, company: Company, period: str, jobs: list[_Job]) -> list:
        if not jobs:
            return []
        calendars = self._load_calendars(period)
        timeout = self._settings.generation_timeout(len(jobs))
        executor = ThreadPoolExecutor(max_workers=max(1, self._settings.max_workers))
        try:
            futures = [executor.submit(self._build_one, company, period, calendars, job) for job in jobs]
            done, not_done = wait(futures, timeout=timeout)
            if not_done:
                for f in not_done:
                    f.cancel()
                raise GenerationTimeoutError(
                    f"Salary generation for {company.company_id} {period} exceeded {timeout:.1f}s; nothing was saved"
                )
            return [f.result() for f in futures]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _build_one(
        self,
        company: Company,
        period: str,
        calendars: Mapping[CalendarName, HolidayCalendar],
        job: _Job,
    ) -> AggregateResult | DomainError:
        try:
            effective = resolve_employee(job.employee, company)
            return self._aggregator.build(
                employee=effective,
                company_id=company.company_id,
                period=period,
                calendar=calendars[effective.calendar],
                mode=job.mode,
                punches=job.punches,
                events=job.events,
                existing=job.existing,
                rng=self._rng_for(job.employee.employee_id, period),
            )
        except DomainError as e:
            return e

    def commit(self, salaries: Iterable[Salary], *, update: bool = False) -> CommitResult:
        """Persist previewed salaries.

        EPF and the final salary are derived again from each row's inputs, so
        totals sent back by a caller are never stored as given. New rows go
        through ``insert_if_absent``; a row that already exists is reported in
        ``exists`` unless ``update`` is set and the salary carries its id.
        Updates are checked against the stored row before anything is written.
        The company-period lock is held so payment generation never reads a
        half-written period.
        """
        salaries = [self._calculator.recalculate(s) for s in salaries]
        saved: list[Salary] = []
        exists: list[str] = []
        keys = sorted({company_period_key(s.company_id, s.period) for s in salaries})
        with ExitStack() as stack:
            for key in keys:
                stack.enter_context(self._locks.hold(key))
            if update:
                for salary in salaries:
                    if salary.salary_id:
                        self._check_update_target(salary)
            for salary in salaries:
                with self._locks.hold(salary_key(salary.employee_id, salary.period)):
                    if update and salary.salary_id:
                        self._salaries.update(salary)
                        saved.append(salary)
                        continue
                    new_id = self._salaries.insert_if_absent(salary)
                    if new_id is None:
                        exists.append(salary.employee_id)
                    else:
                        saved.append(replace(salary, salary_id=new_id))
        return CommitResult(saved=tuple(saved), exists=tuple(exists))

    def _check_update_target(self, salary: Salary) -> None:
        stored = self._salaries.get_by_id(salary.salary_id)
        if not stored:
            raise NotFoundError(f"Salary {salary.salary_id} not found")
        if (stored.employee_id, stored.company_id, stored.period) != (salary.employee_id, salary.company_id, salary.period):
            raise ConflictError(
                f"Salary {salary.salary_id} belongs to employee {stored.employee_id} for {stored.period}"
            )

    def generate_salaries(
        self,
        ctx: RequestContext,
        *,
        company_id: str,
        period: str,
        employee_ids: Optional[Iterable[str]] = None,
        in_out_csv: Optional[str] = None,
        update: bool = False,
        existing_salaries: Optional[Iterable[Salary]] = None,
        commit: bool = True,
    ) -> GenerationResult:
        logger.info("Generating salaries for %s %s (update=%s)", company_id, period, update)
        result = self.preview(
            ctx,
            company_id=company_id,
            period=period,
            employee_ids=employee_ids,
            in_out_csv=in_out_csv,
            update=update,
            existing_salaries=existing_salaries,
        )
        if commit:
            committed = self.commit(result.salaries, update=update)
            result = replace(result, salaries=committed.saved, exists=result.exists + committed.exists)
        logger.info(
            "Salaries for %s %s: %d generated, %d existing, %d failed",
            company_id,
            period,
            len(result.salaries),
            len(result.exists),
            len(result.errors),
        )
        return result

    def apply_manual_edit(self, ctx: RequestContext, salary_id: str, changes: Mapping[str, Any]) -> Salary:
        """Apply user edits and re-derive EPF and the final salary."""
        existing = self._get_salary(ctx, salary_id)
        data = existing.to_dict()
        for key in EDITABLE_FIELDS:
            if key in changes:
                data[key] = changes[key]
        edited = self._calculator.recalculate(Salary.from_dict(data))
        with self._locks.hold(salary_key(edited.employee_id, edited.period)):
            self._salaries.update(edited)
        logger.info("Salary %s edited by %s", salary_id, ctx.user_id)
        return edited

    def delete(self, ctx: RequestContext, salary_id: str) -> None:
        existing = self._get_salary(ctx, salary_id)
        with self._locks.hold(company_period_key(existing.company_id, existing.period)):
            self._salaries.delete(salary_id)
        logger.info("Salary %s deleted by %s", salary_id, ctx.user_id)

    def _get_salary(self, ctx: RequestContext, salary_id: str) -> Salary:
        existing = self._salaries.get_by_id(salary_id)
        if not existing:
            raise NotFoundError(f"Salary {salary_id} not found")
        self._get_company(ctx, existing.company_id)
        return existing

    def save(self, ctx: RequestContext, salaries: Iterable[Salary], *, update: bool = False) -> CommitResult:
        """Commit salaries sent back by a caller after preview."""
        salaries = list(salaries)
        for company_id, period in sorted({(s.company_id, s.period) for s in salaries}):
            company = self._get_company(ctx, company_id)
            self._gate.check(ctx, company, period)
            ids = {s.employee_id for s in salaries if (s.company_id, s.period) == (company_id, period)}
            known = {e.employee_id for e in self._employees.list_by_ids(company.company_id, ids)}
            unknown = sorted(ids - known)
            if unknown:
                raise ValidationError(f"Employees {', '.join(unknown)} do not belong to company {company_id}")
        return self.commit(salaries, update=update)

    def preview_csv(self, ctx: RequestContext, *, company_id: str, period: str, text: str) -> CsvParseResult:
        company = self._get_company(ctx, company_id)
        roster = self._employees.list_for_company(company.company_id, active_only=False)
        return self._parser.parse(text, period=period, roster=roster)
