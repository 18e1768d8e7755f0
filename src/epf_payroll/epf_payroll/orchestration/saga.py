from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol

from ..core.context import RequestContext
from ..core.enums import StepStatus
from ..core.exceptions import DomainError
from ..payments.service import PaymentService
from ..payroll.service import SalaryService

logger = logging.getLogger(__name__)

# Progress reported when each step starts, then on completion.
PROGRESS_SALARIES = 5
PROGRESS_PAYMENTS = 33
PROGRESS_DOCUMENTS = 70
PROGRESS_COMPLETE = 100

STEP_SALARIES = "salaries"
STEP_PAYMENTS = "payments"
STEP_DOCUMENTS = "documents"


class DocumentGenerator(Protocol):
    def generate(self, ctx: RequestContext, *, company_id: str, period: str) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class StepOutcome:
    name: str
    status: StepStatus
    message: str = ""
    detail: Optional[dict] = None

    def to_dict(self) -> dict:
        data = {"step": self.name, "status": self.status.value, "message": self.message}
        if self.detail is not None:
            data["detail"] = self.detail
        return data


@dataclass
class SagaReport:
    company_id: str
    period: str
    steps: list[StepOutcome] = field(default_factory=list)
    progress: int = 0

    @property
    def succeeded(self) -> bool:
        return all(s.status in (StepStatus.DONE, StepStatus.SKIPPED) for s in self.steps)

    def to_dict(self) -> dict:
        return {
            "company": self.company_id,
            "period": self.period,
            "progress": self.progress,
            "succeeded": self.succeeded,
            "steps": [s.to_dict() for s in self.steps],
        }


ProgressCallback = Callable[[int, str], None]


class AutoGenerateSaga:
    """Salaries, then the payment, then documents.

    Steps share no transaction. A failed step stops the run and leaves earlier
    results in place; running again is safe because each step is idempotent.
    """

    def __init__(
        self,
        *,
        salaries: SalaryService,
        payments: PaymentService,
        documents: DocumentGenerator | None = None,
    ):
        self._salaries = salaries
        self._payments = payments
        self._documents = documents

    def run(
        self,
        ctx: RequestContext,
        *,
        company_id: str,
        period: str,
        in_out_csv: Optional[str] = None,
        on_progress: ProgressCallback | None = None,
    ) -> SagaReport:
        report = SagaReport(company_id=company_id, period=period)

        def progress(value: int, label: str) -> None:
            report.progress = value
            if on_progress:
                on_progress(value, label)

        progress(PROGRESS_SALARIES, STEP_SALARIES)
        if not self._step(report, STEP_SALARIES, lambda: self._run_salaries(ctx, company_id, period, in_out_csv)):
            return report

        progress(PROGRESS_PAYMENTS, STEP_PAYMENTS)
        if not self._step(report, STEP_PAYMENTS, lambda: self._run_payment(ctx, company_id, period)):
            return report

        progress(PROGRESS_DOCUMENTS, STEP_DOCUMENTS)
        if self._documents is None:
            report.steps.append(StepOutcome(STEP_DOCUMENTS, StepStatus.SKIPPED, "No document generator configured"))
        elif not self._step(
            report,
            STEP_DOCUMENTS,
            lambda: self._documents.generate(ctx, company_id=company_id, period=period) or {},
        ):
            return report

        progress(PROGRESS_COMPLETE, "complete")
        return report

    @staticmethod
    def _step(report: SagaReport, name: str, action: Callable[[], Any]) -> bool:
        try:
            detail = action()
        except DomainError as e:
            logger.warning("Auto generate %s %s stopped at %s: %s", report.company_id, report.period, name, e.message)
            report.steps.append(StepOutcome(name, StepStatus.FAILED, e.message, {"kind": e.kind}))
            return False
        report.steps.append(StepOutcome(name, StepStatus.DONE, detail=detail if isinstance(detail, dict) else None))
        return True

    def _run_salaries(self, ctx: RequestContext, company_id: str, period: str, in_out_csv: Optional[str]) -> dict:
        result = self._salaries.generate_salaries(ctx, company_id=company_id, period=period, in_out_csv=in_out_csv)
        return {
            "generated": len(result.salaries),
            "exists": list(result.exists),
            "errors": [e.to_dict() for e in result.errors],
        }

    def _run_payment(self, ctx: RequestContext, company_id: str, period: str) -> dict:
        result = self._payments.generate_payment(ctx, company_id=company_id, period=period)
        return result.to_dict()
