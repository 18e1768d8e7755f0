from __future__ import annotations

from src.epf_payroll.epf_payroll.core.enums import StepStatus
from src.epf_payroll.epf_payroll.orchestration.saga import AutoGenerateSaga

from tests.fakes import COMPANY_ID, PERIOD, RecordingDocuments

CSV = "memberno,time\n2,2024-03-04T08:00:00\n2,2024-03-04T17:00:00\n"


def test_full_run_reports_progress_and_skips_documents_without_generator(container, ctx):
    seen = []

    report = container.auto_generate.run(
        ctx, company_id=COMPANY_ID, period=PERIOD, in_out_csv=CSV, on_progress=lambda value, label: seen.append((value, label))
    )

    assert [v for v, _ in seen] == [5, 33, 70, 100]
    assert [(s.name, s.status) for s in report.steps] == [
        ("salaries", StepStatus.DONE),
        ("payments", StepStatus.DONE),
        ("documents", StepStatus.SKIPPED),
    ]
    assert report.succeeded
    assert report.progress == 100


def test_document_step_uses_injected_generator(container, ctx):
    documents = RecordingDocuments()
    saga = AutoGenerateSaga(salaries=container.salary_service, payments=container.payment_service, documents=documents)

    report = saga.run(ctx, company_id=COMPANY_ID, period=PERIOD, in_out_csv=CSV)

    assert documents.calls == [(COMPANY_ID, PERIOD)]
    assert report.steps[-1].status == StepStatus.DONE
    assert report.steps[-1].detail == {"documents": ["C", "R4"]}


def test_payment_failure_keeps_salaries_and_rerun_is_safe(container, ctx, repos):
    repos.employees.employees[:] = [e for e in repos.employees.employees if e.employee_id == "e2"]

    report = container.auto_generate.run(ctx, company_id=COMPANY_ID, period=PERIOD)

    assert not report.succeeded
    assert report.progress == 33
    assert report.steps[0].status == StepStatus.DONE
    assert report.steps[0].detail["errors"][0]["employeeId"] == "e2"
    assert report.steps[1].status == StepStatus.FAILED
    assert report.steps[1].detail == {"kind": "not_found"}

    retry = container.auto_generate.run(ctx, company_id=COMPANY_ID, period=PERIOD, in_out_csv=CSV)
    again = container.auto_generate.run(ctx, company_id=COMPANY_ID, period=PERIOD, in_out_csv=CSV)

    assert retry.succeeded and again.succeeded
    assert len(repos.salaries.rows) == 1
    assert len(repos.payments.rows) == 1
    assert again.steps[0].detail["exists"] == ["e2"]
    assert again.steps[1].detail["exists"] is True


def test_not_purchased_stops_at_the_first_step(container, ctx, repos):
    repos.purchases.statuses.clear()

    report = container.auto_generate.run(ctx, company_id=COMPANY_ID, period=PERIOD)

    assert [(s.name, s.status) for s in report.steps] == [("salaries", StepStatus.FAILED)]
    assert report.steps[0].message.startswith("Month not Purchased")
    assert report.to_dict()["succeeded"] is False
