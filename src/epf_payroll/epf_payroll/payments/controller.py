from __future__ import annotations

from datetime import date

from flask import Flask, jsonify

from ..common.api import current_context, json_body, json_endpoint, require_field
from ..container import Container
from ..core.exceptions import NotFoundError


def _default_reference_period(today: date) -> str:
    # Two months before today.
    month = today.month - 2
    year = today.year
    if month < 1:
        month += 12
        year -= 1
    return f"{year:04d}-{month:02d}"


def register(app: Flask, container: Container) -> None:
    service = container.payment_service

    @app.route("/api/payments/generate", methods=["POST"], endpoint="api_payments_generate")
    @json_endpoint
    def generate():
        body = json_body()
        company_id = str(require_field(body, "companyId"))
        period = str(require_field(body, "period"))
        result = service.generate_payment(
            current_context(),
            company_id=company_id,
            period=period,
            regenerate=bool(body.get("regenerate", False)),
        )
        return jsonify(result.to_dict()), (200 if result.exists or result.regenerated else 201)

    @app.route("/api/companies/reference", methods=["POST"], endpoint="api_company_reference")
    @json_endpoint
    def reference():
        if container.reference_resolver is None:
            raise NotFoundError("Reference lookup is not configured")
        body = json_body()
        employer_no = str(require_field(body, "employerNo"))
        period = str(body.get("period") or _default_reference_period(date.today()))
        info = container.reference_resolver.lookup(employer_no, period)
        return jsonify(info.to_dict())
