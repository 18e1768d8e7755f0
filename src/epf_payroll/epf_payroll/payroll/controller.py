from __future__ import annotations

from flask import Flask, jsonify

from ..common.api import current_context, json_body, json_endpoint, require_field
from ..container import Container
from ..core.exceptions import ValidationError
from .model import Salary


def _salary_list(raw) -> list[Salary]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError("salaries must be a list")
    return [Salary.from_dict(item) for item in raw]


def register(app: Flask, container: Container) -> None:
    service = container.salary_service

    @app.route("/api/salaries/generate", methods=["POST"], endpoint="api_salaries_generate")
    @json_endpoint
    def generate():
        body = json_body()
        company_id = str(require_field(body, "companyId"))
        period = str(require_field(body, "period"))
        employees = body.get("employees")
        ctx = current_context()
        result = service.generate_salaries(
            ctx,
            company_id=company_id,
            period=period,
            employee_ids=[str(e) for e in employees] if employees else None,
            in_out_csv=body.get("inOut") or None,
            update=bool(body.get("update", False)),
            existing_salaries=_salary_list(body.get("existingSalaries")),
            commit=bool(body.get("commit", False)),
        )
        return jsonify(result.to_dict())

    @app.route("/api/salaries", methods=["POST"], endpoint="api_salaries_save")
    @json_endpoint
    def save():
        body = json_body()
        salaries = _salary_list(require_field(body, "salaries"))
        result = service.save(current_context(), salaries, update=bool(body.get("update", False)))
        return jsonify({"salaries": [s.to_dict() for s in result.saved], "exists": list(result.exists)}), 201

    @app.route("/api/salaries/<salary_id>", methods=["PATCH"], endpoint="api_salaries_edit")
    @json_endpoint
    def edit(salary_id: str):
        salary = service.apply_manual_edit(current_context(), salary_id, json_body())
        return jsonify({"salary": salary.to_dict()})

    @app.route("/api/salaries/<salary_id>", methods=["DELETE"], endpoint="api_salaries_delete")
    @json_endpoint
    def delete(salary_id: str):
        service.delete(current_context(), salary_id)
        return jsonify({"message": "Salary deleted successfully"})

    @app.route("/api/inout/preview", methods=["POST"], endpoint="api_inout_preview")
    @json_endpoint
    def preview_inout():
        body = json_body()
        company_id = str(require_field(body, "companyId"))
        period = str(require_field(body, "period"))
        result = service.preview_csv(
            current_context(),
            company_id=company_id,
            period=period,
            text=str(require_field(body, "inOut")),
        )
        return jsonify(
            {
                "type": result.identifier_type.value,
                "rows": [e.to_dict() for e in result.entries],
                "warnings": [w.to_dict() for w in result.warnings],
            }
        )
