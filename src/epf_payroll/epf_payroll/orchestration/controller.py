from __future__ import annotations

from flask import Flask, jsonify

from ..common.api import current_context, json_body, json_endpoint, require_field
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/quick/generate", methods=["POST"], endpoint="api_quick_generate")
    @json_endpoint
    def quick_generate():
        body = json_body()
        company_id = str(require_field(body, "companyId"))
        period = str(require_field(body, "period"))
        report = container.auto_generate.run(
            current_context(),
            company_id=company_id,
            period=period,
            in_out_csv=body.get("inOut") or None,
        )
        return jsonify(report.to_dict()), (200 if report.succeeded else 207)
