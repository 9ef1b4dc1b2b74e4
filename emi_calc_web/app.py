import json
import logging
import os
from decimal import DecimalException
from typing import Optional

import click
from flask import Flask, Response, jsonify, redirect, render_template, request, session, url_for

from emi_calc.data_models import Convention, RateType, ResultBundle
from emi_calc.formatter import (
    comparison_chart_data,
    format_currency,
    format_percent,
    schedule_filename,
    schedule_to_csv,
)
from emi_calc.main import build_inputs_from_options, compute_or_fail
from emi_calc.rates import rate_pair_from
from emi_calc.schedule import generate_schedule
from emi_calc.settings import Settings
from emi_calc.utils import parse_percent, parse_tenure

logger = logging.getLogger(__name__)

SESSION_KEY = "last_result"

DEFAULT_FORM = {
    "price": "500000",
    "down_payment": "100000",
    "tenure": "60",
    "rate_type": RateType.FLAT.value,
    "value": "8.5",
}

# Fields a JSON client must send; the rest default to blank.
REQUIRED_API_FIELDS = ("price", "tenure", "value")

RATE_TYPE_LABELS = {
    RateType.FLAT.value: "Flat",
    RateType.REDUCING.value: "Reducing",
    RateType.EMI_AMOUNT.value: "EMI amount",
}


def create_app(settings: Optional[Settings] = None) -> Flask:
    app = Flask(__name__)
    app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
    app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    app.config["EMI_SETTINGS"] = settings or Settings.from_env()

    def current_settings() -> Settings:
        return app.config["EMI_SETTINGS"]

    def _form_values(form) -> dict:
        values = dict(DEFAULT_FORM)
        for key in DEFAULT_FORM:
            if key in form:
                values[key] = str(form.get(key, "")).strip()
        return values

    def _payload_values(payload: dict) -> dict:
        # API clients get no demo defaults: absent optional fields are blank.
        values = {}
        for key in DEFAULT_FORM:
            raw = payload.get(key)
            values[key] = "" if raw is None else str(raw).strip()
        values["rate_type"] = values["rate_type"] or RateType.FLAT.value
        return values

    def _compute_from(values: dict) -> ResultBundle:
        inputs = build_inputs_from_options(
            values["price"],
            values["down_payment"],
            values["tenure"] or "1",
            values["rate_type"],
            values["value"],
        )
        return compute_or_fail(inputs, current_settings())

    def _rows_or_none(bundle: ResultBundle, convention: Convention):
        try:
            return generate_schedule(bundle, convention)
        except DecimalException as exc:
            logger.info("Schedule expansion failed: %r", exc)
            return None

    def _load_bundle():
        data = session.get(SESSION_KEY)
        if not data:
            return None
        return ResultBundle.from_dict(data)

    @app.template_filter("currency")
    def currency_filter(value):
        return format_currency(value, current_settings().currency_symbol)

    @app.template_filter("percent")
    def percent_filter(value):
        return format_percent(value)

    @app.route("/", methods=["GET", "POST"])
    def index():
        bundle = None
        error = None
        values = dict(DEFAULT_FORM)

        if request.method == "POST":
            values = _form_values(request.form)
            try:
                bundle = _compute_from(values)
                session[SESSION_KEY] = bundle.to_dict()
                session.modified = True
            except (ValueError, click.ClickException) as exc:
                logger.info("EMI calculation rejected: %s", exc)
                error = exc.format_message() if isinstance(exc, click.ClickException) else str(exc)
        else:
            bundle = _load_bundle()
            if bundle is not None and bundle.inputs is not None:
                values = {
                    "price": str(bundle.inputs.on_road_price),
                    "down_payment": str(bundle.inputs.down_payment),
                    "tenure": str(bundle.inputs.tenure_months),
                    "rate_type": bundle.inputs.rate_type.value,
                    "value": str(bundle.inputs.rate_or_emi_value),
                }

        chart_payload = json.dumps(comparison_chart_data(bundle)) if bundle else "null"
        return render_template(
            "index.html",
            bundle=bundle,
            values=values,
            error=error,
            rate_type_labels=RATE_TYPE_LABELS,
            chart_payload=chart_payload,
            asset_version=app.config["ASSET_VERSION"],
        )

    @app.get("/schedule/<convention>")
    def schedule_view(convention):
        try:
            chosen = Convention(convention)
        except ValueError:
            return "Unknown convention", 404
        bundle = _load_bundle()
        if bundle is None:
            return redirect(url_for("index"))
        rows = _rows_or_none(bundle, chosen)
        if rows is None:
            return "Schedule is out of range", 400
        title = "Flat Rate Schedule" if chosen == Convention.FLAT else "Reducing Rate Schedule"
        return render_template(
            "schedule.html",
            bundle=bundle,
            rows=rows,
            convention=chosen.value,
            title=title,
            asset_version=app.config["ASSET_VERSION"],
        )

    @app.get("/export/<convention>.csv")
    def schedule_csv(convention):
        try:
            chosen = Convention(convention)
        except ValueError:
            return "Unknown convention", 404
        bundle = _load_bundle()
        if bundle is None:
            return redirect(url_for("index"))
        rows = _rows_or_none(bundle, chosen)
        if rows is None:
            return "Schedule is out of range", 400
        return Response(
            schedule_to_csv(rows),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={schedule_filename(chosen)}"},
        )

    @app.post("/api/compute")
    def api_compute():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify({"error": "Request body must be a JSON object."}), 400
        values = _payload_values(payload)
        missing = [key for key in REQUIRED_API_FIELDS if not values[key]]
        if missing:
            return jsonify({"error": f"Missing required fields: {', '.join(missing)}"}), 400
        try:
            bundle = _compute_from(values)
        except (ValueError, click.ClickException) as exc:
            message = exc.format_message() if isinstance(exc, click.ClickException) else str(exc)
            return jsonify({"error": message}), 400
        response = {"result": bundle.to_dict(), "chart": comparison_chart_data(bundle)}
        convention = payload.get("schedule")
        if convention:
            try:
                chosen = Convention(convention)
            except ValueError:
                return jsonify({"error": f"Unknown convention: {convention}"}), 400
            rows = _rows_or_none(bundle, chosen)
            if rows is None:
                return jsonify({"error": "Schedule is out of range"}), 400
            response["schedule"] = [
                {
                    "month": row.period,
                    "emi": str(row.installment),
                    "principal": str(row.principal_component),
                    "interest": str(row.interest_component),
                    "balance": str(row.remaining_balance),
                }
                for row in rows
            ]
        return jsonify(response)

    @app.get("/api/convert")
    def api_convert():
        source = request.args.get("from", RateType.FLAT.value)
        try:
            kind = RateType(source)
            if kind == RateType.EMI_AMOUNT:
                raise ValueError("Only flat and reducing rates can be converted")
            rate = parse_percent(request.args.get("rate", "") or "0")
            tenure = max(1, parse_tenure(request.args.get("tenure", "") or "1"))
            pair = rate_pair_from(kind, rate, tenure)
        except (ValueError, DecimalException) as exc:
            return jsonify({"error": str(exc) or type(exc).__name__}), 400
        return jsonify(
            {
                "flat_rate": str(pair.flat_annual_percent),
                "reducing_rate": str(pair.reducing_annual_percent),
                "flat_badge": format_percent(pair.flat_annual_percent),
                "reducing_badge": format_percent(pair.reducing_annual_percent),
            }
        )

    return app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    print("Starting EMI Calculator web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
