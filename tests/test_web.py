"""Tests for the Flask front end."""
from decimal import Decimal

from emi_calc.settings import Settings
from emi_calc_web.app import create_app

FORM = {
    "price": "500000",
    "down_payment": "100000",
    "tenure": "60",
    "rate_type": "flat",
    "value": "8.5",
}


class TestIndex:
    def test_get_form(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "EMI Calculator" in response.get_data(as_text=True)

    def test_post_renders_results(self, client):
        response = client.post("/", data=FORM)
        html = response.get_data(as_text=True)
        assert response.status_code == 200
        assert "₹9,500" in html
        assert "₹1,70,000" in html
        assert "Flat (8.50%)" in html

    def test_invalid_input_shows_error(self, client):
        response = client.post("/", data=dict(FORM, price="a lot"))
        assert response.status_code == 200
        assert 'class="error"' in response.get_data(as_text=True)

    def test_result_survives_in_session(self, client):
        client.post("/", data=FORM)
        html = client.get("/").get_data(as_text=True)
        assert "₹9,500" in html

    def test_strict_mode_reports_violation(self):
        app = create_app(Settings(strict_inputs=True))
        app.config["TESTING"] = True
        response = app.test_client().post("/", data=dict(FORM, down_payment="600000"))
        assert "exceeds" in response.get_data(as_text=True)

    def test_form_wires_live_rate_badges(self, client):
        html = client.get("/").get_data(as_text=True)
        assert 'data-convert-url="/api/convert"' in html
        assert 'id="liveFlatBadge"' in html
        assert 'id="liveReducingBadge"' in html

    def test_tenure_above_limit_shows_error(self, client):
        response = client.post("/", data=dict(FORM, tenure="1e9"))
        html = response.get_data(as_text=True)
        assert response.status_code == 200
        assert 'class="error"' in html
        assert "must not exceed 1200 months" in html

    def test_out_of_range_rate_shows_error(self, client):
        response = client.post("/", data=dict(FORM, value="1e999999"))
        assert response.status_code == 200
        assert "out of range" in response.get_data(as_text=True)


class TestSchedule:
    def test_requires_a_result(self, client):
        response = client.get("/schedule/flat")
        assert response.status_code == 302

    def test_unknown_convention(self, client):
        assert client.get("/schedule/balloon").status_code == 404
        assert client.get("/export/balloon.csv").status_code == 404

    def test_table(self, client):
        client.post("/", data=FORM)
        response = client.get("/schedule/flat")
        html = response.get_data(as_text=True)
        assert response.status_code == 200
        assert "Flat Rate Schedule" in html
        assert html.count("<tr>") == 61

    def test_csv_download(self, client):
        client.post("/", data=FORM)
        response = client.get("/export/reducing.csv")
        assert response.status_code == 200
        assert response.mimetype == "text/csv"
        assert "emi_schedule_reducing.csv" in response.headers["Content-Disposition"]
        lines = response.get_data(as_text=True).splitlines()
        assert lines[0] == "Month,EMI,Principal,Interest,Balance"
        assert len(lines) == 61


class TestAPI:
    def test_compute(self, client):
        response = client.post("/api/compute", json=FORM)
        assert response.status_code == 200
        body = response.get_json()
        assert Decimal(body["result"]["flat_emi"]) == Decimal("9500")
        assert body["chart"]["datasets"][0]["label"] == "Flat (8.50%)"
        assert "schedule" not in body

    def test_compute_with_schedule(self, client):
        response = client.post("/api/compute", json=dict(FORM, schedule="flat"))
        rows = response.get_json()["schedule"]
        assert len(rows) == 60
        assert rows[0]["month"] == 1

    def test_compute_bad_schedule(self, client):
        response = client.post("/api/compute", json=dict(FORM, schedule="balloon"))
        assert response.status_code == 400

    def test_compute_requires_object(self, client):
        response = client.post("/api/compute", data="nope", content_type="text/plain")
        assert response.status_code == 400

    def test_compute_invalid_value(self, client):
        response = client.post("/api/compute", json=dict(FORM, rate_type="balloon"))
        assert response.status_code == 400
        assert "error" in response.get_json()

    def test_compute_leaves_missing_fields_blank(self, client):
        payload = {"price": "400000", "tenure": "60", "value": "10", "rate_type": "reducing"}
        response = client.post("/api/compute", json=payload)
        assert response.status_code == 200
        result = response.get_json()["result"]
        assert Decimal(result["principal"]) == Decimal("400000")
        assert Decimal(result["reducing_rate"]) == Decimal("10")
        assert result["inputs"]["down_payment"] == "0"

    def test_compute_rate_type_defaults_to_flat(self, client):
        response = client.post("/api/compute", json={"price": 400000, "tenure": 60, "value": 8.5})
        result = response.get_json()["result"]
        assert result["rate_type"] == "flat"
        assert Decimal(result["flat_emi"]) == Decimal("9500")

    def test_compute_requires_price_tenure_and_value(self, client):
        response = client.post("/api/compute", json={"price": "400000"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "Missing required fields: tenure, value"

    def test_compute_near_zero_rate(self, client):
        response = client.post("/api/compute", json=dict(FORM, rate_type="reducing", value="1e-26"))
        assert response.status_code == 200
        emi = Decimal(response.get_json()["result"]["reducing_emi"])
        assert abs(emi - Decimal("400000") / Decimal(60)) < Decimal("1e-20")

    def test_compute_out_of_range_rate(self, client):
        response = client.post("/api/compute", json=dict(FORM, value="1e999999"))
        assert response.status_code == 400
        assert "out of range" in response.get_json()["error"]

    def test_compute_tenure_above_limit(self, client):
        response = client.post("/api/compute", json=dict(FORM, tenure="1e9", schedule="flat"))
        assert response.status_code == 400
        assert "must not exceed" in response.get_json()["error"]

    def test_tenure_limit_comes_from_settings(self):
        app = create_app(Settings(max_tenure_months=24))
        app.config["TESTING"] = True
        client = app.test_client()
        assert client.post("/api/compute", json=dict(FORM, tenure="36")).status_code == 400
        assert client.post("/api/compute", json=dict(FORM, tenure="24")).status_code == 200

    def test_convert(self, client):
        body = client.get("/api/convert?from=flat&rate=8.5&tenure=60").get_json()
        assert body["flat_badge"] == "8.50%"
        assert body["reducing_badge"] == "0.28%"

    def test_convert_rejects_emi(self, client):
        assert client.get("/api/convert?from=emi&rate=9500&tenure=60").status_code == 400

    def test_convert_out_of_range_rate(self, client):
        response = client.get("/api/convert?from=reducing&rate=1e999999&tenure=60")
        assert response.status_code == 400
        assert "error" in response.get_json()
