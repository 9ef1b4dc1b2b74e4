from decimal import Decimal

import pytest

from emi_calc.data_models import LoanInputs, RateType
from emi_calc.service import compute
from emi_calc.settings import Settings
from emi_calc_web.app import create_app


def make_inputs(price="500000", down="100000", tenure=60, rate_type=RateType.FLAT, value="8.5"):
    return LoanInputs(
        on_road_price=Decimal(price),
        down_payment=Decimal(down),
        tenure_months=tenure,
        rate_type=rate_type,
        rate_or_emi_value=Decimal(value),
    )


@pytest.fixture
def flat_bundle():
    """400000 financed over 60 months at 8.5 % flat."""
    return compute(make_inputs())


@pytest.fixture
def reducing_bundle():
    """400000 financed over 60 months at 10 % reducing."""
    return compute(make_inputs(rate_type=RateType.REDUCING, value="10"))


@pytest.fixture
def app():
    app = create_app(Settings())
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
