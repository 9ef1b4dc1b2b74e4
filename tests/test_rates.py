"""Unit tests for rates.py: flat/reducing conversion."""
from decimal import Decimal

import pytest

from emi_calc.data_models import RateType
from emi_calc.rates import flat_to_reducing, rate_pair_from, reducing_to_flat

TOLERANCE = Decimal("1e-20")


class TestConversion:
    def test_flat_to_reducing_rule_of_thumb(self):
        # 2 × 8.5 / 61
        assert flat_to_reducing(Decimal("8.5"), 60) == Decimal(17) / Decimal(61)

    def test_reducing_to_flat(self):
        assert reducing_to_flat(Decimal("10"), 59) == Decimal("300")

    def test_single_month_tenure_is_identity(self):
        assert flat_to_reducing(Decimal("12"), 1) == Decimal("12")
        assert reducing_to_flat(Decimal("12"), 1) == Decimal("12")

    def test_accepts_float_and_int(self):
        assert flat_to_reducing(8.5, 60) == flat_to_reducing(Decimal("8.5"), 60)
        assert reducing_to_flat(10, 60) == reducing_to_flat(Decimal("10"), 60)

    def test_negative_rate_passes_through(self):
        assert flat_to_reducing(Decimal("-6"), 2) == Decimal("-4")

    @pytest.mark.parametrize("tenure", [1, 12, 60, 84, 360])
    @pytest.mark.parametrize("flat", ["0", "0.5", "8.5", "12", "36"])
    def test_round_trip(self, flat, tenure):
        back = reducing_to_flat(flat_to_reducing(Decimal(flat), tenure), tenure)
        assert abs(back - Decimal(flat)) < TOLERANCE


class TestRatePair:
    def test_from_flat(self):
        pair = rate_pair_from(RateType.FLAT, "8.5", 60)
        assert pair.flat_annual_percent == Decimal("8.5")
        assert pair.reducing_annual_percent == flat_to_reducing(Decimal("8.5"), 60)

    def test_from_reducing(self):
        pair = rate_pair_from(RateType.REDUCING, "10", 60)
        assert pair.reducing_annual_percent == Decimal("10")
        assert pair.flat_annual_percent == Decimal("305")

    def test_emi_amount_is_not_a_rate(self):
        with pytest.raises(ValueError):
            rate_pair_from(RateType.EMI_AMOUNT, "9500", 60)
