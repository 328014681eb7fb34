"""Tests for the bookkeeping and tax-as-a-service calculators."""

from decimal import Decimal

import pytest

from quote_engine.calculators.bookkeeping import BookkeepingCalculator
from quote_engine.calculators.taas import TaasCalculator
from quote_engine.constants import default_constants
from quote_engine.errors import ConfigurationError
from quote_engine.models import QuotePricingInput
from quote_engine.rounding import coarse_rounding


@pytest.fixture
def constants():
    return default_constants()


class TestBookkeepingCalculator:
    """Test monthly bookkeeping and its setup fee."""

    @pytest.fixture
    def calculator(self):
        return BookkeepingCalculator()

    @pytest.fixture
    def quote(self):
        return QuotePricingInput(
            monthly_revenue_range="25K-75K",
            monthly_transactions="100-300",
            industry="Professional Services",
            service_monthly_bookkeeping=True,
        )

    def test_monthly_fee(self, calculator, quote, constants):
        """(150 + 100) * 2.2 * 1.0 = 550"""
        result = calculator.calculate(quote, constants, calendar_month=1)

        assert result.monthly_fee == 550
        assert result.breakdown["rawBeforeMultipliers"] == Decimal("250")
        assert result.breakdown["monthlyFeeBeforeDiscount"] == 550
        assert result.breakdown["discountApplied"] is False

    def test_industry_multiplier_applies(self, calculator, constants):
        """(150 + 0) * 1.0 * 1.4 = 210"""
        quote = QuotePricingInput(
            monthly_revenue_range="<$10K",
            monthly_transactions="<100",
            industry="Healthcare/Medical",
            service_monthly_bookkeeping=True,
        )
        result = calculator.calculate(quote, constants, calendar_month=1)

        assert result.monthly_fee == 210

    def test_setup_fee_scales_with_month(self, calculator, quote, constants):
        """550 * 6 * 0.25 = 825"""
        result = calculator.calculate(quote, constants, calendar_month=6)

        assert result.setup_fee == 825
        assert result.breakdown["currentMonth"] == 6

    def test_setup_fee_rounds_half_up(self):
        """550 * 3 * 0.25 = 412.5 -> 413"""
        assert BookkeepingCalculator.calculate_setup_fee(550, 3, Decimal("0.25")) == 413

    def test_not_selected_is_zero(self, calculator, constants):
        quote = QuotePricingInput(monthly_revenue_range="nonsense", service_monthly_bookkeeping=False)
        result = calculator.calculate(quote, constants, calendar_month=1)

        assert result.monthly_fee == 0
        assert result.setup_fee == 0

    def test_unknown_revenue_range(self, calculator, constants):
        quote = QuotePricingInput(
            monthly_revenue_range="5M+",
            monthly_transactions="<100",
            industry="Software/SaaS",
            service_monthly_bookkeeping=True,
        )
        with pytest.raises(ConfigurationError, match="revenue_multipliers"):
            calculator.calculate(quote, constants, calendar_month=1)

    def test_unknown_industry(self, calculator, constants):
        quote = QuotePricingInput(
            monthly_revenue_range="<$10K",
            monthly_transactions="<100",
            industry="Space Mining",
            service_monthly_bookkeeping=True,
        )
        with pytest.raises(ConfigurationError, match="industry_multipliers"):
            calculator.calculate(quote, constants, calendar_month=1)


class TestTaasCalculator:
    """Test the tax-as-a-service monthly fee."""

    @pytest.fixture
    def calculator(self):
        return TaasCalculator()

    def _quote(self, **overrides):
        fields = {
            "monthly_revenue_range": "10K-25K",
            "industry": "Software/SaaS",
            "service_taas_monthly": True,
        }
        fields.update(overrides)
        return QuotePricingInput(**fields)

    def test_standalone_rounds_up_to_25(self, calculator, constants):
        """150 * 1.2 * 1.0 = 180 -> 200"""
        result = calculator.calculate(self._quote(), constants)

        assert result.monthly_fee == 200
        assert result.breakdown["scaledMonthlyFee"] == Decimal("180")
        assert result.setup_fee == 0

    def test_all_upcharges(self, calculator, constants):
        """
        entities 7 -> 150, states 3 -> 100, international 200,
        owners 7 -> 50, messy books 25, 1040s 7 * 25 = 175
        (150 + 700) * 1.0 * 1.0 = 850
        """
        quote = self._quote(
            monthly_revenue_range="<$10K",
            num_entities=7,
            states_filed=3,
            international_filing=True,
            num_business_owners=7,
            include_1040s=True,
            bookkeeping_quality="Messy",
        )
        result = calculator.calculate(quote, constants)

        assert result.breakdown["entityUpcharge"] == Decimal("150")
        assert result.breakdown["stateUpcharge"] == Decimal("100")
        assert result.breakdown["intlUpcharge"] == Decimal("200")
        assert result.breakdown["ownerUpcharge"] == Decimal("50")
        assert result.breakdown["bookUpcharge"] == Decimal("25")
        assert result.breakdown["personal1040"] == Decimal("175")
        assert result.monthly_fee == 850

    def test_clean_books_have_no_upcharge(self, calculator, constants):
        result = calculator.calculate(self._quote(bookkeeping_quality="Clean (Seed)"), constants)

        assert result.breakdown["bookUpcharge"] == Decimal("0")

    def test_custom_entity_count_overrides(self, calculator, constants):
        result = calculator.calculate(self._quote(num_entities=1, custom_num_entities=6), constants)

        assert result.breakdown["entityUpcharge"] == Decimal("75")

    def test_states_capped(self, calculator, constants):
        """Only 49 additional states are ever charged."""
        result = calculator.calculate(self._quote(states_filed=60), constants)

        assert result.breakdown["stateUpcharge"] == Decimal("2450")

    def test_industry_multiplier(self, calculator, constants):
        """150 * 1.2 * 1.4 = 252 -> 275"""
        result = calculator.calculate(self._quote(industry="Healthcare/Medical"), constants)

        assert result.monthly_fee == 275

    def test_rounding_step_is_an_argument(self, calculator, constants):
        """150 * 1.4 = 210 -> 250 with a step of 50"""
        quote = self._quote(monthly_revenue_range="25K-75K")

        assert calculator.calculate(quote, constants).monthly_fee == 225
        assert calculator.calculate(quote, constants, rounding=coarse_rounding(50)).monthly_fee == 250

    def test_unknown_quality(self, calculator, constants):
        with pytest.raises(ConfigurationError, match="bookkeeping_quality_upcharges"):
            calculator.calculate(self._quote(bookkeeping_quality="Pristine"), constants)

    def test_not_selected_is_zero(self, calculator, constants):
        result = calculator.calculate(self._quote(service_taas_monthly=False, num_entities=-3), constants)

        assert result.monthly_fee == 0
