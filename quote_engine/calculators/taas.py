"""
Tax-as-a-Service Calculator

TaaS shares the bookkeeping shape (base + surcharges, then revenue and
industry multipliers) but always rounds to the coarse step. TaaS has no
setup fee.
"""

from decimal import Decimal

from ..constants import ConstantsTable
from ..models import FeeResult, QuotePricingInput
from ..rounding import RoundingStrategy, round_up_to_25


class TaasCalculator:
    """Calculates the monthly tax-as-a-service fee."""

    service = "taas"

    def calculate(
        self,
        quote: QuotePricingInput,
        constants: ConstantsTable,
        rounding: RoundingStrategy = round_up_to_25,
    ) -> FeeResult:
        if not quote.service_taas_monthly:
            return FeeResult.zero()

        settings = constants.taas
        base_fee = constants.base_monthly_fees.resolve("taas")
        revenue_multiplier = constants.taas_revenue_multipliers.resolve(quote.monthly_revenue_range)
        industry = constants.industry_multipliers.resolve(quote.industry)

        upcharges = {
            "entityUpcharge": self._entity_upcharge(quote, settings),
            "stateUpcharge": self._state_upcharge(quote, settings),
            "intlUpcharge": (
                settings.resolve("international_filing_fee") if quote.international_filing else Decimal("0")
            ),
            "ownerUpcharge": self._owner_upcharge(quote, settings),
            "bookUpcharge": self._quality_upcharge(quote, constants),
            "personal1040": self._personal_1040(quote, settings),
        }

        raw_before_multipliers = base_fee + sum(upcharges.values())
        scaled = raw_before_multipliers * revenue_multiplier * industry.monthly
        monthly_fee = rounding(scaled)

        return FeeResult(
            monthly_fee=monthly_fee,
            setup_fee=0,
            breakdown={
                "base": base_fee,
                **upcharges,
                "beforeMultipliers": raw_before_multipliers,
                "industryMultiplier": industry.monthly,
                "revenueMultiplier": revenue_multiplier,
                "scaledMonthlyFee": scaled,
                "monthlyFee": monthly_fee,
            },
        )

    def _entity_upcharge(self, quote, settings) -> Decimal:
        """Every entity above the threshold adds a flat monthly upcharge."""
        extra = quote.effective_num_entities - settings.resolve("entity_threshold")
        if extra <= 0:
            return Decimal("0")
        return extra * settings.resolve("entity_upcharge_per_unit")

    def _state_upcharge(self, quote, settings) -> Decimal:
        """Per state above the first, capped at max_states in total."""
        states = quote.effective_states_filed
        if states <= 1:
            return Decimal("0")
        additional = min(states - 1, settings.resolve("max_states") - 1)
        return additional * settings.resolve("state_upcharge_per_unit")

    def _owner_upcharge(self, quote, settings) -> Decimal:
        extra = quote.effective_num_business_owners - settings.resolve("owner_threshold")
        if extra <= 0:
            return Decimal("0")
        return extra * settings.resolve("owner_upcharge_per_unit")

    def _quality_upcharge(self, quote, constants) -> Decimal:
        # Not reported means no quality upcharge
        if quote.bookkeeping_quality is None:
            return Decimal("0")
        return constants.bookkeeping_quality_upcharges.resolve(quote.bookkeeping_quality)

    def _personal_1040(self, quote, settings) -> Decimal:
        if not quote.include_1040s:
            return Decimal("0")
        return quote.effective_num_business_owners * settings.resolve("personal_1040_per_owner")
