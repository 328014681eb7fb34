"""
Monthly Bookkeeping Calculator

monthly = (base fee + transaction-band surcharge)
          * revenue multiplier * industry monthly multiplier

The monthly fee is rounded to the nearest whole unit. The setup fee scales
with the calendar month the engagement starts in.
"""

from decimal import Decimal

from ..constants import ConstantsTable
from ..models import FeeResult, QuotePricingInput
from ..rounding import RoundingStrategy, round_half_up


class BookkeepingCalculator:
    """Calculates recurring bookkeeping and its one-time setup fee."""

    service = "bookkeeping"

    def calculate(
        self,
        quote: QuotePricingInput,
        constants: ConstantsTable,
        calendar_month: int,
        rounding: RoundingStrategy = round_half_up,
    ) -> FeeResult:
        if not quote.service_monthly_bookkeeping:
            return FeeResult.zero()

        base_fee = constants.base_monthly_fees.resolve("bookkeeping")
        tx_fee = constants.transaction_surcharges.resolve(quote.monthly_transactions)
        revenue_multiplier = constants.revenue_multipliers.resolve(quote.monthly_revenue_range)
        industry = constants.industry_multipliers.resolve(quote.industry)

        raw_before_multipliers = base_fee + tx_fee
        scaled = raw_before_multipliers * revenue_multiplier * industry.monthly
        monthly_fee = rounding(scaled)

        setup_multiplier = constants.bookkeeping.resolve("setup_multiplier")
        setup_fee = self.calculate_setup_fee(monthly_fee, calendar_month, setup_multiplier)

        return FeeResult(
            monthly_fee=monthly_fee,
            setup_fee=setup_fee,
            breakdown={
                "baseMonthlyFee": base_fee,
                "txFee": tx_fee,
                "rawBeforeMultipliers": raw_before_multipliers,
                "revenueMultiplier": revenue_multiplier,
                "industryMultiplier": industry.monthly,
                "scaledMonthlyFee": scaled,
                "monthlyFeeBeforeDiscount": monthly_fee,
                "monthlyFeeAfterDiscount": monthly_fee,
                "discountApplied": False,
                "currentMonth": calendar_month,
                "setupMultiplier": setup_multiplier,
                "setupFee": setup_fee,
            },
        )

    @staticmethod
    def calculate_setup_fee(monthly_fee_before_discount: int, calendar_month: int, multiplier: Decimal) -> int:
        """
        Setup fee = monthly fee before discount * calendar month (1-12) * multiplier.

        Example: $400/month quoted in March -> 400 * 3 * 0.25 = $300.
        """
        return round_half_up(Decimal(monthly_fee_before_discount) * calendar_month * multiplier)
