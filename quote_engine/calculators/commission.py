"""
Commission Projector

Projects sales commission from a quote's combined fees.
"""

from decimal import Decimal

from ..constants import ConstantsTable
from ..models import CombinedTotals, CommissionProjection


class CommissionProjector:
    """Derives commission projections from combined monthly and setup fees."""

    def project(self, combined: CombinedTotals, constants: ConstantsTable) -> CommissionProjection:
        """
        Project commissions for the first year of an engagement.

        Month 1:
        - setup commission = setup fee * setup rate (20%)
        - first-month commission = monthly fee * first-month rate (40%)

        Months 2-12:
        - recurring commission = monthly fee * recurring rate (10%) each month

        Values are advisory only and are not rounded here.
        """
        rates = constants.commission_rates
        monthly_fee = Decimal(combined.monthly_fee)
        setup_fee = Decimal(combined.setup_fee)

        setup_commission = setup_fee * rates.resolve("setup")
        first_month_commission = monthly_fee * rates.resolve("first_month")
        monthly_recurring_commission = monthly_fee * rates.resolve("monthly_recurring")

        first_month_total = setup_commission + first_month_commission
        twelve_month_total = (
            first_month_total + monthly_recurring_commission * rates.resolve("recurring_months")
        )

        return CommissionProjection(
            setup_commission=setup_commission,
            first_month_commission=first_month_commission,
            monthly_recurring_commission=monthly_recurring_commission,
            first_month_total=first_month_total,
            twelve_month_total=twelve_month_total,
        )
