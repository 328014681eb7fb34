"""
Flat Line Items

Fixed recurring charges that sit outside every discount rule: the service
tier fee and the managed QBO subscription.
"""

from ..constants import ConstantsTable
from ..models import FeeResult, QuotePricingInput
from ..rounding import round_half_up

DEFAULT_SERVICE_TIER = "Automated"


class ServiceTierCalculator:
    """Monthly support-tier fee (Automated / Guided / Concierge)."""

    service = "service_tier"

    def calculate(self, quote: QuotePricingInput, constants: ConstantsTable) -> FeeResult:
        tier = quote.service_tier or DEFAULT_SERVICE_TIER
        fee = round_half_up(constants.service_tier_fees.resolve(tier))
        return FeeResult(monthly_fee=fee, setup_fee=0, breakdown={"serviceTier": tier, "serviceTierFee": fee})


class QboSubscriptionCalculator:
    """Managed QuickBooks Online subscription."""

    service = "qbo"

    def calculate(self, quote: QuotePricingInput, constants: ConstantsTable) -> FeeResult:
        if not quote.qbo_subscription:
            return FeeResult.zero()

        fee = round_half_up(constants.bookkeeping.resolve("qbo_monthly_fee"))
        return FeeResult(monthly_fee=fee, setup_fee=0, breakdown={"qboFee": fee})
