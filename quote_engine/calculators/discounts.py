"""
Bundle & Discount Resolver

Applies package discounts to specific components only. The discount is
taken from the unrounded pre-discount fee and the result is rounded
afterwards; rounding first and discounting second produces different fees.
"""

from dataclasses import replace
from decimal import Decimal

from ..constants import ConstantsTable
from ..models import FeeResult, PricingConfig, QuotePricingInput
from ..rounding import RoundingStrategy, round_up_to_25


class BundleDiscountResolver:
    """Resolves bundle discounts across per-service results."""

    def apply(
        self,
        services: dict,
        quote: QuotePricingInput,
        constants: ConstantsTable,
        config: PricingConfig | None = None,
        rounding: RoundingStrategy = round_up_to_25,
    ) -> dict:
        """
        Return a new services mapping with every applicable discount applied.

        Bookkeeping + TaaS bundle:
        - Only the bookkeeping monthly fee is reduced
        - Setup fees, TaaS and flat line items are untouched
        - The discounted amount is rounded with the coarse step, not the
          bookkeeping family's whole-unit rounding
        """
        config = config or PricingConfig()
        updated = dict(services)

        if self._qualifies_for_bookkeeping_bundle(quote, config):
            rate = constants.discounts.resolve("bundle_bookkeeping_rate")
            updated["bookkeeping"] = self._discount_bookkeeping(updated["bookkeeping"], rate, rounding)

        return updated

    @staticmethod
    def _qualifies_for_bookkeeping_bundle(quote: QuotePricingInput, config: PricingConfig) -> bool:
        return (
            quote.service_monthly_bookkeeping
            and quote.service_taas_monthly
            and config.is_enabled("bookkeeping")
            and config.is_enabled("taas")
        )

    @staticmethod
    def _discount_bookkeeping(result: FeeResult, rate: Decimal, rounding: RoundingStrategy) -> FeeResult:
        before = result.breakdown["monthlyFeeBeforeDiscount"]
        scaled = result.breakdown["scaledMonthlyFee"]

        after = rounding(scaled * (Decimal("1") - rate))

        breakdown = dict(result.breakdown)
        breakdown.update({
            "discountApplied": True,
            "discountRate": rate,
            "monthlyFeeAfterDiscount": after,
            "packageDiscountMonthly": before - after,
        })
        return replace(result, monthly_fee=after, breakdown=breakdown)
