"""
Accounts Payable / Accounts Receivable Calculators

monthly = (volume band fee + per-counterparty surcharge above the included
count) * tier multiplier
"""

from decimal import Decimal

from ..constants import ConstantsTable, VolumeServiceRates
from ..models import FeeResult, QuotePricingInput
from ..rounding import round_half_up

DEFAULT_TIER = "lite"


class VolumeServiceCalculator:
    """Shared band/tier pricing for AP and AR."""

    service: str = ""
    counterparty_label: str = ""

    def calculate(self, quote: QuotePricingInput, constants: ConstantsTable) -> FeeResult:
        if not self._is_selected(quote):
            return FeeResult.zero()

        rates = self._rates(constants)
        band, count, tier = self._parameters(quote)
        tier = tier or DEFAULT_TIER

        base_fee = rates.band_fees.resolve(band)
        multiplier = rates.tier_multipliers.resolve(tier)
        extra = max(0, count - rates.included_count)
        surcharge = extra * rates.surcharge_per_unit

        monthly_fee = round_half_up((base_fee + surcharge) * multiplier)

        return FeeResult(
            monthly_fee=monthly_fee,
            setup_fee=0,
            breakdown={
                "baseFee": base_fee,
                self.counterparty_label: Decimal(surcharge),
                "tierMultiplier": multiplier,
                f"{self.service}ServiceTier": tier,
                "monthlyFee": monthly_fee,
            },
        )

    def _is_selected(self, quote: QuotePricingInput) -> bool:
        raise NotImplementedError

    def _rates(self, constants: ConstantsTable) -> VolumeServiceRates:
        raise NotImplementedError

    def _parameters(self, quote: QuotePricingInput) -> tuple:
        raise NotImplementedError


class ApCalculator(VolumeServiceCalculator):
    """Accounts payable: priced by vendor-bill band and vendor count."""

    service = "ap"
    counterparty_label = "vendorSurcharge"

    def _is_selected(self, quote):
        return quote.service_ap_service

    def _rates(self, constants):
        return constants.ap

    def _parameters(self, quote):
        return quote.ap_vendor_bills_band, quote.effective_ap_vendor_count, quote.ap_service_tier


class ArCalculator(VolumeServiceCalculator):
    """Accounts receivable: priced by customer-invoice band and customer count."""

    service = "ar"
    counterparty_label = "customerSurcharge"

    def _is_selected(self, quote):
        return quote.service_ar_service

    def _rates(self, constants):
        return constants.ar

    def _parameters(self, quote):
        return quote.ar_customer_invoices_band, quote.effective_ar_customer_count, quote.ar_service_tier
