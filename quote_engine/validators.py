"""
Input Validation for the Quote Pricing Engine

Validates quote input before pricing begins.
Raises InvalidInputError with clear messages for any constraint violations.
Only parameters of selected services are checked; a disabled service's stray
values never affect the quote.
"""

from .constants import ConstantsTable, default_constants
from .errors import InvalidInputError
from .lookup import LookupTable
from .models import CalendarContext, QuotePricingInput

CFO_ADVISORY_TYPES = ("pay_as_you_go", "bundled")


class InputValidator:
    """Validates quote input according to business rules."""

    def validate(
        self,
        quote: QuotePricingInput,
        calendar: CalendarContext,
        constants: ConstantsTable | None = None,
    ) -> None:
        """
        Run all validations. Raises InvalidInputError if any check fails.

        AP/AR tiers are checked against the tier tables of `constants`
        (the built-in price list when omitted).
        """
        self._validate_calendar(calendar)
        if quote.service_ap_service or quote.service_ar_service:
            constants = constants or default_constants()

        if quote.service_monthly_bookkeeping:
            self._require_present("monthlyRevenueRange", quote.monthly_revenue_range, "bookkeeping")
            self._require_present("monthlyTransactions", quote.monthly_transactions, "bookkeeping")
            self._require_present("industry", quote.industry, "bookkeeping")
        if quote.service_taas_monthly:
            self._require_present("monthlyRevenueRange", quote.monthly_revenue_range, "tax-as-a-service")
            self._require_present("industry", quote.industry, "tax-as-a-service")
            self._validate_taas(quote)
        if quote.service_payroll_service:
            self._validate_payroll(quote)
        if quote.service_ap_service:
            self._require_present("apVendorBillsBand", quote.ap_vendor_bills_band, "accounts payable")
            self._require_non_negative("apVendorCount", quote.ap_vendor_count)
            self._require_non_negative("customApVendorCount", quote.custom_ap_vendor_count)
            self._validate_tier("apServiceTier", quote.ap_service_tier, constants.ap.tier_multipliers)
        if quote.service_ar_service:
            self._require_present("arCustomerInvoicesBand", quote.ar_customer_invoices_band, "accounts receivable")
            self._require_non_negative("arCustomerCount", quote.ar_customer_count)
            self._require_non_negative("customArCustomerCount", quote.custom_ar_customer_count)
            self._validate_tier("arServiceTier", quote.ar_service_tier, constants.ar.tier_multipliers)
        if quote.service_agent_of_service:
            self._require_non_negative(
                "agentOfServiceAdditionalStates", quote.agent_of_service_additional_states
            )
        if quote.service_cfo_advisory:
            self._validate_cfo_advisory(quote)

    def _validate_calendar(self, calendar: CalendarContext) -> None:
        if calendar.month is None or not (1 <= calendar.month <= 12):
            raise InvalidInputError(f"calendar month must be between 1 and 12, got: {calendar.month}")

    def _validate_taas(self, quote: QuotePricingInput) -> None:
        """Validate tax-as-a-service counts."""
        self._require_non_negative("numEntities", quote.num_entities)
        self._require_non_negative("customNumEntities", quote.custom_num_entities)
        self._require_non_negative("statesFiled", quote.states_filed)
        self._require_non_negative("customStatesFiled", quote.custom_states_filed)
        self._require_non_negative("numBusinessOwners", quote.num_business_owners)
        self._require_non_negative("customNumBusinessOwners", quote.custom_num_business_owners)

    def _validate_payroll(self, quote: QuotePricingInput) -> None:
        self._require_non_negative("payrollEmployeeCount", quote.payroll_employee_count)
        self._require_non_negative("payrollStateCount", quote.payroll_state_count)

    def _validate_cfo_advisory(self, quote: QuotePricingInput) -> None:
        """Validate CFO advisory package selection."""
        if quote.cfo_advisory_type is None:
            return

        if quote.cfo_advisory_type not in CFO_ADVISORY_TYPES:
            raise InvalidInputError(
                f"Invalid cfoAdvisoryType: {quote.cfo_advisory_type}. "
                f"Must be 'pay_as_you_go' or 'bundled'"
            )

        if quote.cfo_advisory_type == "bundled" and quote.cfo_advisory_bundle_hours is not None:
            if quote.cfo_advisory_bundle_hours <= 0:
                raise InvalidInputError(
                    f"cfoAdvisoryBundleHours must be positive, got: {quote.cfo_advisory_bundle_hours}"
                )

    @staticmethod
    def _require_non_negative(name: str, value: int | None) -> None:
        if value is not None and value < 0:
            raise InvalidInputError(f"{name} cannot be negative, got: {value}")

    @staticmethod
    def _require_present(name: str, value, service: str) -> None:
        if value is None:
            raise InvalidInputError(f"{name} is required when {service} is selected")

    @staticmethod
    def _validate_tier(name: str, tier: str | None, tiers: LookupTable) -> None:
        # Unset tier falls back to 'lite'
        if tier is not None and tier not in tiers:
            raise InvalidInputError(f"Invalid {name}: {tier}. Must be one of: {', '.join(tiers)}")
