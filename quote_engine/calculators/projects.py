"""
One-Time Project Calculators

Agent of service, cleanup projects, prior-year filings, CFO advisory
deposits and advisory projects. All produce setup (one-time) fees only and
never interact with discounts.
"""

from ..constants import ConstantsTable
from ..models import FeeResult, QuotePricingInput
from ..rounding import round_half_up


class AgentOfServiceCalculator:
    """Registered agent: base fee + per additional state + complex case upgrade."""

    service = "agent_of_service"

    def calculate(self, quote: QuotePricingInput, constants: ConstantsTable) -> FeeResult:
        if not quote.service_agent_of_service:
            return FeeResult.zero()

        rates = constants.agent_of_service
        base_fee = rates.resolve("base_fee")
        states_fee = quote.agent_of_service_additional_states * rates.resolve("additional_state_fee")
        complex_fee = rates.resolve("complex_case_fee") if quote.agent_of_service_complex_case else 0

        fee = round_half_up(base_fee + states_fee + complex_fee)
        return FeeResult(
            monthly_fee=0,
            setup_fee=fee,
            breakdown={
                "baseFee": base_fee,
                "additionalStatesFee": states_fee,
                "complexCaseFee": complex_fee,
                "totalFee": fee,
            },
        )


class CleanupProjectCalculator:
    """Cleanup / catch-up: flat fee per selected month."""

    service = "cleanup"

    def calculate(self, quote: QuotePricingInput, constants: ConstantsTable) -> FeeResult:
        if not quote.service_cleanup_projects:
            return FeeResult.zero()

        per_month = constants.projects.resolve("cleanup_fee_per_month")
        months = len(quote.cleanup_periods)
        fee = round_half_up(per_month * months)
        return FeeResult(
            monthly_fee=0,
            setup_fee=fee,
            breakdown={"months": months, "feePerMonth": per_month, "cleanupProjectFee": fee},
        )


class PriorYearFilingsCalculator:
    """Prior-year filings: flat fee per unfiled year selected."""

    service = "prior_year_filings"

    def calculate(self, quote: QuotePricingInput, constants: ConstantsTable) -> FeeResult:
        if not quote.service_prior_year_filings:
            return FeeResult.zero()

        per_year = constants.projects.resolve("prior_year_filing_fee_per_year")
        years = len(quote.prior_year_filings)
        fee = round_half_up(per_year * years)
        return FeeResult(
            monthly_fee=0,
            setup_fee=fee,
            breakdown={"years": years, "feePerYear": per_year, "priorYearFilingsFee": fee},
        )


class CfoAdvisoryCalculator:
    """
    CFO advisory deposit.

    Pay-as-you-go collects a fixed hourly deposit; bundled packages prepay a
    block of hours at a reduced rate. Each package maps to a CRM product.
    """

    service = "cfo_advisory"

    def calculate(self, quote: QuotePricingInput, constants: ConstantsTable) -> tuple[FeeResult, str | None]:
        """Return the deposit fee result and the package's product id."""
        if not quote.service_cfo_advisory:
            return FeeResult.zero(), None

        if quote.cfo_advisory_type == "pay_as_you_go":
            package = constants.cfo_pay_as_you_go
        elif quote.cfo_advisory_type == "bundled" and quote.cfo_advisory_bundle_hours:
            package = constants.cfo_bundles.resolve(quote.cfo_advisory_bundle_hours)
        else:
            # Advisory selected but no package chosen yet
            return FeeResult.zero(), None

        fee = round_half_up(package.fee)
        return (
            FeeResult(
                monthly_fee=0,
                setup_fee=fee,
                breakdown={
                    "cfoAdvisoryType": quote.cfo_advisory_type,
                    "bundleHours": quote.cfo_advisory_bundle_hours,
                    "cfoAdvisoryFee": fee,
                },
            ),
            package.product_id,
        )


class AdvisoryProjectCalculator:
    """Entity optimization, nexus study, cost segregation and R&D credit projects."""

    def calculate(self, quote: QuotePricingInput, constants: ConstantsTable) -> dict:
        results = {}
        for project in sorted(quote.advisory_projects):
            fee = round_half_up(constants.advisory_project_fee(project))
            results[project] = FeeResult(monthly_fee=0, setup_fee=fee, breakdown={"projectFee": fee})
        return results
