"""
Output Builder

Constructs the API response from a priced quote.
"""

from collections.abc import Mapping
from decimal import Decimal

from .models import CombinedPricingResult, CommissionProjection, FeeResult


def to_number(value):
    """Convert Decimal to float for JSON; integers stay integers."""
    if isinstance(value, Decimal):
        return float(value)
    return value


def _serialize(value):
    if isinstance(value, Mapping):
        return {key: _serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    return to_number(value)


def to_display_pricing(result: CombinedPricingResult) -> dict:
    """
    Flatten a combined result into the fields a quote form renders.

    One-time fees (agent of service, projects, CFO advisory) are reported
    on their own; they are already part of totalSetupFee.
    """
    bookkeeping = result.bookkeeping
    return {
        "bookkeepingMonthlyFee": bookkeeping.monthly_fee,
        "bookkeepingSetupFee": bookkeeping.setup_fee,
        "taasMonthlyFee": result.taas.monthly_fee,
        "taasSetupFee": result.taas.setup_fee,
        "serviceTierFee": result.service_tier.monthly_fee,
        "payrollFee": result.payroll.monthly_fee,
        "apFee": result.ap.monthly_fee,
        "arFee": result.ar.monthly_fee,
        "qboFee": result.qbo.monthly_fee,
        "agentOfServiceFee": result.agent_of_service.setup_fee,
        "cleanupProjectFee": result.cleanup_projects.setup_fee,
        "priorYearFilingsFee": result.prior_year_filings.setup_fee,
        "cfoAdvisoryFee": result.cfo_advisory.setup_fee,
        "cfoAdvisoryHubspotProductId": result.cfo_advisory_product_id,
        "projectFees": {
            project: fee.setup_fee for project, fee in result.advisory_projects.items()
        },
        "packageDiscountMonthly": bookkeeping.breakdown.get("packageDiscountMonthly", 0),
        "totalMonthlyFee": result.combined.monthly_fee,
        "totalSetupFee": result.combined.setup_fee,
    }


class OutputBuilder:
    """Builds the final output response."""

    def build(self, result: CombinedPricingResult, commission: CommissionProjection) -> dict:
        """Construct the complete response for a priced quote."""
        return {
            "pricing": self.pricing(result),
            "display": to_display_pricing(result),
            "commission": self.commission(commission),
        }

    def pricing(self, result: CombinedPricingResult) -> dict:
        """Per-component fees with breakdowns, plus combined totals."""
        return {
            "bookkeeping": self._fee(result.bookkeeping),
            "taas": self._fee(result.taas),
            "payroll": self._fee(result.payroll),
            "ap": self._fee(result.ap),
            "ar": self._fee(result.ar),
            "agentOfService": self._fee(result.agent_of_service),
            "cleanupProjects": self._fee(result.cleanup_projects),
            "priorYearFilings": self._fee(result.prior_year_filings),
            "cfoAdvisory": self._fee(result.cfo_advisory),
            "advisoryProjects": {
                project: self._fee(fee) for project, fee in result.advisory_projects.items()
            },
            "serviceTier": self._fee(result.service_tier),
            "qbo": self._fee(result.qbo),
            "combined": {
                "monthlyFee": result.combined.monthly_fee,
                "setupFee": result.combined.setup_fee,
            },
            "includesBookkeeping": result.includes_bookkeeping,
            "includesTaas": result.includes_taas,
            "cfoAdvisoryHubspotProductId": result.cfo_advisory_product_id,
            "constantsVersion": result.constants_version,
        }

    def commission(self, projection: CommissionProjection) -> dict:
        return {
            "setupCommission": to_number(projection.setup_commission),
            "firstMonthCommission": to_number(projection.first_month_commission),
            "monthlyRecurringCommission": to_number(projection.monthly_recurring_commission),
            "firstMonthTotal": to_number(projection.first_month_total),
            "twelveMonthTotal": to_number(projection.twelve_month_total),
        }

    def _fee(self, fee: FeeResult) -> dict:
        return {
            "monthlyFee": fee.monthly_fee,
            "setupFee": fee.setup_fee,
            "breakdown": _serialize(fee.breakdown),
        }
