"""
Aggregator

Sums every component into combined monthly and setup totals. Components are
already rounded individually, so the totals are plain integer sums.
"""

from dataclasses import replace

from ..models import CombinedPricingResult, CombinedTotals, FeeResult, PricingContext


class PricingAggregator:
    """Builds the combined pricing result from processed components."""

    def aggregate(self, ctx: PricingContext) -> CombinedPricingResult:
        services = ctx.services
        line_items = ctx.line_items

        result = CombinedPricingResult(
            bookkeeping=services.get("bookkeeping", FeeResult.zero()),
            taas=services.get("taas", FeeResult.zero()),
            payroll=services.get("payroll", FeeResult.zero()),
            ap=services.get("ap", FeeResult.zero()),
            ar=services.get("ar", FeeResult.zero()),
            agent_of_service=services.get("agent_of_service", FeeResult.zero()),
            cleanup_projects=services.get("cleanup", FeeResult.zero()),
            prior_year_filings=services.get("prior_year_filings", FeeResult.zero()),
            cfo_advisory=services.get("cfo_advisory", FeeResult.zero()),
            advisory_projects=dict(ctx.advisory_projects),
            service_tier=line_items.get("service_tier", FeeResult.zero()),
            qbo=line_items.get("qbo", FeeResult.zero()),
            combined=CombinedTotals(),
            includes_bookkeeping=ctx.quote.service_monthly_bookkeeping or ctx.quote.service_cleanup_projects,
            includes_taas=ctx.quote.service_taas_monthly or ctx.quote.service_prior_year_filings,
            cfo_advisory_product_id=ctx.cfo_advisory_product_id,
            constants_version=ctx.constants.version,
        )

        components = result.components()
        totals = CombinedTotals(
            monthly_fee=sum(component.monthly_fee for component in components),
            setup_fee=sum(component.setup_fee for component in components),
        )

        return replace(result, combined=totals)
