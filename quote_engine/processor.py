"""
Quote Pricing Processor - Main Orchestrator

Coordinates the quote pricing pipeline through discrete, testable steps.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict

from .calculators import (
    AdvisoryProjectCalculator,
    AgentOfServiceCalculator,
    ApCalculator,
    ArCalculator,
    BookkeepingCalculator,
    BundleDiscountResolver,
    CfoAdvisoryCalculator,
    CleanupProjectCalculator,
    CommissionProjector,
    PayrollCalculator,
    PricingAggregator,
    PriorYearFilingsCalculator,
    QboSubscriptionCalculator,
    ServiceTierCalculator,
    TaasCalculator,
)
from .constants import ConstantsTable, default_constants
from .errors import ConfigurationError, InvalidInputError
from .models import (
    CalendarContext,
    CombinedPricingResult,
    CombinedTotals,
    CommissionProjection,
    FeeResult,
    PricingConfig,
    PricingContext,
    QuotePricingInput,
)
from .output import OutputBuilder
from .rounding import COARSE_ROUNDING_STEP, coarse_rounding, round_half_up
from .validators import InputValidator

logger = logging.getLogger(__name__)


class QuotePricingProcessor:
    """
    Main orchestrator for quote pricing.

    Implements a clear pipeline pattern:
    1. Validate Input
    2. Build Context (constants with request overrides applied)
    3. Calculate Per-Service Fees
    4. Calculate Flat Line Items
    5. Apply Bundle Discounts
    6. Aggregate Totals

    Commission projection runs on the aggregated totals and is exposed
    separately so it can also be requested for arbitrary fee pairs.

    The processor holds no per-request state and may be shared.
    """

    def __init__(self, constants: ConstantsTable | None = None):
        self.constants = constants or default_constants()

        self.validator = InputValidator()
        self.bookkeeping_calculator = BookkeepingCalculator()
        self.taas_calculator = TaasCalculator()
        self.payroll_calculator = PayrollCalculator()
        self.ap_calculator = ApCalculator()
        self.ar_calculator = ArCalculator()
        self.agent_of_service_calculator = AgentOfServiceCalculator()
        self.cleanup_calculator = CleanupProjectCalculator()
        self.prior_year_filings_calculator = PriorYearFilingsCalculator()
        self.cfo_advisory_calculator = CfoAdvisoryCalculator()
        self.advisory_project_calculator = AdvisoryProjectCalculator()
        self.service_tier_calculator = ServiceTierCalculator()
        self.qbo_calculator = QboSubscriptionCalculator()
        self.discount_resolver = BundleDiscountResolver()
        self.aggregator = PricingAggregator()
        self.commission_projector = CommissionProjector()
        self.output_builder = OutputBuilder()

    def process(
        self,
        quote: QuotePricingInput,
        calendar: CalendarContext,
        config: PricingConfig | None = None,
        constants: ConstantsTable | None = None,
    ) -> CombinedPricingResult:
        """
        Price a quote through the complete pipeline.

        Args:
            quote: Parsed QuotePricingInput
            calendar: Month the quote is priced in (drives the setup fee)
            config: Optional request-level overrides
            constants: Optional constants table replacing the processor's own

        Returns:
            CombinedPricingResult with every component and the combined totals
        """
        config = config or PricingConfig()

        # Step 1: Validate
        self.validator.validate(quote, calendar, constants or self.constants)

        # Step 2: Build context
        ctx = self._build_context(quote, calendar, config, constants or self.constants)

        # Step 3: Per-service fees
        self._calculate_services(ctx)

        # Step 4: Flat line items (never discounted)
        self._calculate_line_items(ctx)

        # Step 5: Bundle discounts, rounded with the coarse step
        ctx.services = self.discount_resolver.apply(
            ctx.services, quote, ctx.constants, config, rounding=self._coarse_rounding(config)
        )

        # Step 6: Aggregate
        result = self.aggregator.aggregate(ctx)
        logger.debug(
            "Priced quote: monthly=%s setup=%s (constants %s)",
            result.combined.monthly_fee, result.combined.setup_fee, result.constants_version,
        )
        return result

    def project_commission(
        self, combined: CombinedTotals, constants: ConstantsTable | None = None
    ) -> CommissionProjection:
        """Project sales commission from combined monthly and setup fees."""
        return self.commission_projector.project(combined, constants or self.constants)

    def process_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Price a quote from raw dictionary input.

        Accepts either a request envelope {"input", "config", "calendarMonth"}
        or a bare quote input. Convenience method for API usage.
        """
        if not isinstance(data, dict):
            raise InvalidInputError("Request body must be a JSON object")

        if "input" in data:
            quote_data = data.get("input")
            config = PricingConfig.from_dict(data.get("config"))
            month = data.get("calendarMonth", data.get("calendar_month"))
        else:
            quote_data, config, month = data, PricingConfig(), None

        quote = QuotePricingInput.from_dict(quote_data)
        calendar = CalendarContext.from_value(month) if month is not None else current_calendar()

        result = self.process(quote, calendar, config)
        commission = self.project_commission(result.combined)
        return self.output_builder.build(result, commission)

    def commission_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Project commission for a {"monthlyFee", "setupFee"} payload."""
        combined = CombinedTotals.from_dict(data)
        return self.output_builder.commission(self.project_commission(combined))

    def _build_context(
        self,
        quote: QuotePricingInput,
        calendar: CalendarContext,
        config: PricingConfig,
        constants: ConstantsTable,
    ) -> PricingContext:
        """Build the initial pricing context."""
        constants = constants.with_overrides(
            base_monthly_fee=config.base_monthly_fee,
            qbo_monthly_fee=config.qbo_monthly_fee,
        )
        return PricingContext(quote=quote, constants=constants, calendar=calendar, config=config)

    def _calculate_services(self, ctx: PricingContext) -> None:
        quote, constants, config = ctx.quote, ctx.constants, ctx.config

        services = {
            "bookkeeping": lambda: self.bookkeeping_calculator.calculate(
                quote, constants, ctx.calendar.month, rounding=round_half_up
            ),
            "taas": lambda: self.taas_calculator.calculate(
                quote, constants, rounding=self._coarse_rounding(config)
            ),
            "payroll": lambda: self.payroll_calculator.calculate(quote, constants),
            "ap": lambda: self.ap_calculator.calculate(quote, constants),
            "ar": lambda: self.ar_calculator.calculate(quote, constants),
            "agent_of_service": lambda: self.agent_of_service_calculator.calculate(quote, constants),
            "cleanup": lambda: self.cleanup_calculator.calculate(quote, constants),
            "prior_year_filings": lambda: self.prior_year_filings_calculator.calculate(quote, constants),
        }
        for service, calculate in services.items():
            ctx.services[service] = calculate() if config.is_enabled(service) else FeeResult.zero()
            logger.debug("%s: %s", service, ctx.services[service])

        if config.is_enabled("cfo_advisory"):
            result, product_id = self.cfo_advisory_calculator.calculate(quote, constants)
            ctx.services["cfo_advisory"] = result
            ctx.cfo_advisory_product_id = product_id
        else:
            ctx.services["cfo_advisory"] = FeeResult.zero()

        if config.is_enabled("advisory_projects"):
            projects = self.advisory_project_calculator.calculate(quote, constants)
            ctx.advisory_projects = {
                project: result for project, result in projects.items() if config.is_enabled(project)
            }

    def _calculate_line_items(self, ctx: PricingContext) -> None:
        quote, constants, config = ctx.quote, ctx.constants, ctx.config

        if config.is_enabled("service_tier"):
            ctx.line_items["service_tier"] = self.service_tier_calculator.calculate(quote, constants)
        if config.is_enabled("qbo"):
            ctx.line_items["qbo"] = self.qbo_calculator.calculate(quote, constants)

    @staticmethod
    def _coarse_rounding(config: PricingConfig):
        return coarse_rounding(config.monthly_rounding_step or COARSE_ROUNDING_STEP)


def current_calendar() -> CalendarContext:
    """Read the month from the clock. Only called at the request boundary."""
    return CalendarContext(month=datetime.now().month)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def calculate_quote_pricing(
    quote,
    constants: ConstantsTable | None = None,
    now: CalendarContext | None = None,
    config: PricingConfig | None = None,
) -> CombinedPricingResult:
    """
    Price one quote.

    `quote` may be a QuotePricingInput or its dict form. When `now` is
    omitted the current month is read once here, before any pricing runs.
    """
    if isinstance(quote, dict):
        quote = QuotePricingInput.from_dict(quote)
    calendar = now if now is not None else current_calendar()
    return QuotePricingProcessor(constants).process(quote, calendar, config)


def project_commission(
    combined: CombinedTotals, constants: ConstantsTable | None = None
) -> CommissionProjection:
    """Project commission for combined totals using the constants' rates."""
    return CommissionProjector().project(combined, constants or default_constants())


def process_quote_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """Price a quote from a Python dict and return a Python dict."""
    processor = QuotePricingProcessor()
    return processor.process_from_dict(input_data)


def process_quote_from_json(json_input: str) -> str:
    """
    Price a quote from a JSON string and return a JSON string.
    Errors are reported in the response body instead of raised.
    """
    try:
        input_data = json.loads(json_input)
        processor = QuotePricingProcessor()
        result = processor.process_from_dict(input_data)
        return json.dumps(result, indent=2)

    except ValueError as e:
        error_response = {"error": str(e), "status": error_status(e)}
        return json.dumps(error_response, indent=2)

    except Exception as e:
        logger.error("Unexpected error pricing quote: %s", e, exc_info=True)
        error_response = {"error": str(e), "status": "failed"}
        return json.dumps(error_response, indent=2)


def error_status(error: Exception) -> str:
    """Response status for a client-side error."""
    if isinstance(error, ConfigurationError):
        return "configuration_error"
    return "validation_failed"
