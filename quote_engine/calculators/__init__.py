"""
Calculators Package

Provides all calculation components for quote pricing.
"""

from .aggregate import PricingAggregator
from .ap_ar import ApCalculator, ArCalculator
from .bookkeeping import BookkeepingCalculator
from .commission import CommissionProjector
from .discounts import BundleDiscountResolver
from .line_items import QboSubscriptionCalculator, ServiceTierCalculator
from .payroll import PayrollCalculator
from .projects import (
    AdvisoryProjectCalculator,
    AgentOfServiceCalculator,
    CfoAdvisoryCalculator,
    CleanupProjectCalculator,
    PriorYearFilingsCalculator,
)
from .taas import TaasCalculator

__all__ = [
    "BookkeepingCalculator",
    "TaasCalculator",
    "PayrollCalculator",
    "ApCalculator",
    "ArCalculator",
    "AgentOfServiceCalculator",
    "CleanupProjectCalculator",
    "PriorYearFilingsCalculator",
    "CfoAdvisoryCalculator",
    "AdvisoryProjectCalculator",
    "ServiceTierCalculator",
    "QboSubscriptionCalculator",
    "BundleDiscountResolver",
    "PricingAggregator",
    "CommissionProjector",
]
