"""
QUOTE PRICING ENGINE
Bookkeeping, tax-as-a-service and add-on pricing with commission projection
"""

from .constants import ConstantsTable, default_constants, load_constants
from .errors import ConfigurationError, InvalidInputError, PricingError
from .models import CalendarContext, CombinedPricingResult, PricingConfig, QuotePricingInput
from .output import to_display_pricing
from .processor import QuotePricingProcessor, calculate_quote_pricing, project_commission

__all__ = [
    'QuotePricingProcessor',
    'QuotePricingInput',
    'CombinedPricingResult',
    'CalendarContext',
    'PricingConfig',
    'ConstantsTable',
    'default_constants',
    'load_constants',
    'calculate_quote_pricing',
    'project_commission',
    'to_display_pricing',
    'PricingError',
    'ConfigurationError',
    'InvalidInputError',
]
