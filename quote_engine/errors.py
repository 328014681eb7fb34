"""
Error types raised by the quote pricing engine.

Both derive from ValueError so callers that already treat ValueError as a
client-side problem keep working.
"""


class PricingError(ValueError):
    """Base class for all pricing engine errors."""


class ConfigurationError(PricingError):
    """A constants table is missing an entry or holds an invalid value."""


class InvalidInputError(PricingError):
    """A quote input violates a documented domain constraint."""
