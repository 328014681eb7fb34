"""
Pricing Constants Table

Versioned, externally supplied lookup data for every calculator. The table is
validated once when it is built; calculators only ever read it through
LookupTable.resolve so a missing key surfaces as ConfigurationError.
"""

import copy
import json
from collections.abc import Mapping
from dataclasses import dataclass, replace
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType

from .errors import ConfigurationError
from .lookup import LookupTable, to_decimal

# =============================================================================
# DEFAULT PRICE LIST
# =============================================================================

DEFAULT_CONSTANTS = {
    "version": "2025-09-30",
    "base_monthly_fees": {
        "bookkeeping": 150,
        "taas": 150,
    },
    "transaction_surcharges": {
        "<100": 0,
        "100-300": 100,
        "300-600": 500,
        "600-1000": 800,
        "1000-2000": 1200,
        "2000+": 1600,
    },
    "revenue_multipliers": {
        "<$10K": 1.0,
        "10K-25K": 1.0,
        "25K-75K": 2.2,
        "75K-250K": 3.5,
        "250K-1M": 5.0,
        "1M+": 7.0,
    },
    "taas_revenue_multipliers": {
        "<$10K": 1.0,
        "10K-25K": 1.2,
        "25K-75K": 1.4,
        "75K-250K": 1.6,
        "250K-1M": 1.8,
        "1M+": 2.0,
    },
    "industry_multipliers": {
        "Software/SaaS": {"monthly": 1.0, "cleanup": 1.0},
        "Professional Services": {"monthly": 1.0, "cleanup": 1.1},
        "Consulting": {"monthly": 1.0, "cleanup": 1.05},
        "Healthcare/Medical": {"monthly": 1.4, "cleanup": 1.3},
        "Real Estate": {"monthly": 1.25, "cleanup": 1.05},
        "Property Management": {"monthly": 1.3, "cleanup": 1.2},
        "E-commerce/Retail": {"monthly": 1.35, "cleanup": 1.15},
        "Restaurant/Food Service": {"monthly": 1.6, "cleanup": 1.4},
        "Hospitality": {"monthly": 1.6, "cleanup": 1.4},
        "Construction/Trades": {"monthly": 1.5, "cleanup": 1.08},
        "Manufacturing": {"monthly": 1.45, "cleanup": 1.25},
        "Transportation/Logistics": {"monthly": 1.4, "cleanup": 1.2},
        "Nonprofit": {"monthly": 1.2, "cleanup": 1.15},
        "Law Firm": {"monthly": 1.3, "cleanup": 1.35},
        "Accounting/Finance": {"monthly": 1.1, "cleanup": 1.1},
        "Marketing/Advertising": {"monthly": 1.15, "cleanup": 1.1},
        "Insurance": {"monthly": 1.35, "cleanup": 1.25},
        "Automotive": {"monthly": 1.4, "cleanup": 1.2},
        "Education": {"monthly": 1.25, "cleanup": 1.2},
        "Fitness/Wellness": {"monthly": 1.3, "cleanup": 1.15},
        "Entertainment/Events": {"monthly": 1.5, "cleanup": 1.3},
        "Agriculture": {"monthly": 1.45, "cleanup": 1.2},
        "Technology/IT Services": {"monthly": 1.1, "cleanup": 1.05},
        "Multi-entity/Holding Companies": {"monthly": 1.35, "cleanup": 1.25},
        "Other": {"monthly": 1.2, "cleanup": 1.15},
    },
    "bookkeeping": {
        "setup_multiplier": 0.25,
        "qbo_monthly_fee": 60,
    },
    "taas": {
        "entity_threshold": 5,
        "entity_upcharge_per_unit": 75,
        "state_upcharge_per_unit": 50,
        "max_states": 50,
        "international_filing_fee": 200,
        "owner_threshold": 5,
        "owner_upcharge_per_unit": 25,
        "personal_1040_per_owner": 25,
    },
    "bookkeeping_quality_upcharges": {
        "Clean (Seed)": 0,
        "Clean / New": 0,
        "Not Done / Behind": 25,
        "Messy": 25,
    },
    "payroll": {
        "base_fee": 100,
        "included_employees": 3,
        "employee_fee_per_unit": 12,
        "included_states": 1,
        "state_fee_per_unit": 25,
    },
    "ap": {
        "band_fees": {"0-25": 150, "26-100": 300, "101-250": 600, "251+": 1000},
        "tier_multipliers": {"lite": 1.0, "advanced": 2.5},
        "included_count": 5,
        "surcharge_per_unit": 12,
    },
    "ar": {
        "band_fees": {"0-25": 150, "26-100": 300, "101-250": 600, "251+": 1000},
        "tier_multipliers": {"lite": 1.0, "advanced": 2.5},
        "included_count": 5,
        "surcharge_per_unit": 12,
    },
    "agent_of_service": {
        "base_fee": 150,
        "additional_state_fee": 150,
        "complex_case_fee": 300,
    },
    "projects": {
        "cleanup_fee_per_month": 100,
        "prior_year_filing_fee_per_year": 1500,
    },
    # One-time advisory projects are quoted per engagement; a deployment adds
    # a fee here for each project it sells through the calculator.
    "advisory_project_fees": {},
    "service_tier_fees": {
        "Automated": 0,
        "Guided": 79,
        "Concierge": 249,
    },
    "cfo_advisory": {
        "pay_as_you_go": {"fee": 2400, "product_id": "28945017957"},
        "bundles": {
            "8": {"fee": 2360, "product_id": "28928008785"},
            "16": {"fee": 4640, "product_id": "28945017959"},
            "32": {"fee": 9120, "product_id": "28960863883"},
            "40": {"fee": 11200, "product_id": "28960863884"},
        },
    },
    "discounts": {
        "bundle_bookkeeping_rate": 0.50,
    },
    "commission_rates": {
        "setup": 0.20,
        "first_month": 0.40,
        "monthly_recurring": 0.10,
        "recurring_months": 11,
    },
}


# =============================================================================
# TABLE MODELS
# =============================================================================


@dataclass(frozen=True)
class IndustryMultiplier:
    """Monthly and cleanup multipliers for one industry."""

    monthly: Decimal
    cleanup: Decimal


@dataclass(frozen=True)
class VolumeServiceRates:
    """Band/tier table for an AP or AR service."""

    band_fees: LookupTable
    tier_multipliers: LookupTable
    included_count: Decimal
    surcharge_per_unit: Decimal

    @classmethod
    def from_dict(cls, name: str, data: dict) -> "VolumeServiceRates":
        return cls(
            band_fees=LookupTable.of_decimals(f"{name}.band_fees", _section(data, "band_fees", name)),
            tier_multipliers=LookupTable.of_decimals(
                f"{name}.tier_multipliers", _section(data, "tier_multipliers", name)
            ),
            included_count=to_decimal(_required(data, "included_count", name), f"{name}.included_count"),
            surcharge_per_unit=to_decimal(
                _required(data, "surcharge_per_unit", name), f"{name}.surcharge_per_unit"
            ),
        )


@dataclass(frozen=True)
class CfoAdvisoryPackage:
    """A prepaid CFO advisory deposit and the CRM product it maps to."""

    fee: Decimal
    product_id: str | None = None

    @classmethod
    def from_dict(cls, label: str, data: dict) -> "CfoAdvisoryPackage":
        if not isinstance(data, dict):
            raise ConfigurationError(f"{label} must be a mapping, got: {data!r}")
        product_id = data.get("product_id")
        return cls(
            fee=to_decimal(_required(data, "fee", label), f"{label}.fee"),
            product_id=str(product_id) if product_id is not None else None,
        )


@dataclass(frozen=True)
class ConstantsTable:
    """Complete, validated set of pricing constants."""

    version: str
    base_monthly_fees: LookupTable
    transaction_surcharges: LookupTable
    revenue_multipliers: LookupTable
    taas_revenue_multipliers: LookupTable
    industry_multipliers: LookupTable
    bookkeeping: LookupTable
    taas: LookupTable
    bookkeeping_quality_upcharges: LookupTable
    payroll: LookupTable
    ap: VolumeServiceRates
    ar: VolumeServiceRates
    agent_of_service: LookupTable
    projects: LookupTable
    advisory_project_fees: Mapping
    service_tier_fees: LookupTable
    cfo_pay_as_you_go: CfoAdvisoryPackage
    cfo_bundles: LookupTable
    discounts: LookupTable
    commission_rates: LookupTable

    @classmethod
    def from_dict(cls, data: dict) -> "ConstantsTable":
        if not isinstance(data, dict):
            raise ConfigurationError("Pricing constants must be a JSON object")

        version = data.get("version")
        if not version:
            raise ConfigurationError("Pricing constants must declare a version")

        industries = _section(data, "industry_multipliers")
        industry_entries = {}
        for industry, multipliers in industries.items():
            if not isinstance(multipliers, dict):
                raise ConfigurationError(
                    f"industry_multipliers[{industry!r}] must have 'monthly' and 'cleanup' values"
                )
            industry_entries[industry] = IndustryMultiplier(
                monthly=to_decimal(
                    _required(multipliers, "monthly", f"industry_multipliers[{industry!r}]"),
                    f"industry_multipliers[{industry!r}].monthly",
                ),
                cleanup=to_decimal(
                    multipliers.get("cleanup", multipliers["monthly"]),
                    f"industry_multipliers[{industry!r}].cleanup",
                ),
            )

        cfo = _section(data, "cfo_advisory")
        bundles = {}
        for hours, package in _section(cfo, "bundles", "cfo_advisory").items():
            label = f"cfo_advisory.bundles[{hours}]"
            if not str(hours).isdigit():
                raise ConfigurationError(f"{label} must be keyed by a whole number of hours")
            bundles[int(hours)] = CfoAdvisoryPackage.from_dict(label, package)

        advisory_fees = data.get("advisory_project_fees") or {}
        if not isinstance(advisory_fees, dict):
            raise ConfigurationError("advisory_project_fees must be a mapping")

        return cls(
            version=str(version),
            base_monthly_fees=_decimal_table(data, "base_monthly_fees"),
            transaction_surcharges=_decimal_table(data, "transaction_surcharges"),
            revenue_multipliers=_decimal_table(data, "revenue_multipliers"),
            taas_revenue_multipliers=_decimal_table(data, "taas_revenue_multipliers"),
            industry_multipliers=LookupTable("industry_multipliers", industry_entries),
            bookkeeping=_decimal_table(data, "bookkeeping"),
            taas=_decimal_table(data, "taas"),
            bookkeeping_quality_upcharges=_decimal_table(data, "bookkeeping_quality_upcharges"),
            payroll=_decimal_table(data, "payroll"),
            ap=VolumeServiceRates.from_dict("ap", _section(data, "ap")),
            ar=VolumeServiceRates.from_dict("ar", _section(data, "ar")),
            agent_of_service=_decimal_table(data, "agent_of_service"),
            projects=_decimal_table(data, "projects"),
            advisory_project_fees=MappingProxyType({
                str(key): to_decimal(value, f"advisory_project_fees[{key!r}]")
                for key, value in advisory_fees.items()
            }),
            service_tier_fees=_decimal_table(data, "service_tier_fees"),
            cfo_pay_as_you_go=CfoAdvisoryPackage.from_dict(
                "cfo_advisory.pay_as_you_go", _required(cfo, "pay_as_you_go", "cfo_advisory")
            ),
            cfo_bundles=LookupTable("cfo_advisory.bundles", bundles),
            discounts=_decimal_table(data, "discounts"),
            commission_rates=_decimal_table(data, "commission_rates"),
        )

    def advisory_project_fee(self, project: str) -> Decimal:
        """Fee for a one-time advisory project; unpriced projects are config errors."""
        if project not in self.advisory_project_fees:
            raise ConfigurationError(
                f"No entry for {project!r} in pricing table 'advisory_project_fees'"
            )
        return self.advisory_project_fees[project]

    def with_overrides(self, base_monthly_fee=None, qbo_monthly_fee=None) -> "ConstantsTable":
        """Return a copy with request-level fee overrides applied."""
        table = self
        if base_monthly_fee is not None:
            fees = dict(self.base_monthly_fees)
            fees["bookkeeping"] = to_decimal(base_monthly_fee, "fees.baseMonthlyFee")
            table = replace(table, base_monthly_fees=LookupTable("base_monthly_fees", fees))
        if qbo_monthly_fee is not None:
            settings = dict(self.bookkeeping)
            settings["qbo_monthly_fee"] = to_decimal(qbo_monthly_fee, "fees.qboMonthlyFee")
            table = replace(table, bookkeeping=LookupTable("bookkeeping", settings))
        return table


# =============================================================================
# LOADING
# =============================================================================


def _section(data: dict, key: str, parent: str | None = None) -> dict:
    label = f"{parent}.{key}" if parent else key
    value = data.get(key)
    if not isinstance(value, dict):
        raise ConfigurationError(f"Pricing constants section '{label}' is missing or not a mapping")
    return value


def _required(data: dict, key: str, parent: str):
    if key not in data:
        raise ConfigurationError(f"Pricing constants entry '{parent}.{key}' is missing")
    return data[key]


def _decimal_table(data: dict, key: str) -> LookupTable:
    return LookupTable.of_decimals(key, _section(data, key))


def default_constants() -> ConstantsTable:
    """Build the table for the built-in price list."""
    return ConstantsTable.from_dict(copy.deepcopy(DEFAULT_CONSTANTS))


def load_constants(path: str | Path) -> ConstantsTable:
    """Load and validate a constants table from a JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        raise ConfigurationError(f"Pricing constants file not found: {path}") from None
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Pricing constants file {path} is not valid JSON: {e}") from None
    return ConstantsTable.from_dict(data)
