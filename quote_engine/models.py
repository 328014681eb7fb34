"""
Domain Models for the Quote Pricing Engine

Dataclasses for quote inputs, per-service fee results and combined pricing.
Multipliers and intermediate amounts use Decimal; fees at the engine
boundary are whole-unit integers.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from types import MappingProxyType

from .constants import ConstantsTable
from .errors import InvalidInputError

# =============================================================================
# INPUT HELPERS
# =============================================================================


def _lookup(data: dict, *keys, default=None):
    """Return the first present key (camelCase form first, then snake_case)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _as_int(value, label: str, default: int | None = None) -> int | None:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise InvalidInputError(f"{label} must be a whole number, got: {value!r}")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidInputError(f"{label} must be a whole number, got: {value!r}") from None
    if not number.is_finite() or number != number.to_integral_value():
        raise InvalidInputError(f"{label} must be a whole number, got: {value!r}")
    return int(number)


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def _as_str(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_tuple(value, label: str) -> tuple:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value)
    raise InvalidInputError(f"{label} must be a list, got: {value!r}")


def _as_section(data: dict, key: str, label: str) -> dict:
    section = data.get(key)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise InvalidInputError(f"{label} must be a JSON object, got: {section!r}")
    return section


def _as_amount(value, label: str) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidInputError(f"{label} must be a number, got: {value!r}")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidInputError(f"{label} must be a number, got: {value!r}") from None
    if not amount.is_finite() or amount < 0:
        raise InvalidInputError(f"{label} must be a non-negative number, got: {value!r}")
    return amount


# =============================================================================
# INPUT MODELS
# =============================================================================

ADVISORY_PROJECTS = {
    "entity_optimization": ("serviceEntityOptimization", "service_entity_optimization"),
    "nexus_study": ("serviceNexusStudy", "service_nexus_study"),
    "cost_segregation": ("serviceCostSegregation", "service_cost_segregation"),
    "rd_credit": ("serviceRdCredit", "service_rd_credit"),
}


@dataclass(frozen=True)
class QuotePricingInput:
    """One quote draft: volume inputs, service selections and parameters."""

    # Volume
    monthly_revenue_range: str | None = None
    monthly_transactions: str | None = None
    industry: str | None = None

    # Monthly bookkeeping
    service_monthly_bookkeeping: bool = False
    qbo_subscription: bool = False
    service_tier: str | None = None

    # Tax as a Service
    service_taas_monthly: bool = False
    num_entities: int = 1
    custom_num_entities: int | None = None
    states_filed: int = 1
    custom_states_filed: int | None = None
    international_filing: bool = False
    num_business_owners: int = 1
    custom_num_business_owners: int | None = None
    include_1040s: bool = False
    bookkeeping_quality: str | None = None

    # Payroll
    service_payroll_service: bool = False
    payroll_employee_count: int = 1
    payroll_state_count: int = 1

    # Accounts payable / receivable
    service_ap_service: bool = False
    ap_vendor_bills_band: str | None = None
    ap_vendor_count: int | None = None
    custom_ap_vendor_count: int | None = None
    ap_service_tier: str | None = None
    service_ar_service: bool = False
    ar_customer_invoices_band: str | None = None
    ar_customer_count: int | None = None
    custom_ar_customer_count: int | None = None
    ar_service_tier: str | None = None

    # Agent of service
    service_agent_of_service: bool = False
    agent_of_service_additional_states: int = 0
    agent_of_service_complex_case: bool = False

    # One-time projects
    service_cleanup_projects: bool = False
    cleanup_periods: tuple = ()
    service_prior_year_filings: bool = False
    prior_year_filings: tuple = ()
    service_cfo_advisory: bool = False
    cfo_advisory_type: str | None = None
    cfo_advisory_bundle_hours: int | None = None
    advisory_projects: frozenset = frozenset()

    @property
    def effective_num_entities(self) -> int:
        return self.custom_num_entities or self.num_entities

    @property
    def effective_states_filed(self) -> int:
        return self.custom_states_filed or self.states_filed

    @property
    def effective_num_business_owners(self) -> int:
        return self.custom_num_business_owners or self.num_business_owners

    @property
    def effective_ap_vendor_count(self) -> int:
        return self.custom_ap_vendor_count or self.ap_vendor_count or 0

    @property
    def effective_ar_customer_count(self) -> int:
        return self.custom_ar_customer_count or self.ar_customer_count or 0

    @classmethod
    def from_dict(cls, data: dict) -> "QuotePricingInput":
        if not isinstance(data, dict):
            raise InvalidInputError("Quote input must be a JSON object")

        advisory = frozenset(
            project for project, keys in ADVISORY_PROJECTS.items()
            if _as_bool(_lookup(data, *keys, default=False))
        )

        fields = {
            "monthly_revenue_range": _as_str(_lookup(data, "monthlyRevenueRange", "monthly_revenue_range")),
            "monthly_transactions": _as_str(_lookup(data, "monthlyTransactions", "monthly_transactions")),
            "industry": _as_str(_lookup(data, "industry")),
            # Support legacy 'serviceBookkeeping' / 'includesBookkeeping' flags
            "service_monthly_bookkeeping": _as_bool(_lookup(
                data, "serviceMonthlyBookkeeping", "service_monthly_bookkeeping",
                "serviceBookkeeping", "includesBookkeeping", default=False,
            )),
            "qbo_subscription": _as_bool(_lookup(data, "qboSubscription", "qbo_subscription", default=False)),
            "service_tier": _as_str(_lookup(data, "serviceTier", "service_tier")),
            "service_taas_monthly": _as_bool(_lookup(
                data, "serviceTaasMonthly", "service_taas_monthly", "serviceTaas", "includesTaas",
                default=False,
            )),
            "service_payroll_service": _as_bool(
                _lookup(data, "servicePayrollService", "service_payroll_service", default=False)
            ),
            # 'serviceApArService' is the legacy combined flag and selects AP
            "service_ap_service": _as_bool(_lookup(
                data, "serviceApService", "service_ap_service", "serviceApArService", default=False,
            )),
            "service_ar_service": _as_bool(
                _lookup(data, "serviceArService", "service_ar_service", default=False)
            ),
            "service_agent_of_service": _as_bool(
                _lookup(data, "serviceAgentOfService", "service_agent_of_service", default=False)
            ),
            "service_cleanup_projects": _as_bool(
                _lookup(data, "serviceCleanupProjects", "service_cleanup_projects", default=False)
            ),
            "service_prior_year_filings": _as_bool(
                _lookup(data, "servicePriorYearFilings", "service_prior_year_filings", default=False)
            ),
            "service_cfo_advisory": _as_bool(
                _lookup(data, "serviceCfoAdvisory", "service_cfo_advisory", default=False)
            ),
            "advisory_projects": advisory,
        }

        # Parameters of an unselected service are never read; they keep their defaults
        parameter_readers = (
            ("service_taas_monthly", _taas_parameters),
            ("service_payroll_service", _payroll_parameters),
            ("service_ap_service", _ap_parameters),
            ("service_ar_service", _ar_parameters),
            ("service_agent_of_service", _agent_of_service_parameters),
            ("service_cleanup_projects", _cleanup_parameters),
            ("service_prior_year_filings", _prior_year_parameters),
            ("service_cfo_advisory", _cfo_advisory_parameters),
        )
        for flag, read_parameters in parameter_readers:
            if fields[flag]:
                fields.update(read_parameters(data))

        return cls(**fields)


def _taas_parameters(data: dict) -> dict:
    return {
        "num_entities": _as_int(_lookup(data, "numEntities", "num_entities"), "numEntities", 1),
        "custom_num_entities": _as_int(
            _lookup(data, "customNumEntities", "custom_num_entities"), "customNumEntities"
        ),
        "states_filed": _as_int(_lookup(data, "statesFiled", "states_filed"), "statesFiled", 1),
        "custom_states_filed": _as_int(
            _lookup(data, "customStatesFiled", "custom_states_filed"), "customStatesFiled"
        ),
        "international_filing": _as_bool(
            _lookup(data, "internationalFiling", "international_filing", default=False)
        ),
        "num_business_owners": _as_int(
            _lookup(data, "numBusinessOwners", "num_business_owners"), "numBusinessOwners", 1
        ),
        "custom_num_business_owners": _as_int(
            _lookup(data, "customNumBusinessOwners", "custom_num_business_owners"),
            "customNumBusinessOwners",
        ),
        "include_1040s": _as_bool(_lookup(data, "include1040s", "include_1040s", default=False)),
        "bookkeeping_quality": _as_str(_lookup(data, "bookkeepingQuality", "bookkeeping_quality")),
    }


def _payroll_parameters(data: dict) -> dict:
    return {
        "payroll_employee_count": _as_int(
            _lookup(data, "payrollEmployeeCount", "payroll_employee_count"), "payrollEmployeeCount", 1
        ),
        "payroll_state_count": _as_int(
            _lookup(data, "payrollStateCount", "payroll_state_count"), "payrollStateCount", 1
        ),
    }


def _ap_parameters(data: dict) -> dict:
    return {
        "ap_vendor_bills_band": _as_str(_lookup(data, "apVendorBillsBand", "ap_vendor_bills_band")),
        "ap_vendor_count": _as_int(_lookup(data, "apVendorCount", "ap_vendor_count"), "apVendorCount"),
        "custom_ap_vendor_count": _as_int(
            _lookup(data, "customApVendorCount", "custom_ap_vendor_count"), "customApVendorCount"
        ),
        "ap_service_tier": _as_str(_lookup(data, "apServiceTier", "ap_service_tier")),
    }


def _ar_parameters(data: dict) -> dict:
    return {
        "ar_customer_invoices_band": _as_str(
            _lookup(data, "arCustomerInvoicesBand", "ar_customer_invoices_band")
        ),
        "ar_customer_count": _as_int(
            _lookup(data, "arCustomerCount", "ar_customer_count"), "arCustomerCount"
        ),
        "custom_ar_customer_count": _as_int(
            _lookup(data, "customArCustomerCount", "custom_ar_customer_count"), "customArCustomerCount"
        ),
        "ar_service_tier": _as_str(_lookup(data, "arServiceTier", "ar_service_tier")),
    }


def _agent_of_service_parameters(data: dict) -> dict:
    return {
        "agent_of_service_additional_states": _as_int(
            _lookup(data, "agentOfServiceAdditionalStates", "agent_of_service_additional_states"),
            "agentOfServiceAdditionalStates",
            0,
        ),
        "agent_of_service_complex_case": _as_bool(
            _lookup(data, "agentOfServiceComplexCase", "agent_of_service_complex_case", default=False)
        ),
    }


def _cleanup_parameters(data: dict) -> dict:
    return {
        "cleanup_periods": _as_tuple(_lookup(data, "cleanupPeriods", "cleanup_periods"), "cleanupPeriods"),
    }


def _prior_year_parameters(data: dict) -> dict:
    return {
        "prior_year_filings": _as_tuple(
            _lookup(data, "priorYearFilings", "prior_year_filings"), "priorYearFilings"
        ),
    }


def _cfo_advisory_parameters(data: dict) -> dict:
    return {
        "cfo_advisory_type": _as_str(_lookup(data, "cfoAdvisoryType", "cfo_advisory_type")),
        "cfo_advisory_bundle_hours": _as_int(
            _lookup(data, "cfoAdvisoryBundleHours", "cfo_advisory_bundle_hours"), "cfoAdvisoryBundleHours"
        ),
    }


@dataclass(frozen=True)
class CalendarContext:
    """The point in time a quote is priced at. Only the month matters."""

    month: int

    @classmethod
    def from_value(cls, value) -> "CalendarContext":
        return cls(month=_as_int(value, "calendarMonth"))


@dataclass(frozen=True)
class PricingConfig:
    """Request-level overrides: service toggles, rounding step, fee overrides."""

    disabled_services: frozenset = frozenset()
    monthly_rounding_step: int | None = None
    base_monthly_fee: Decimal | None = None
    qbo_monthly_fee: Decimal | None = None

    def is_enabled(self, service: str) -> bool:
        return service not in self.disabled_services

    @classmethod
    def from_dict(cls, data: dict | None) -> "PricingConfig":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise InvalidInputError(f"Pricing config must be a JSON object, got: {data!r}")

        services = _as_section(data, "services", "config.services")
        for name, settings in services.items():
            if not isinstance(settings, dict):
                raise InvalidInputError(f"config.services.{name} must be a JSON object, got: {settings!r}")
        disabled = frozenset(
            name for name, settings in services.items() if settings.get("enabled") is False
        )

        rounding = _as_section(data, "rounding", "config.rounding")
        step = _as_int(_lookup(rounding, "monthlyStep", "monthly_step"), "rounding.monthlyStep")
        if step is not None and step <= 0:
            raise InvalidInputError(f"rounding.monthlyStep must be positive, got: {step}")

        fees = _as_section(data, "fees", "config.fees")
        base_fee = _lookup(fees, "baseMonthlyFee", "base_monthly_fee")
        qbo_fee = _lookup(fees, "qboMonthlyFee", "qbo_monthly_fee")

        return cls(
            disabled_services=disabled,
            monthly_rounding_step=step,
            base_monthly_fee=_as_amount(base_fee, "fees.baseMonthlyFee"),
            qbo_monthly_fee=_as_amount(qbo_fee, "fees.qboMonthlyFee"),
        )


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass(frozen=True)
class FeeResult:
    """Monthly and setup fee for one service family, plus its breakdown."""

    monthly_fee: int = 0
    setup_fee: int = 0
    breakdown: Mapping = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "breakdown", MappingProxyType(dict(self.breakdown)))

    @classmethod
    def zero(cls) -> "FeeResult":
        return cls()


@dataclass(frozen=True)
class CombinedTotals:
    """Summed monthly and setup fees across every component."""

    monthly_fee: int = 0
    setup_fee: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "CombinedTotals":
        if not isinstance(data, dict):
            raise InvalidInputError("Commission request must be a JSON object")
        monthly_fee = _as_int(_lookup(data, "monthlyFee", "monthly_fee"), "monthlyFee", 0)
        setup_fee = _as_int(_lookup(data, "setupFee", "setup_fee"), "setupFee", 0)
        if monthly_fee < 0 or setup_fee < 0:
            raise InvalidInputError("monthlyFee and setupFee cannot be negative")
        return cls(monthly_fee=monthly_fee, setup_fee=setup_fee)


@dataclass(frozen=True)
class CombinedPricingResult:
    """Complete pricing for one quote. Built once, never mutated."""

    bookkeeping: FeeResult
    taas: FeeResult
    payroll: FeeResult
    ap: FeeResult
    ar: FeeResult
    agent_of_service: FeeResult
    cleanup_projects: FeeResult
    prior_year_filings: FeeResult
    cfo_advisory: FeeResult
    advisory_projects: Mapping
    service_tier: FeeResult
    qbo: FeeResult
    combined: CombinedTotals
    includes_bookkeeping: bool = False
    includes_taas: bool = False
    cfo_advisory_product_id: str | None = None
    constants_version: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "advisory_projects", MappingProxyType(dict(self.advisory_projects)))

    def components(self) -> list[FeeResult]:
        """Every fee-bearing component, flat line items included."""
        return [
            self.bookkeeping,
            self.taas,
            self.payroll,
            self.ap,
            self.ar,
            self.agent_of_service,
            self.cleanup_projects,
            self.prior_year_filings,
            self.cfo_advisory,
            *self.advisory_projects.values(),
            self.service_tier,
            self.qbo,
        ]


@dataclass(frozen=True)
class CommissionProjection:
    """Advisory sales-commission estimate derived from combined fees."""

    setup_commission: Decimal = Decimal("0")
    first_month_commission: Decimal = Decimal("0")
    monthly_recurring_commission: Decimal = Decimal("0")
    first_month_total: Decimal = Decimal("0")
    twelve_month_total: Decimal = Decimal("0")


@dataclass
class PricingContext:
    """
    Holds all intermediate state while a quote is priced.
    This is the "bag" that flows through the pipeline.
    """

    # Input (immutable during processing)
    quote: QuotePricingInput
    constants: ConstantsTable
    calendar: CalendarContext
    config: PricingConfig = field(default_factory=PricingConfig)

    # Step results (populated as we go)
    services: dict = field(default_factory=dict)
    advisory_projects: dict = field(default_factory=dict)
    line_items: dict = field(default_factory=dict)
    cfo_advisory_product_id: str | None = None
