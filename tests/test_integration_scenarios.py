"""
Integration Test Scenarios for the Quote Pricing Engine

These tests walk realistic quotes through the whole pipeline, from the
request payload to the display fields and commission projection.

Run with: python -m pytest tests/test_integration_scenarios.py -v

IMPORTANT: This file has a companion business summary document:
    docs/pricing_scenarios_business_summary.md

When adding or modifying tests, please update the business summary document
to keep them in sync. The summary provides plain-English explanations of
each test scenario for business stakeholders.
"""

import copy

import pytest

from quote_engine import ConfigurationError, QuotePricingProcessor
from quote_engine.constants import DEFAULT_CONSTANTS, ConstantsTable


@pytest.fixture
def processor():
    return QuotePricingProcessor()


class TestBookkeepingTaasBundle:
    """Bookkeeping and tax-as-a-service sold together."""

    @pytest.fixture
    def request_data(self):
        return {
            "input": {
                "monthlyRevenueRange": "25K-75K",
                "monthlyTransactions": "100-300",
                "industry": "Professional Services",
                "serviceMonthlyBookkeeping": True,
                "serviceTaasMonthly": True,
                "qboSubscription": False,
            },
            "calendarMonth": 6,
        }

    def test_bundle_halves_bookkeeping_monthly_fee(self, processor, request_data):
        result = processor.process_from_dict(request_data)
        breakdown = result["pricing"]["bookkeeping"]["breakdown"]

        assert breakdown["monthlyFeeBeforeDiscount"] == 550
        assert breakdown["monthlyFeeAfterDiscount"] == 275
        assert result["display"]["packageDiscountMonthly"] == 275

    def test_taas_is_not_discounted(self, processor, request_data):
        result = processor.process_from_dict(request_data)

        # 150 * 1.4 * 1.0 = 210 -> 225
        assert result["display"]["taasMonthlyFee"] == 225

    def test_setup_fee_uses_pre_discount_fee(self, processor, request_data):
        result = processor.process_from_dict(request_data)

        # 550 * 6 * 0.25
        assert result["display"]["bookkeepingSetupFee"] == 825

    def test_qbo_added_after_discount(self, processor, request_data):
        request_data["input"]["qboSubscription"] = True
        result = processor.process_from_dict(request_data)

        assert result["display"]["qboFee"] == 60
        assert result["display"]["totalMonthlyFee"] == 275 + 225 + 60


class TestFullServiceQuote:
    """A restaurant group buying every recurring service plus one-time work."""

    @pytest.fixture
    def request_data(self):
        return {
            "input": {
                "monthlyRevenueRange": "75K-250K",
                "monthlyTransactions": "300-600",
                "industry": "Restaurant/Food Service",
                "serviceMonthlyBookkeeping": True,
                "serviceTaasMonthly": True,
                "servicePayrollService": True,
                "payrollEmployeeCount": 10,
                "payrollStateCount": 2,
                "serviceApService": True,
                "apVendorBillsBand": "26-100",
                "apVendorCount": 10,
                "serviceArService": True,
                "arCustomerInvoicesBand": "0-25",
                "arCustomerCount": 3,
                "arServiceTier": "advanced",
                "serviceAgentOfService": True,
                "agentOfServiceAdditionalStates": 1,
                "serviceCleanupProjects": True,
                "cleanupPeriods": ["2025-01", "2025-02", "2025-03"],
                "servicePriorYearFilings": True,
                "priorYearFilings": ["2023"],
                "serviceCfoAdvisory": True,
                "cfoAdvisoryType": "pay_as_you_go",
                "serviceTier": "Guided",
                "qboSubscription": True,
            },
            "calendarMonth": 1,
        }

    def test_monthly_fees_per_service(self, processor, request_data):
        display = processor.process_from_dict(request_data)["display"]

        # (150 + 500) * 3.5 * 1.6 = 3640, bundled -> 1820 -> 1825
        assert display["bookkeepingMonthlyFee"] == 1825
        # 150 * 1.6 * 1.6 = 384 -> 400
        assert display["taasMonthlyFee"] == 400
        # 100 + 7 * 12 + 1 * 25
        assert display["payrollFee"] == 209
        # 300 + 5 * 12
        assert display["apFee"] == 360
        # 150 * 2.5
        assert display["arFee"] == 375
        assert display["serviceTierFee"] == 79
        assert display["qboFee"] == 60

    def test_all_services_sum_to_combined_totals(self, processor, request_data):
        display = processor.process_from_dict(request_data)["display"]

        assert display["totalMonthlyFee"] == 1825 + 400 + 209 + 360 + 375 + 79 + 60

    def test_one_time_fees_land_in_setup_total(self, processor, request_data):
        display = processor.process_from_dict(request_data)["display"]

        assert display["bookkeepingSetupFee"] == 910
        assert display["agentOfServiceFee"] == 300
        assert display["cleanupProjectFee"] == 300
        assert display["priorYearFilingsFee"] == 1500
        assert display["cfoAdvisoryFee"] == 2400
        assert display["totalSetupFee"] == 910 + 300 + 300 + 1500 + 2400


class TestCfoAdvisoryPackages:
    """CFO advisory deposits and their CRM products."""

    def _request(self, **cfo):
        return {"input": {"serviceCfoAdvisory": True, **cfo}, "calendarMonth": 1}

    def test_pay_as_you_go_deposit(self, processor):
        display = processor.process_from_dict(self._request(cfoAdvisoryType="pay_as_you_go"))["display"]

        assert display["cfoAdvisoryFee"] == 2400
        assert display["cfoAdvisoryHubspotProductId"] == "28945017957"
        assert display["totalMonthlyFee"] == 0

    def test_bundled_hours_product_mapping(self, processor):
        display = processor.process_from_dict(
            self._request(cfoAdvisoryType="bundled", cfoAdvisoryBundleHours=32)
        )["display"]

        assert display["cfoAdvisoryFee"] == 9120
        assert display["cfoAdvisoryHubspotProductId"] == "28960863883"

    def test_unlisted_bundle_is_configuration_error(self, processor):
        with pytest.raises(ConfigurationError):
            processor.process_from_dict(self._request(cfoAdvisoryType="bundled", cfoAdvisoryBundleHours=12))


class TestAdvisoryProjects:
    """One-time advisory projects priced from the constants table."""

    def test_priced_project_in_setup_total(self):
        data = copy.deepcopy(DEFAULT_CONSTANTS)
        data["advisory_project_fees"] = {"entity_optimization": 1800}
        processor = QuotePricingProcessor(ConstantsTable.from_dict(data))

        display = processor.process_from_dict({
            "input": {"serviceEntityOptimization": True},
            "calendarMonth": 1,
        })["display"]

        assert display["projectFees"] == {"entity_optimization": 1800}
        assert display["totalSetupFee"] == 1800


class TestPricingConfigOverrides:
    """Request-level overrides of the price list."""

    @pytest.fixture
    def quote(self):
        return {
            "monthlyRevenueRange": "25K-75K",
            "monthlyTransactions": "100-300",
            "industry": "Professional Services",
            "serviceMonthlyBookkeeping": True,
            "serviceTaasMonthly": True,
        }

    def test_base_fee_override(self, processor, quote):
        quote["serviceTaasMonthly"] = False
        result = processor.process_from_dict({
            "input": quote,
            "config": {"fees": {"baseMonthlyFee": 200}},
            "calendarMonth": 1,
        })

        # (200 + 100) * 2.2 * 1.0
        assert result["display"]["bookkeepingMonthlyFee"] == 660

    def test_disabled_taas_removes_bundle_discount(self, processor, quote):
        result = processor.process_from_dict({
            "input": quote,
            "config": {"services": {"taas": {"enabled": False}}},
            "calendarMonth": 1,
        })

        assert result["display"]["taasMonthlyFee"] == 0
        assert result["display"]["bookkeepingMonthlyFee"] == 550
        assert result["display"]["packageDiscountMonthly"] == 0


class TestCommissionProjectionScenarios:
    """Commission derived from a priced quote."""

    def test_commission_from_bundled_quote(self, processor):
        result = processor.process_from_dict({
            "input": {
                "monthlyRevenueRange": "25K-75K",
                "monthlyTransactions": "100-300",
                "industry": "Professional Services",
                "serviceMonthlyBookkeeping": True,
                "serviceTaasMonthly": True,
            },
            "calendarMonth": 6,
        })
        commission = result["commission"]

        # monthly 500, setup 825
        assert commission["setupCommission"] == 165.0
        assert commission["firstMonthCommission"] == 200.0
        assert commission["firstMonthTotal"] == 365.0
        assert commission["twelveMonthTotal"] == 915.0

    def test_standalone_commission_projection(self, processor):
        commission = processor.commission_from_dict({"monthlyFee": 275, "setupFee": 825})

        assert commission["setupCommission"] == 165.0
        assert commission["firstMonthCommission"] == 110.0
        assert commission["firstMonthTotal"] == 275.0
        assert commission["monthlyRecurringCommission"] == 27.5
        assert commission["twelveMonthTotal"] == 577.5
