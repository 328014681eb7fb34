"""
Payroll Calculator

Base fee covers the included employees in one state; each additional
employee and each additional state adds a flat monthly amount.
"""

from ..constants import ConstantsTable
from ..models import FeeResult, QuotePricingInput
from ..rounding import round_half_up


class PayrollCalculator:
    """Calculates the monthly payroll service fee."""

    service = "payroll"

    def calculate(self, quote: QuotePricingInput, constants: ConstantsTable) -> FeeResult:
        if not quote.service_payroll_service:
            return FeeResult.zero()

        rates = constants.payroll
        base_fee = rates.resolve("base_fee")

        extra_employees = max(0, quote.payroll_employee_count - rates.resolve("included_employees"))
        extra_states = max(0, quote.payroll_state_count - rates.resolve("included_states"))

        employee_fee = extra_employees * rates.resolve("employee_fee_per_unit")
        state_fee = extra_states * rates.resolve("state_fee_per_unit")
        monthly_fee = round_half_up(base_fee + employee_fee + state_fee)

        return FeeResult(
            monthly_fee=monthly_fee,
            setup_fee=0,
            breakdown={
                "baseFee": base_fee,
                "additionalEmployeeFee": employee_fee,
                "additionalStateFee": state_fee,
                "monthlyFee": monthly_fee,
            },
        )
