"""
Input and result types for the pricing engine.
"""

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from apps.core.utils import ZERO
from apps.rates.tables import BASE_CURRENCY

DEPOSIT_PERCENT = 'percent'
DEPOSIT_AMOUNT = 'amount'
DEPOSIT_TYPES = (DEPOSIT_PERCENT, DEPOSIT_AMOUNT)


@dataclass(frozen=True)
class LoanInput:
    """
    Snapshot of the calculator form.

    ``product_price`` and ``deposit`` may be free text; empty or
    unparsable values count as zero. ``deposit`` is a percentage of
    the price when ``deposit_type`` is 'percent', otherwise an amount
    in ``currency``.
    """

    term: int
    method: str
    currency: str = BASE_CURRENCY
    product_price: Any = ''
    deposit: Any = ''
    deposit_type: str = DEPOSIT_PERCENT
    bank: Optional[str] = None


@dataclass(frozen=True)
class PricingContext:
    """Everything a strategy needs, already in base currency."""

    term: int
    rate: Decimal
    principal_base: Decimal
    deposit_base: Decimal
    financed_principal: Decimal
    admin_fee: Decimal
    currency_rate: Decimal


@dataclass(frozen=True)
class StrategyOutcome:
    monthly_repayment: Decimal
    total_repayment: Decimal
    interest_amount: Decimal
    min_salary_requirement: Decimal
    eligible: bool


@dataclass(frozen=True)
class LoanResult:
    """Computed repayment terms, all amounts in MMK at full precision."""

    strategy: str
    term: int
    method: str
    bank: Optional[str]
    currency: str
    interest_rate: Decimal
    principal_base: Decimal
    deposit_base: Decimal
    financed_principal: Decimal
    admin_fee: Decimal
    monthly_repayment: Decimal = ZERO
    total_repayment: Decimal = ZERO
    interest_amount: Decimal = ZERO
    monthly_interest: Decimal = ZERO
    min_salary_requirement: Decimal = ZERO
    eligible: bool = False

    @property
    def is_negative(self) -> bool:
        """Sign indicator for displaying the repayment as an absolute value."""
        return self.monthly_repayment < 0

    def zeroed(self, admin_fee: Decimal = ZERO) -> 'LoanResult':
        """Copy with every derived repayment figure reset to zero."""
        return replace(
            self,
            admin_fee=admin_fee,
            monthly_repayment=ZERO,
            total_repayment=ZERO,
            interest_amount=ZERO,
            monthly_interest=ZERO,
            min_salary_requirement=ZERO,
            eligible=False,
        )


@dataclass(frozen=True)
class Installment:
    number: int
    due_date: date
    amount: Decimal
