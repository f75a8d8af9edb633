"""
Loan pricing service layer.

Turns a LoanInput snapshot into a LoanResult. The engine resolves
principal, deposit, rate and admin fee in MMK and delegates the
repayment formula to the configured strategy. This is the core
business logic of the calculator; views only validate and serialize.
"""

import logging
from datetime import date
from decimal import Decimal
from functools import lru_cache
from typing import List, Optional, Union

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver

from apps.core.exceptions import InvalidTermError
from apps.core.utils import ZERO, quantize_money
from apps.pricing.strategies import DEFAULT_STRATEGY, PricingStrategy, get_strategy
from apps.pricing.types import (
    DEPOSIT_PERCENT,
    Installment,
    LoanInput,
    LoanResult,
    PricingContext,
)
from apps.rates.loaders import get_rate_tables
from apps.rates.services import CurrencyConverter
from apps.rates.tables import RateTables

logger = logging.getLogger(__name__)


class PricingEngine:
    """
    Prices loans against a set of rate tables with one strategy.

    Tables and strategy are fixed at construction; ``compute`` is a
    pure function of its input.
    """

    def __init__(
        self,
        tables: RateTables,
        strategy: Union[str, PricingStrategy] = DEFAULT_STRATEGY,
    ):
        self.tables = tables
        if isinstance(strategy, str):
            strategy = get_strategy(strategy)
        self.strategy = strategy
        self.converter = CurrencyConverter(tables.exchange_rates)

    def with_strategy(self, strategy: Union[str, PricingStrategy]) -> 'PricingEngine':
        """Return an engine sharing these tables with another strategy."""
        return PricingEngine(self.tables, strategy)

    def compute(self, loan_input: LoanInput) -> LoanResult:
        """
        Compute repayment terms for a loan.

        Steps:
            1. Convert price into MMK
            2. Convert the deposit (or take a percentage of the price)
            3. Financed principal = max(0, price − deposit)
            4. Look up the rate for (term, method, bank), zero if undefined
            5. Look up the admin fee from the price bracket
            6. Apply the strategy's repayment formula

        Args:
            loan_input: The form snapshot.

        Returns:
            LoanResult with full-precision amounts.

        Raises:
            InvalidCurrencyError: If the currency is not in the table.
            InvalidTermError: If the term is not a positive integer.
        """
        term = loan_input.term
        if isinstance(term, bool) or not isinstance(term, int) or term <= 0:
            raise InvalidTermError(term)

        currency_rate = self.converter.rate_for(loan_input.currency)
        principal_base = self.converter.to_base_currency(
            loan_input.product_price, loan_input.currency,
        )

        if not self.strategy.uses_deposit:
            deposit_base = ZERO
        elif loan_input.deposit_type == DEPOSIT_PERCENT:
            deposit_base = self.converter.percent_of(principal_base, loan_input.deposit)
        else:
            deposit_base = self.converter.to_base_currency(
                loan_input.deposit, loan_input.currency,
            )

        financed = max(ZERO, principal_base - deposit_base)

        term_rates = self.tables.term_rates
        bank = term_rates.resolve_bank(loan_input.method, loan_input.bank)
        # Only echo a bank whose own rate priced this term
        if bank and not term_rates.has_rate(term, loan_input.method, bank):
            bank = None
        rate = term_rates.lookup(term, loan_input.method, bank)

        result = LoanResult(
            strategy=self.strategy.name,
            term=term,
            method=loan_input.method,
            bank=bank,
            currency=loan_input.currency,
            interest_rate=rate,
            principal_base=principal_base,
            deposit_base=deposit_base,
            financed_principal=financed,
            admin_fee=ZERO,
        )

        # Nothing entered yet
        if principal_base <= 0:
            return result

        admin_fee = self.tables.admin_fees.fee_for(principal_base, loan_input.method)

        # Deposit covers the whole price
        if financed <= 0:
            logger.debug(
                "Deposit %s covers price %s; nothing to finance",
                deposit_base,
                principal_base,
            )
            return result.zeroed(admin_fee=admin_fee)

        outcome = self.strategy.price(PricingContext(
            term=term,
            rate=rate,
            principal_base=principal_base,
            deposit_base=deposit_base,
            financed_principal=financed,
            admin_fee=admin_fee,
            currency_rate=currency_rate,
        ))

        logger.debug(
            "Priced %s: term=%d, method=%s, bank=%s, financed=%s, rate=%s, "
            "monthly=%s, eligible=%s",
            self.strategy.name,
            term,
            loan_input.method,
            bank,
            financed,
            rate,
            outcome.monthly_repayment,
            outcome.eligible,
        )

        return LoanResult(
            strategy=self.strategy.name,
            term=term,
            method=loan_input.method,
            bank=bank,
            currency=loan_input.currency,
            interest_rate=rate,
            principal_base=principal_base,
            deposit_base=deposit_base,
            financed_principal=financed,
            admin_fee=admin_fee,
            monthly_repayment=outcome.monthly_repayment,
            total_repayment=outcome.total_repayment,
            interest_amount=outcome.interest_amount,
            monthly_interest=outcome.interest_amount / Decimal(term),
            min_salary_requirement=outcome.min_salary_requirement,
            eligible=outcome.eligible,
        )


@lru_cache(maxsize=1)
def get_engine() -> PricingEngine:
    """Engine built from the process rate tables and PRICING_STRATEGY."""
    strategy = getattr(settings, 'PRICING_STRATEGY', DEFAULT_STRATEGY)
    engine = PricingEngine(get_rate_tables(), strategy)
    logger.info("Pricing engine ready with strategy %r", engine.strategy.name)
    return engine


@receiver(setting_changed)
def _reset_engine(setting, **kwargs):
    if setting in ('PRICING_STRATEGY', 'RATE_TABLES_DIR'):
        get_engine.cache_clear()


def compute(loan_input: LoanInput, strategy: Optional[str] = None) -> LoanResult:
    """
    Price a loan with the configured engine.

    Args:
        loan_input: The form snapshot.
        strategy: Optional strategy name overriding PRICING_STRATEGY.

    Returns:
        LoanResult.
    """
    engine = get_engine()
    if strategy and strategy != engine.strategy.name:
        engine = engine.with_strategy(strategy)
    return engine.compute(loan_input)


class ScheduleService:
    """Builds installment schedules for priced loans."""

    @staticmethod
    def build(result: LoanResult, start_date: date) -> List[Installment]:
        """
        Split a result into dated monthly installments.

        Installment n falls due n calendar months after start_date.
        Amounts are rounded to 2 places; the last installment absorbs
        the rounding so the schedule sums to the rounded total.

        Args:
            result: A computed LoanResult.
            start_date: Purchase date.

        Returns:
            List of Installment, empty when the loan is not eligible.
        """
        if not result.eligible or result.term <= 0:
            return []

        monthly = quantize_money(result.monthly_repayment)
        total = quantize_money(result.total_repayment)

        schedule = []
        for number in range(1, result.term + 1):
            if number < result.term:
                amount = monthly
            else:
                amount = total - monthly * (result.term - 1)
            schedule.append(Installment(
                number=number,
                due_date=start_date + relativedelta(months=number),
                amount=amount,
            ))
        return schedule
