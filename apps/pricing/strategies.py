"""
Repayment pricing strategies.

Each strategy turns a PricingContext (principal, deposit, rate and fee
already resolved in MMK) into repayment figures. Strategies are
registered by name so the active formula is chosen by configuration.

    flat                Principal split evenly plus a flat charge per period.
    flat_with_fee       Flat charge and admin fee spread over the term.
    amortizing          Annuity with the rate applied per period as quoted.
    monthly_amortizing  Annuity with an annual rate divided by 12.
    arbitrage           Exchange rate times term, less the converted price.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, Tuple

from apps.core.exceptions import UnknownStrategyError
from apps.core.utils import ZERO, annuity_payment, floor_to_nearest
from apps.pricing.types import PricingContext, StrategyOutcome

# Share of salary that may go to the monthly repayment
SALARY_SHARE = Decimal('0.25')
SALARY_FLOOR_UNIT = 1000


class PricingStrategy(ABC):
    """Common interface for repayment formulas."""

    name = ''
    description = ''
    # False when the formula prices the full converted price
    uses_deposit = True

    @abstractmethod
    def price(self, ctx: PricingContext) -> StrategyOutcome:
        """Compute repayment figures for a positive financed principal."""

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.name!r}>"


class FlatStrategy(PricingStrategy):
    """
    Flat division.

    monthly = financed / term + financed × rate

    The charge is taken on the original principal every period, not
    on a declining balance.
    """

    name = 'flat'
    description = 'Principal split evenly plus a flat charge per period.'

    def price(self, ctx: PricingContext) -> StrategyOutcome:
        monthly_interest = ctx.financed_principal * ctx.rate
        monthly = ctx.financed_principal / Decimal(ctx.term) + monthly_interest
        return StrategyOutcome(
            monthly_repayment=monthly,
            total_repayment=monthly * ctx.term,
            interest_amount=monthly_interest * ctx.term,
            min_salary_requirement=monthly * SALARY_SHARE,
            eligible=monthly > 0,
        )


class FlatWithFeeStrategy(PricingStrategy):
    """
    Flat charge with the admin fee folded into the installments.

    monthly = (financed + financed × rate + admin_fee) / term
    """

    name = 'flat_with_fee'
    description = 'Flat charge and admin fee spread over the term.'

    def price(self, ctx: PricingContext) -> StrategyOutcome:
        interest = ctx.financed_principal * ctx.rate
        monthly = (ctx.financed_principal + interest + ctx.admin_fee) / Decimal(ctx.term)
        return StrategyOutcome(
            monthly_repayment=monthly,
            total_repayment=monthly * ctx.term,
            interest_amount=interest,
            min_salary_requirement=monthly * SALARY_SHARE,
            eligible=monthly > 0,
        )


class AmortizingStrategy(PricingStrategy):
    """
    Annuity (PMT) repayment.

    The table rate is applied per period as quoted. The minimum salary
    assumes the repayment may take 20% of salary and is floored to the
    nearest 1000.
    """

    name = 'amortizing'
    description = 'Annuity with the rate applied per period as quoted.'
    salary_coverage = Decimal('0.20')

    def periodic_rate(self, rate: Decimal) -> Decimal:
        return rate

    def price(self, ctx: PricingContext) -> StrategyOutcome:
        monthly = annuity_payment(
            ctx.financed_principal,
            self.periodic_rate(ctx.rate),
            ctx.term,
        )
        total = monthly * ctx.term
        interest = max(ZERO, total - ctx.financed_principal - ctx.admin_fee)
        return StrategyOutcome(
            monthly_repayment=monthly,
            total_repayment=total,
            interest_amount=interest,
            min_salary_requirement=floor_to_nearest(
                monthly / self.salary_coverage, SALARY_FLOOR_UNIT,
            ),
            eligible=monthly > 0,
        )


class MonthlyAmortizingStrategy(AmortizingStrategy):
    """Annuity repayment on an annual rate, compounded monthly."""

    name = 'monthly_amortizing'
    description = 'Annuity with an annual rate divided by 12.'
    salary_coverage = Decimal('0.25')

    def periodic_rate(self, rate: Decimal) -> Decimal:
        return rate / Decimal('12')


class ArbitrageStrategy(PricingStrategy):
    """
    Currency arbitrage formula.

    monthly = exchange_rate × term − converted price

    There is no deposit or financed principal. A non-positive result
    means the purchase is not eligible and no salary is quoted.
    """

    name = 'arbitrage'
    description = 'Exchange rate times term, less the converted price.'
    uses_deposit = False

    def price(self, ctx: PricingContext) -> StrategyOutcome:
        monthly = ctx.currency_rate * ctx.term - ctx.principal_base
        eligible = monthly > 0
        if eligible:
            min_salary = floor_to_nearest(monthly * SALARY_SHARE, SALARY_FLOOR_UNIT)
        else:
            min_salary = ZERO
        return StrategyOutcome(
            monthly_repayment=monthly,
            total_repayment=monthly * ctx.term,
            interest_amount=ZERO,
            min_salary_requirement=min_salary,
            eligible=eligible,
        )


STRATEGIES: Dict[str, PricingStrategy] = {
    strategy.name: strategy
    for strategy in (
        FlatStrategy(),
        FlatWithFeeStrategy(),
        AmortizingStrategy(),
        MonthlyAmortizingStrategy(),
        ArbitrageStrategy(),
    )
}

DEFAULT_STRATEGY = AmortizingStrategy.name


def strategy_names() -> Tuple[str, ...]:
    return tuple(STRATEGIES)


def get_strategy(name: str) -> PricingStrategy:
    """
    Look up a registered strategy.

    Raises:
        UnknownStrategyError: If no strategy has this name.
    """
    try:
        return STRATEGIES[name]
    except KeyError:
        raise UnknownStrategyError(
            f"Unknown pricing strategy {name!r}; "
            f"expected one of: {', '.join(STRATEGIES)}"
        )
