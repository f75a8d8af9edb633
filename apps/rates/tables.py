"""
Static rate tables for the PLUS+ Calculator.

Holds exchange rates, term/method deduction rates and the admin-fee
schedule. Tables are immutable once built and are validated on
construction, so a loaded table can be shared across requests.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from apps.core.exceptions import InvalidCurrencyError, RateTableError
from apps.core.utils import ZERO

logger = logging.getLogger(__name__)

BASE_CURRENCY = 'MMK'

SALARY_DEDUCTION = 'Salary Deduction'
CASH_PAYMENT = 'Cash Payment'
YOMA_BANK_DEDUCTION = 'Yoma Bank Deduction'
OTHER_BANK = 'Other Bank'


def _as_decimal(value, what: str) -> Decimal:
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise RateTableError(f"{what}: {value!r} is not a number.")
    if not amount.is_finite():
        raise RateTableError(f"{what}: {value!r} is not a finite number.")
    return amount


@dataclass(frozen=True)
class ExchangeRateTable:
    """
    Currency code → units of base currency (MMK) per one unit.

    The base currency must be present and map to exactly 1.
    """

    rates: Mapping[str, Decimal]

    def __post_init__(self):
        normalized = {}
        for code, rate in dict(self.rates).items():
            code = str(code).strip().upper()
            rate = _as_decimal(rate, f"Exchange rate for {code}")
            if rate <= 0:
                raise RateTableError(
                    f"Exchange rate for {code} must be positive, got {rate}."
                )
            normalized[code] = rate

        if normalized.get(BASE_CURRENCY) != Decimal('1'):
            raise RateTableError(
                f"{BASE_CURRENCY} must be present with a rate of exactly 1."
            )
        object.__setattr__(self, 'rates', MappingProxyType(normalized))

    def __contains__(self, code) -> bool:
        return code in self.rates

    @property
    def codes(self) -> Tuple[str, ...]:
        return tuple(self.rates)

    def rate_for(self, code: str) -> Decimal:
        """
        Get the rate for a currency code.

        Raises:
            InvalidCurrencyError: If the code is not in the table.
        """
        try:
            return self.rates[code]
        except (KeyError, TypeError):
            raise InvalidCurrencyError(code)


@dataclass(frozen=True)
class TermRate:
    """One deduction-rate entry, optionally specific to a bank option."""

    term: int
    method: str
    rate: Decimal
    bank: Optional[str] = None


@dataclass(frozen=True)
class TermMethodRates:
    """
    Deduction rates keyed by (term, method) or (term, method, bank).

    Lookups never fail: a bank-specific entry wins, then the
    method-level entry, then a zero rate.
    """

    entries: Tuple[TermRate, ...]
    _index: Mapping[tuple, Decimal] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        entries = []
        index = {}
        for entry in self.entries:
            if isinstance(entry.term, bool) or not isinstance(entry.term, int) or entry.term <= 0:
                raise RateTableError(
                    f"Term must be a positive integer, got {entry.term!r}."
                )
            rate = _as_decimal(entry.rate, f"Rate for {entry.term}m {entry.method}")
            if not ZERO <= rate < Decimal('1'):
                raise RateTableError(
                    f"Rate for {entry.term}m {entry.method} must be in [0, 1), got {rate}."
                )
            bank = entry.bank or None
            key = (entry.term, entry.method, bank)
            if key in index:
                raise RateTableError(f"Duplicate rate entry for {key}.")
            index[key] = rate
            entries.append(TermRate(entry.term, entry.method, rate, bank))

        if not entries:
            raise RateTableError("Term rate table is empty.")

        object.__setattr__(self, 'entries', tuple(entries))
        object.__setattr__(self, '_index', MappingProxyType(index))

    @property
    def terms(self) -> Tuple[int, ...]:
        return tuple(sorted({entry.term for entry in self.entries}))

    @property
    def methods(self) -> Tuple[str, ...]:
        # Preserve table order, first appearance wins
        return tuple(dict.fromkeys(entry.method for entry in self.entries))

    def lookup(self, term: int, method: str, bank: Optional[str] = None) -> Decimal:
        """Resolve the deduction rate, falling back to zero."""
        if bank:
            rate = self._index.get((term, method, bank))
            if rate is not None:
                return rate
        rate = self._index.get((term, method, None))
        if rate is None:
            logger.warning(
                "No rate for term=%s, method=%s; using zero rate", term, method,
            )
            return ZERO
        return rate

    def has_rate(self, term: int, method: str, bank: Optional[str] = None) -> bool:
        """True when an entry exists for exactly this key."""
        return (term, method, bank or None) in self._index

    def available_banks(self, method: str) -> List[str]:
        """Bank options configured for a method, in table order."""
        return list(dict.fromkeys(
            entry.bank for entry in self.entries
            if entry.method == method and entry.bank
        ))

    def resolve_bank(self, method: str, bank: Optional[str] = None) -> Optional[str]:
        """
        Keep ``bank`` if the method offers it, otherwise re-select.

        Returns the first available bank for the method, or None when
        the method has no bank options.
        """
        banks = self.available_banks(method)
        if bank in banks:
            return bank
        return banks[0] if banks else None


@dataclass(frozen=True)
class AdminFeeBracket:
    """Fees for prices up to ``upper_bound`` (None = unbounded)."""

    upper_bound: Optional[Decimal]
    deduction_fee: Decimal
    cash_fee: Decimal


@dataclass(frozen=True)
class AdminFeeSchedule:
    """
    Ordered admin-fee brackets covering 0 to infinity.

    Lookup picks the first bracket whose upper bound is >= price.
    Methods in ``cash_methods`` pay the cash fee, all others the
    deduction fee.
    """

    brackets: Tuple[AdminFeeBracket, ...]
    cash_methods: frozenset = frozenset({CASH_PAYMENT})

    def __post_init__(self):
        brackets = []
        for position, bracket in enumerate(self.brackets):
            upper = bracket.upper_bound
            if upper is not None:
                upper = _as_decimal(upper, f"Bracket {position} upper bound")
            brackets.append(AdminFeeBracket(
                upper_bound=upper,
                deduction_fee=_as_decimal(bracket.deduction_fee, f"Bracket {position} deduction fee"),
                cash_fee=_as_decimal(bracket.cash_fee, f"Bracket {position} cash fee"),
            ))

        if not brackets:
            raise RateTableError("Admin fee schedule is empty.")
        if brackets[-1].upper_bound is not None:
            raise RateTableError("Last admin fee bracket must be unbounded.")

        previous = None
        for position, bracket in enumerate(brackets):
            if bracket.deduction_fee < 0 or bracket.cash_fee < 0:
                raise RateTableError(f"Bracket {position} has a negative fee.")
            if position < len(brackets) - 1:
                if bracket.upper_bound is None:
                    raise RateTableError(
                        f"Only the last admin fee bracket may be unbounded (bracket {position})."
                    )
                if bracket.upper_bound <= 0:
                    raise RateTableError(f"Bracket {position} upper bound must be positive.")
            if previous is not None:
                if bracket.upper_bound is not None and bracket.upper_bound <= previous.upper_bound:
                    raise RateTableError(
                        f"Admin fee bracket bounds must be ascending (bracket {position})."
                    )
                if (bracket.deduction_fee < previous.deduction_fee
                        or bracket.cash_fee < previous.cash_fee):
                    raise RateTableError(
                        f"Admin fees must not decrease with price (bracket {position})."
                    )
            previous = bracket

        object.__setattr__(self, 'brackets', tuple(brackets))
        object.__setattr__(self, 'cash_methods', frozenset(self.cash_methods))

    def bracket_for(self, price: Decimal) -> AdminFeeBracket:
        for bracket in self.brackets:
            if bracket.upper_bound is None or price <= bracket.upper_bound:
                return bracket
        # Unreachable: the last bracket is unbounded
        return self.brackets[-1]

    def fee_for(self, price: Decimal, method: str) -> Decimal:
        bracket = self.bracket_for(price)
        if method in self.cash_methods:
            return bracket.cash_fee
        return bracket.deduction_fee


@dataclass(frozen=True)
class RateTables:
    """All lookup data the pricing engine needs."""

    exchange_rates: ExchangeRateTable
    term_rates: TermMethodRates
    admin_fees: AdminFeeSchedule


# =============================================================================
# DEFAULT TABLES
# =============================================================================

DEFAULT_EXCHANGE_RATES: Dict[str, str] = {
    'USD': '2100',
    'EUR': '2300',
    'SGD': '1550',
    'THB': '60',
    # Free-market USD quote, used by the arbitrage formula
    'FX': '6200',
    'MMK': '1',
}

# (term, method, bank, rate); bank=None is the method-level rate
DEFAULT_TERM_RATES: List[Tuple[int, str, Optional[str], str]] = [
    (3, SALARY_DEDUCTION, None, '0.0376'),
    (6, SALARY_DEDUCTION, None, '0.0376'),
    (9, SALARY_DEDUCTION, None, '0.0452'),
    (12, SALARY_DEDUCTION, None, '0.0528'),
    (3, CASH_PAYMENT, None, '0.045'),
    (6, CASH_PAYMENT, None, '0.045'),
    (9, CASH_PAYMENT, None, '0.0525'),
    (12, CASH_PAYMENT, None, '0.06'),
    (3, YOMA_BANK_DEDUCTION, None, '0.0376'),
    (6, YOMA_BANK_DEDUCTION, None, '0.0376'),
    (9, YOMA_BANK_DEDUCTION, None, '0.0452'),
    (12, YOMA_BANK_DEDUCTION, None, '0.0528'),
    (3, OTHER_BANK, None, '0.041'),
    (6, OTHER_BANK, None, '0.041'),
    (9, OTHER_BANK, None, '0.0486'),
    (12, OTHER_BANK, None, '0.0562'),
    # Bank options offered per method
    (3, SALARY_DEDUCTION, YOMA_BANK_DEDUCTION, '0.0376'),
    (6, SALARY_DEDUCTION, YOMA_BANK_DEDUCTION, '0.0376'),
    (9, SALARY_DEDUCTION, YOMA_BANK_DEDUCTION, '0.0452'),
    (12, SALARY_DEDUCTION, YOMA_BANK_DEDUCTION, '0.0528'),
    (3, SALARY_DEDUCTION, OTHER_BANK, '0.041'),
    (6, SALARY_DEDUCTION, OTHER_BANK, '0.041'),
    (9, SALARY_DEDUCTION, OTHER_BANK, '0.0486'),
    (12, SALARY_DEDUCTION, OTHER_BANK, '0.0562'),
    (3, CASH_PAYMENT, 'Standard', '0.045'),
    (6, CASH_PAYMENT, 'Standard', '0.045'),
    (9, CASH_PAYMENT, 'Standard', '0.0525'),
    (12, CASH_PAYMENT, 'Standard', '0.06'),
]

# (upper bound or None, deduction fee, cash fee)
DEFAULT_ADMIN_FEES: List[Tuple[Optional[str], str, str]] = [
    ('100000', '5000', '7000'),
    ('500000', '10000', '15000'),
    ('1000000', '20000', '30000'),
    (None, '30000', '45000'),
]


def build_rate_tables(exchange_rates, term_rates, admin_fees) -> RateTables:
    """
    Build validated tables from plain rows.

    Args:
        exchange_rates: Mapping of currency code → rate.
        term_rates: Iterable of (term, method, bank, rate) rows.
        admin_fees: Iterable of (upper_bound, deduction_fee, cash_fee) rows.

    Returns:
        RateTables instance.

    Raises:
        RateTableError: If any table violates its invariants.
    """
    return RateTables(
        exchange_rates=ExchangeRateTable(exchange_rates),
        term_rates=TermMethodRates(tuple(
            TermRate(term=term, method=method, bank=bank, rate=rate)
            for term, method, bank, rate in term_rates
        )),
        admin_fees=AdminFeeSchedule(tuple(
            AdminFeeBracket(upper_bound=upper, deduction_fee=deduction, cash_fee=cash)
            for upper, deduction, cash in admin_fees
        )),
    )


def default_rate_tables() -> RateTables:
    """Tables built from the module defaults."""
    return build_rate_tables(
        DEFAULT_EXCHANGE_RATES,
        DEFAULT_TERM_RATES,
        DEFAULT_ADMIN_FEES,
    )
