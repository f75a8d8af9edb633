"""
Currency conversion service.

Normalizes entered prices and deposits into the base currency (MMK).
"""

import logging
from decimal import Decimal, Overflow

from apps.core.exceptions import AmountTooLargeError, InvalidCurrencyError
from apps.core.utils import MAX_AMOUNT, to_decimal
from apps.rates.tables import BASE_CURRENCY, ExchangeRateTable

logger = logging.getLogger(__name__)


def check_amount(amount: Decimal, what: str = 'Amount') -> Decimal:
    """
    Reject amounts above MAX_AMOUNT.

    Raises:
        AmountTooLargeError: If amount > MAX_AMOUNT.
    """
    if amount > MAX_AMOUNT:
        raise AmountTooLargeError(f"{what} must not exceed {MAX_AMOUNT:,}.")
    return amount


class CurrencyConverter:
    """Converts amounts into the base currency using an exchange rate table."""

    base_currency = BASE_CURRENCY

    def __init__(self, exchange_rates: ExchangeRateTable):
        self.exchange_rates = exchange_rates

    def rate_for(self, currency_code: str) -> Decimal:
        try:
            return self.exchange_rates.rate_for(currency_code)
        except InvalidCurrencyError:
            logger.warning("Rejected unknown currency %r", currency_code)
            raise

    def to_base_currency(self, amount, currency_code: str) -> Decimal:
        """
        Convert an amount into the base currency.

        Unparsable or negative amounts count as zero. An unknown
        currency code is a caller bug and is not guessed at.

        Args:
            amount: Amount in the source currency (str or number).
            currency_code: Code present in the exchange rate table.

        Returns:
            Amount in MMK as Decimal.

        Raises:
            InvalidCurrencyError: If currency_code is not in the table.
            AmountTooLargeError: If the amount or its MMK value exceeds
                MAX_AMOUNT.
        """
        rate = self.rate_for(currency_code)
        amount = check_amount(to_decimal(amount))
        try:
            converted = amount * rate
        except Overflow:
            raise AmountTooLargeError(f"Amount must not exceed {MAX_AMOUNT:,}.")
        return check_amount(converted, f"Amount in {self.base_currency}")

    @staticmethod
    def percent_of(base, percent) -> Decimal:
        """Return ``base * percent / 100``."""
        base = check_amount(to_decimal(base))
        percent = check_amount(to_decimal(percent), 'Percentage')
        return check_amount(base * percent / Decimal('100'), f"Amount in {BASE_CURRENCY}")
