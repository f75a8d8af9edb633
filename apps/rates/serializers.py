"""
Rate table serializers for the PLUS+ Calculator.
"""

from rest_framework import serializers

from apps.core.utils import MAX_AMOUNT, to_decimal
from apps.rates.loaders import get_rate_tables


def parse_amount(value):
    """Normalize entered text to a Decimal, rejecting values above MAX_AMOUNT."""
    amount = to_decimal(value)
    if amount > MAX_AMOUNT:
        raise serializers.ValidationError(f"Must not exceed {MAX_AMOUNT:,}.")
    return amount


class ConvertSerializer(serializers.Serializer):
    """Serializer for a currency conversion request."""

    amount = serializers.CharField(
        required=False,
        allow_blank=True,
        default='',
        help_text="Amount as entered; empty or invalid counts as 0.",
    )
    currency = serializers.ChoiceField(
        choices=[],
        help_text="Source currency code.",
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['currency'].choices = list(get_rate_tables().exchange_rates.codes)

    def validate_amount(self, value):
        return parse_amount(value)


class ConvertResponseSerializer(serializers.Serializer):
    """Serializer for a currency conversion response."""

    amount = serializers.DecimalField(max_digits=20, decimal_places=2)
    currency = serializers.CharField()
    rate = serializers.DecimalField(max_digits=20, decimal_places=4)
    amount_mmk = serializers.DecimalField(max_digits=20, decimal_places=2)


class BanksQuerySerializer(serializers.Serializer):
    """Serializer for the bank options query string."""

    method = serializers.ChoiceField(
        choices=[],
        help_text="Monthly repayment method.",
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['method'].choices = list(get_rate_tables().term_rates.methods)


class BanksResponseSerializer(serializers.Serializer):
    """Serializer for the bank options of a method."""

    method = serializers.CharField()
    banks = serializers.ListField(child=serializers.CharField())
    default_bank = serializers.CharField(allow_null=True)


class CurrencyRateSerializer(serializers.Serializer):
    """Serializer for one exchange rate entry."""

    code = serializers.CharField()
    rate = serializers.DecimalField(max_digits=20, decimal_places=4)
