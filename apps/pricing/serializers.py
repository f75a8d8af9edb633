"""
Pricing serializers for the PLUS+ Calculator.
"""

from rest_framework import serializers

from apps.pricing.strategies import strategy_names
from apps.pricing.types import DEPOSIT_PERCENT, DEPOSIT_TYPES
from apps.rates.loaders import get_rate_tables
from apps.rates.serializers import parse_amount


class CalculateLoanSerializer(serializers.Serializer):
    """Serializer for a loan calculation request."""

    term = serializers.ChoiceField(
        choices=[],
        help_text="Repayment term in months.",
    )
    method = serializers.ChoiceField(
        choices=[],
        help_text="Monthly repayment method.",
    )
    bank = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        default=None,
        help_text="Bank option; re-selected if the method does not offer it.",
    )
    currency = serializers.ChoiceField(
        choices=[],
        help_text="Currency the price and deposit are entered in.",
    )
    product_price = serializers.CharField(
        required=False,
        allow_blank=True,
        default='',
        help_text="Product price as entered; empty or invalid counts as 0.",
    )
    deposit = serializers.CharField(
        required=False,
        allow_blank=True,
        default='',
        help_text="Deposit as entered; empty or invalid counts as 0.",
    )
    deposit_type = serializers.ChoiceField(
        choices=DEPOSIT_TYPES,
        default=DEPOSIT_PERCENT,
        help_text="'percent' of the price or an 'amount' in the chosen currency.",
    )
    strategy = serializers.ChoiceField(
        choices=[],
        required=False,
        help_text="Pricing formula; defaults to the configured strategy.",
    )
    start_date = serializers.DateField(
        required=False,
        help_text="Purchase date; when given, a repayment schedule is returned.",
    )

    def __init__(self, *args, tables=None, **kwargs):
        super().__init__(*args, **kwargs)
        tables = tables or get_rate_tables()
        self.fields['term'].choices = [
            (term, f'{term} months') for term in tables.term_rates.terms
        ]
        self.fields['method'].choices = list(tables.term_rates.methods)
        self.fields['currency'].choices = list(tables.exchange_rates.codes)
        self.fields['strategy'].choices = list(strategy_names())

    def validate_product_price(self, value):
        return parse_amount(value)

    def validate_deposit(self, value):
        return parse_amount(value)

    def validate_bank(self, value):
        return value or None


class LoanResultSerializer(serializers.Serializer):
    """Serializer for a computed LoanResult."""

    strategy = serializers.CharField()
    term = serializers.IntegerField()
    method = serializers.CharField()
    bank = serializers.CharField(allow_null=True)
    currency = serializers.CharField()
    interest_rate = serializers.DecimalField(max_digits=10, decimal_places=6)
    principal_base = serializers.DecimalField(max_digits=20, decimal_places=2)
    deposit_base = serializers.DecimalField(max_digits=20, decimal_places=2)
    financed_principal = serializers.DecimalField(max_digits=20, decimal_places=2)
    admin_fee = serializers.DecimalField(max_digits=20, decimal_places=2)
    monthly_repayment = serializers.DecimalField(max_digits=20, decimal_places=2)
    total_repayment = serializers.DecimalField(max_digits=20, decimal_places=2)
    interest_amount = serializers.DecimalField(max_digits=20, decimal_places=2)
    monthly_interest = serializers.DecimalField(max_digits=20, decimal_places=2)
    min_salary_requirement = serializers.DecimalField(max_digits=20, decimal_places=2)
    eligible = serializers.BooleanField()
    is_negative = serializers.BooleanField()


class InstallmentSerializer(serializers.Serializer):
    """Serializer for one scheduled installment."""

    number = serializers.IntegerField()
    due_date = serializers.DateField()
    amount = serializers.DecimalField(max_digits=20, decimal_places=2)
