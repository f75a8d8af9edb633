"""
Rate table views for the PLUS+ Calculator.

Views are thin; lookups and conversion live in the service layer.
"""

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.pricing.strategies import DEFAULT_STRATEGY, STRATEGIES
from apps.rates.loaders import get_rate_tables
from apps.rates.serializers import (
    BanksQuerySerializer,
    BanksResponseSerializer,
    ConvertResponseSerializer,
    ConvertSerializer,
    CurrencyRateSerializer,
)
from apps.rates.services import CurrencyConverter
from apps.rates.tables import BASE_CURRENCY

logger = logging.getLogger(__name__)


class RatesView(APIView):
    """
    GET /api/rates

    List the enumerations the calculator form may offer.
    """

    def get(self, request):
        """Handle listing currencies, terms, methods and strategies."""
        tables = get_rate_tables()

        currencies = [
            {'code': code, 'rate': rate}
            for code, rate in tables.exchange_rates.rates.items()
        ]

        return Response(
            {
                'base_currency': BASE_CURRENCY,
                'currencies': CurrencyRateSerializer(currencies, many=True).data,
                'terms': list(tables.term_rates.terms),
                'methods': list(tables.term_rates.methods),
                'strategies': [
                    {'name': name, 'description': strategy.description}
                    for name, strategy in STRATEGIES.items()
                ],
                'default_strategy': getattr(settings, 'PRICING_STRATEGY', DEFAULT_STRATEGY),
            },
            status=status.HTTP_200_OK,
        )


class ConvertView(APIView):
    """
    POST /api/convert

    Convert an entered amount into MMK.
    """

    def post(self, request):
        """Handle a currency conversion."""
        serializer = ConvertSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        amount = serializer.validated_data['amount']
        currency = serializer.validated_data['currency']

        converter = CurrencyConverter(get_rate_tables().exchange_rates)
        response_data = {
            'amount': amount,
            'currency': currency,
            'rate': converter.rate_for(currency),
            'amount_mmk': converter.to_base_currency(amount, currency),
        }

        logger.info(
            "Converted %s %s to %s %s",
            amount,
            currency,
            response_data['amount_mmk'],
            BASE_CURRENCY,
        )

        return Response(
            ConvertResponseSerializer(response_data).data,
            status=status.HTTP_200_OK,
        )


class BanksView(APIView):
    """
    GET /api/banks?method=<method>

    List the bank options for a repayment method and the default pick.
    """

    def get(self, request):
        """Handle listing bank options."""
        serializer = BanksQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        method = serializer.validated_data['method']
        term_rates = get_rate_tables().term_rates

        response_data = {
            'method': method,
            'banks': term_rates.available_banks(method),
            'default_bank': term_rates.resolve_bank(method),
        }

        return Response(
            BanksResponseSerializer(response_data).data,
            status=status.HTTP_200_OK,
        )
