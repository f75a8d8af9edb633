"""
Pricing views for the PLUS+ Calculator.

Views are thin; all business logic is in the service layer.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.pricing.serializers import (
    CalculateLoanSerializer,
    InstallmentSerializer,
    LoanResultSerializer,
)
from apps.pricing.services import ScheduleService, compute
from apps.pricing.types import LoanInput

logger = logging.getLogger(__name__)


class CalculateLoanView(APIView):
    """
    POST /api/calculate-loan

    Compute repayment terms for the current calculator inputs.
    """

    def post(self, request):
        """Handle a loan calculation."""
        serializer = CalculateLoanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        loan_input = LoanInput(
            term=data['term'],
            method=data['method'],
            bank=data.get('bank'),
            currency=data['currency'],
            product_price=data['product_price'],
            deposit=data['deposit'],
            deposit_type=data['deposit_type'],
        )
        result = compute(loan_input, strategy=data.get('strategy'))

        logger.info(
            "Calculated %s loan: term=%d, method=%s, currency=%s, "
            "monthly=%s, eligible=%s",
            result.strategy,
            result.term,
            result.method,
            result.currency,
            result.monthly_repayment,
            result.eligible,
        )

        response_data = dict(LoanResultSerializer(result).data)

        start_date = data.get('start_date')
        if start_date is not None:
            schedule = ScheduleService.build(result, start_date)
            response_data['schedule'] = InstallmentSerializer(schedule, many=True).data

        return Response(response_data, status=status.HTTP_200_OK)
