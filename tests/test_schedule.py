"""
Tests for repayment schedule generation.
"""

from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from apps.core.utils import quantize_money
from apps.pricing.services import PricingEngine, ScheduleService
from apps.pricing.types import DEPOSIT_PERCENT, LoanInput
from apps.rates.tables import SALARY_DEDUCTION, default_rate_tables


class ScheduleServiceTests(SimpleTestCase):

    def setUp(self):
        self.tables = default_rate_tables()

    def price(self, strategy='amortizing', **kwargs):
        values = {
            'term': 3,
            'method': SALARY_DEDUCTION,
            'product_price': '100000',
        }
        values.update(kwargs)
        return PricingEngine(self.tables, strategy).compute(LoanInput(**values))

    def test_one_installment_per_month(self):
        result = self.price(term=6)
        schedule = ScheduleService.build(result, date(2024, 1, 15))
        self.assertEqual([item.number for item in schedule], [1, 2, 3, 4, 5, 6])

    def test_due_dates_follow_calendar_months(self):
        result = self.price()
        schedule = ScheduleService.build(result, date(2024, 1, 31))
        self.assertEqual(
            [item.due_date for item in schedule],
            [date(2024, 2, 29), date(2024, 3, 31), date(2024, 4, 30)],
        )

    def test_amounts_sum_to_rounded_total(self):
        result = self.price(strategy='flat')
        schedule = ScheduleService.build(result, date(2024, 1, 1))
        total = sum(item.amount for item in schedule)
        self.assertEqual(
            total,
            quantize_money(result.total_repayment),
        )

    def test_installments_rounded_to_cents(self):
        result = self.price()
        schedule = ScheduleService.build(result, date(2024, 1, 1))
        for item in schedule:
            self.assertEqual(item.amount, item.amount.quantize(Decimal('0.01')))
        self.assertEqual(
            schedule[0].amount,
            quantize_money(result.monthly_repayment),
        )

    def test_last_installment_absorbs_rounding(self):
        result = self.price(strategy='flat', product_price='100000')
        schedule = ScheduleService.build(result, date(2024, 1, 1))
        self.assertLessEqual(abs(schedule[-1].amount - schedule[0].amount), Decimal('0.02'))

    def test_no_schedule_when_nothing_financed(self):
        result = self.price(deposit='100', deposit_type=DEPOSIT_PERCENT)
        self.assertEqual(ScheduleService.build(result, date(2024, 1, 1)), [])

    def test_no_schedule_for_empty_price(self):
        result = self.price(product_price='')
        self.assertEqual(ScheduleService.build(result, date(2024, 1, 1)), [])

    def test_no_schedule_when_not_eligible(self):
        result = self.price(strategy='arbitrage', currency='USD', product_price='10')
        self.assertFalse(result.eligible)
        self.assertEqual(ScheduleService.build(result, date(2024, 1, 1)), [])
