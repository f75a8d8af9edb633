"""
Tests for the numeric helpers using Decimal precision.
"""

from decimal import Decimal

from django.test import SimpleTestCase

from apps.core.utils import annuity_payment, floor_to_nearest, quantize_money, to_decimal


class AnnuityPaymentTests(SimpleTestCase):
    """Test the annuity (PMT) formula with Decimal."""

    def test_standard_payment(self):
        """100k at 1% per period over 12 periods."""
        payment = annuity_payment(Decimal('100000'), Decimal('0.01'), 12)
        self.assertIsInstance(payment, Decimal)
        self.assertAlmostEqual(float(payment), 8884.88, places=2)

    def test_zero_rate(self):
        """0% rate → simple division, no rounding."""
        payment = annuity_payment(Decimal('100000'), Decimal('0'), 3)
        self.assertEqual(payment, Decimal('100000') / Decimal('3'))

    def test_one_period(self):
        """A single period repays principal plus one period's rate."""
        payment = annuity_payment(Decimal('100000'), Decimal('0.05'), 1)
        self.assertEqual(quantize_money(payment), Decimal('105000.00'))

    def test_matches_closed_form(self):
        principal = Decimal('100000')
        rate = Decimal('0.0376')
        expected = principal * rate / (1 - (1 + rate) ** -3)
        self.assertEqual(annuity_payment(principal, rate, 3), expected)

    def test_payments_cover_principal(self):
        payment = annuity_payment(Decimal('250000'), Decimal('0.04'), 6)
        self.assertGreater(payment * 6, Decimal('250000'))

    def test_negative_rate(self):
        with self.assertRaises(ValueError):
            annuity_payment(Decimal('100000'), Decimal('-0.01'), 12)

    def test_zero_periods(self):
        with self.assertRaises(ValueError):
            annuity_payment(Decimal('100000'), Decimal('0.01'), 0)

    def test_accepts_int_and_float_inputs(self):
        """annuity_payment should coerce int/float to Decimal."""
        payment1 = annuity_payment(100000, 0.01, 12)
        payment2 = annuity_payment(100000.0, 0.01, 12)
        payment3 = annuity_payment(Decimal('100000'), Decimal('0.01'), 12)
        self.assertEqual(payment1, payment3)
        self.assertEqual(payment2, payment3)


class FloorToNearestTests(SimpleTestCase):
    """Tests for the truncating rounding utility."""

    def test_rounds_down(self):
        self.assertEqual(floor_to_nearest(179355), Decimal('179000'))

    def test_never_rounds_up(self):
        self.assertEqual(floor_to_nearest(Decimal('3999.99')), Decimal('3000'))

    def test_exact_multiple(self):
        self.assertEqual(floor_to_nearest(3000), Decimal('3000'))

    def test_below_unit(self):
        self.assertEqual(floor_to_nearest(999), Decimal('0'))

    def test_zero(self):
        self.assertEqual(floor_to_nearest(0), Decimal('0'))

    def test_negative(self):
        self.assertEqual(floor_to_nearest(-5000), Decimal('0'))

    def test_custom_unit(self):
        self.assertEqual(floor_to_nearest(1234, unit=100), Decimal('1200'))


class ToDecimalTests(SimpleTestCase):
    """Tests for free-text numeric normalization."""

    def test_plain_number(self):
        self.assertEqual(to_decimal('100000'), Decimal('100000'))

    def test_number_types(self):
        self.assertEqual(to_decimal(2500), Decimal('2500'))
        self.assertEqual(to_decimal(12.5), Decimal('12.5'))
        self.assertEqual(to_decimal(Decimal('7.25')), Decimal('7.25'))

    def test_thousands_separators(self):
        self.assertEqual(to_decimal('1,250,000.50'), Decimal('1250000.50'))

    def test_surrounding_whitespace(self):
        self.assertEqual(to_decimal('  42 '), Decimal('42'))

    def test_empty_is_zero(self):
        self.assertEqual(to_decimal(''), Decimal('0'))
        self.assertEqual(to_decimal('   '), Decimal('0'))
        self.assertEqual(to_decimal(None), Decimal('0'))

    def test_unparsable_is_zero(self):
        self.assertEqual(to_decimal('abc'), Decimal('0'))
        self.assertEqual(to_decimal('12abc'), Decimal('0'))

    def test_non_finite_is_zero(self):
        self.assertEqual(to_decimal('NaN'), Decimal('0'))
        self.assertEqual(to_decimal(float('inf')), Decimal('0'))

    def test_negative_is_zero(self):
        self.assertEqual(to_decimal('-100'), Decimal('0'))

    def test_bool_is_zero(self):
        self.assertEqual(to_decimal(True), Decimal('0'))


class QuantizeMoneyTests(SimpleTestCase):

    def test_half_up(self):
        self.assertEqual(quantize_money(Decimal('1.005')), Decimal('1.01'))

    def test_two_places(self):
        value = quantize_money(Decimal('100000') / Decimal('3'))
        self.assertEqual(value, Decimal('33333.33'))
