"""
Tests for the health check, rate listing, conversion and bank option APIs.
"""

from django.test import SimpleTestCase, override_settings
from rest_framework.test import APIClient


class HealthCheckTests(SimpleTestCase):

    def test_health(self):
        response = self.client.get('/health/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'status': 'healthy'})


@override_settings(RATE_TABLES_DIR=None)
class RatesTests(SimpleTestCase):
    """Test GET /api/rates."""

    def setUp(self):
        self.client = APIClient()
        self.url = '/api/rates'

    def test_lists_enumerations(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        data = response.json()

        self.assertEqual(data['base_currency'], 'MMK')
        self.assertEqual(data['terms'], [3, 6, 9, 12])
        self.assertEqual(
            data['methods'],
            ['Salary Deduction', 'Cash Payment', 'Yoma Bank Deduction', 'Other Bank'],
        )

    def test_currency_rates(self):
        data = self.client.get(self.url).json()
        rates = {item['code']: item['rate'] for item in data['currencies']}
        self.assertEqual(rates['USD'], '2100.0000')
        self.assertEqual(rates['MMK'], '1.0000')
        self.assertEqual(set(rates), {'USD', 'EUR', 'SGD', 'THB', 'FX', 'MMK'})

    def test_strategies(self):
        data = self.client.get(self.url).json()
        self.assertEqual(
            [item['name'] for item in data['strategies']],
            ['flat', 'flat_with_fee', 'amortizing', 'monthly_amortizing', 'arbitrage'],
        )
        for item in data['strategies']:
            self.assertTrue(item['description'])

    @override_settings(PRICING_STRATEGY='monthly_amortizing')
    def test_default_strategy_from_settings(self):
        data = self.client.get(self.url).json()
        self.assertEqual(data['default_strategy'], 'monthly_amortizing')


@override_settings(RATE_TABLES_DIR=None)
class ConvertTests(SimpleTestCase):
    """Test POST /api/convert."""

    def setUp(self):
        self.client = APIClient()
        self.url = '/api/convert'

    def test_convert(self):
        response = self.client.post(self.url, {
            'amount': '10',
            'currency': 'USD',
        }, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            'amount': '10.00',
            'currency': 'USD',
            'rate': '2100.0000',
            'amount_mmk': '21000.00',
        })

    def test_conversion_is_logged(self):
        with self.assertLogs('apps.rates.views', level='INFO') as logs:
            self.client.post(self.url, {'amount': '10', 'currency': 'USD'}, format='json')
        self.assertIn('Converted 10 USD to 21000 MMK', logs.output[0])

    def test_mmk_is_identity(self):
        data = self.client.post(self.url, {
            'amount': '12345.67',
            'currency': 'MMK',
        }, format='json').json()
        self.assertEqual(data['amount_mmk'], '12345.67')

    def test_empty_amount_is_zero(self):
        data = self.client.post(self.url, {
            'amount': '',
            'currency': 'THB',
        }, format='json').json()
        self.assertEqual(data['amount_mmk'], '0.00')

    def test_unknown_currency(self):
        response = self.client.post(self.url, {
            'amount': '10',
            'currency': 'GBP',
        }, format='json')
        self.assertEqual(response.status_code, 400)
        data = response.json()
        self.assertTrue(data['error'])
        self.assertIn('currency', data['detail'])

    def test_amount_above_limit(self):
        response = self.client.post(self.url, {
            'amount': '1e999999',
            'currency': 'USD',
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('amount', response.json()['detail'])

    def test_converted_amount_above_limit(self):
        response = self.client.post(self.url, {
            'amount': '1000000000000000',
            'currency': 'USD',
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.json()['error'])

    def test_missing_currency(self):
        response = self.client.post(self.url, {'amount': '10'}, format='json')
        self.assertEqual(response.status_code, 400)


@override_settings(RATE_TABLES_DIR=None)
class BanksTests(SimpleTestCase):
    """Test GET /api/banks."""

    def setUp(self):
        self.client = APIClient()
        self.url = '/api/banks'

    def test_salary_deduction_banks(self):
        response = self.client.get(self.url, {'method': 'Salary Deduction'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            'method': 'Salary Deduction',
            'banks': ['Yoma Bank Deduction', 'Other Bank'],
            'default_bank': 'Yoma Bank Deduction',
        })

    def test_cash_payment_banks(self):
        data = self.client.get(self.url, {'method': 'Cash Payment'}).json()
        self.assertEqual(data['banks'], ['Standard'])
        self.assertEqual(data['default_bank'], 'Standard')

    def test_method_without_banks(self):
        data = self.client.get(self.url, {'method': 'Other Bank'}).json()
        self.assertEqual(data['banks'], [])
        self.assertIsNone(data['default_bank'])

    def test_missing_method(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.json()['error'])

    def test_unknown_method(self):
        response = self.client.get(self.url, {'method': 'Barter'})
        self.assertEqual(response.status_code, 400)
        self.assertIn('method', response.json()['detail'])
