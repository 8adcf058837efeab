"""
Paystack client tests. HTTP calls are mocked at requests.request.
"""

from decimal import Decimal
from unittest.mock import patch, MagicMock

import requests
from storefront.utils.paystack import PaystackClient, PaymentResult


def make_response(status_code=200, body=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = body if body is not None else {}
    response.text = ''
    return response


def make_client():
    return PaystackClient(secret_key='sk_test_secret', base_url='https://api.paystack.test/', timeout=5)


class TestVerifyTransaction:

    @patch('storefront.utils.paystack.requests.request')
    def test_successful_verification(self, mock_request):
        mock_request.return_value = make_response(200, {
            'status': True,
            'message': 'Verification successful',
            'data': {'status': 'success', 'reference': 'ORD-1-ABC-99', 'amount': 90000,
                     'gateway_response': 'Approved'},
        })

        result = make_client().verify_transaction('ORD-1-ABC-99')

        assert result.success
        assert result.paid
        assert result.status == 'success'
        assert result.amount == Decimal('900')
        assert result.reference == 'ORD-1-ABC-99'

        args, kwargs = mock_request.call_args
        assert args == ('GET', 'https://api.paystack.test/transaction/verify/ORD-1-ABC-99')
        assert kwargs['headers']['Authorization'] == 'Bearer sk_test_secret'
        assert kwargs['timeout'] == 5

    @patch('storefront.utils.paystack.requests.request')
    def test_failed_charge_is_not_paid(self, mock_request):
        mock_request.return_value = make_response(200, {
            'status': True,
            'data': {'status': 'failed', 'reference': 'R1', 'amount': 500},
        })

        result = make_client().verify_transaction('R1')
        assert result.success
        assert not result.paid
        assert result.status == 'failed'

    @patch('storefront.utils.paystack.requests.request')
    def test_status_false_body(self, mock_request):
        mock_request.return_value = make_response(200, {'status': False, 'message': 'Transaction reference not found'})

        result = make_client().verify_transaction('missing')
        assert not result.success
        assert result.message == 'Transaction reference not found'

    @patch('storefront.utils.paystack.requests.request')
    def test_http_error(self, mock_request):
        mock_request.return_value = make_response(401, {'status': False})

        result = make_client().verify_transaction('R1')
        assert not result.success
        assert result.message == 'Invalid or failed verification'

    @patch('storefront.utils.paystack.requests.request')
    def test_network_error_is_not_retried(self, mock_request):
        mock_request.side_effect = requests.Timeout('timed out')

        result = make_client().verify_transaction('R1')
        assert not result.success
        assert result.message == 'Payment gateway unreachable'
        assert mock_request.call_count == 1

    @patch('storefront.utils.paystack.requests.request')
    def test_missing_reference_makes_no_call(self, mock_request):
        result = make_client().verify_transaction('')
        assert not result.success
        mock_request.assert_not_called()


class TestInitializeTransaction:

    @patch('storefront.utils.paystack.requests.request')
    def test_initialize_returns_authorization_url(self, mock_request):
        mock_request.return_value = make_response(200, {
            'status': True,
            'data': {'authorization_url': 'https://checkout.paystack.com/xyz', 'reference': 'R2'},
        })

        result = make_client().initialize_transaction(
            'buyer@example.com', 90000, 'R2', callback_url='http://localhost/payment/callback',
            channels=['mobile_money'], metadata={'order_id': 1},
        )

        assert result.success
        assert result.authorization_url == 'https://checkout.paystack.com/xyz'
        assert result.amount == Decimal('900')

        args, kwargs = mock_request.call_args
        assert args == ('POST', 'https://api.paystack.test/transaction/initialize')
        assert kwargs['json'] == {
            'email': 'buyer@example.com',
            'amount': 90000,
            'reference': 'R2',
            'currency': 'GHS',
            'callback_url': 'http://localhost/payment/callback',
            'channels': ['mobile_money'],
            'metadata': {'order_id': 1},
        }

    @patch('storefront.utils.paystack.requests.request')
    def test_initialize_failure(self, mock_request):
        mock_request.return_value = make_response(400, {'status': False, 'message': 'Invalid key'})

        result = make_client().initialize_transaction('buyer@example.com', 100, 'R3')
        assert not result.success
        assert result.message == 'Invalid key'


class TestFromConfig:

    def test_reads_app_config(self, app):
        with app.app_context():
            client = PaystackClient.from_config()
        assert client.secret_key == 'sk_test_secret'
        assert client.base_url == 'https://api.paystack.test'

    def test_payment_result_to_dict(self):
        result = PaymentResult(True, status='success', reference='R', amount=Decimal('12.50'))
        assert result.to_dict() == {
            'success': True, 'status': 'success', 'reference': 'R', 'amount': 12.5, 'message': None,
        }
