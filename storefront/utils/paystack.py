"""
Paystack payment gateway client.

Wraps the two REST calls the checkout flow needs:

1) initialize_transaction: create a hosted checkout session and return the
   authorization URL the customer is redirected to.
2) verify_transaction: ask Paystack for the final state of a reference after
   the inline widget or hosted page reports completion.

Amounts go to Paystack in subunits (pesewas/kobo) and come back the same way;
PaymentResult.amount is always in major units. Calls are made once; network
errors and non-2xx responses become a failed PaymentResult rather than an
exception.
"""

import json
import logging
import time
from decimal import Decimal
from typing import Any, Dict, Optional

import requests
from flask import current_app

from .prom_metrics import observe_gateway_call


class PaymentResult:
    """Outcome of a gateway call."""

    def __init__(self, success: bool, status: str = None, reference: str = None,
                 amount: Optional[Decimal] = None, message: str = None,
                 authorization_url: str = None, data: Dict[str, Any] = None):
        self.success = success
        self.status = status
        self.reference = reference
        self.amount = amount
        self.message = message
        self.authorization_url = authorization_url
        self.data = data or {}

    @property
    def paid(self) -> bool:
        """True when the gateway accepted the call and reports the charge as successful"""
        return self.success and self.status == 'success'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'status': self.status,
            'reference': self.reference,
            'amount': float(self.amount) if self.amount is not None else None,
            'message': self.message,
        }


class PaystackClient:
    """Thin client over the Paystack transaction API."""

    def __init__(self, secret_key: str = None, base_url: str = None, timeout: float = None):
        self.secret_key = secret_key
        self.base_url = base_url
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config=None) -> 'PaystackClient':
        config = config if config is not None else current_app.config
        return cls(
            secret_key=config.get('PAYSTACK_SECRET_KEY', ''),
            base_url=config.get('PAYSTACK_BASE_URL', 'https://api.paystack.co'),
            timeout=config.get('PAYSTACK_TIMEOUT', 15),
        )

    def _headers(self) -> Dict[str, str]:
        return {
            'Authorization': f'Bearer {self.secret_key}',
            'Content-Type': 'application/json',
        }

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _request(self, operation: str, method: str, path: str, payload: Dict[str, Any] = None):
        """Perform one HTTP call; returns (http_ok, body) or raises requests.RequestException"""
        started_at = time.time()
        try:
            response = requests.request(method, self._url(path), headers=self._headers(),
                                        json=payload, timeout=self.timeout)
        finally:
            observe_gateway_call(operation, time.time() - started_at)
        try:
            body = response.json()
        except ValueError:
            body = {'status': False, 'message': response.text[:500]}
        return response.ok, body

    def verify_transaction(self, reference: str) -> PaymentResult:
        """Look up the final state of a transaction reference."""
        if not reference:
            return PaymentResult(False, message='Missing payment reference')

        try:
            ok, body = self._request('verify', 'GET', f'/transaction/verify/{reference}')
        except requests.RequestException as e:
            self.logger.error(json.dumps({
                'event': 'paystack_verify_error',
                'reference': reference,
                'error': str(e)[:500],
            }), exc_info=True)
            return PaymentResult(False, reference=reference, message='Payment gateway unreachable')

        if not ok or not body.get('status'):
            self.logger.error(json.dumps({
                'event': 'paystack_verify_failed',
                'reference': reference,
                'message': body.get('message'),
            }))
            return PaymentResult(False, reference=reference,
                                 message=body.get('message') or 'Invalid or failed verification',
                                 data=body)

        data = body.get('data') or {}
        amount = data.get('amount')
        result = PaymentResult(
            True,
            status=data.get('status'),
            reference=data.get('reference') or reference,
            amount=(Decimal(amount) / 100) if amount is not None else None,
            message=data.get('gateway_response') or body.get('message'),
            data=data,
        )
        self.logger.info(json.dumps({
            'event': 'paystack_verify_success',
            'reference': result.reference,
            'status': result.status,
            'amount': float(result.amount) if result.amount is not None else None,
        }))
        return result

    def initialize_transaction(self, email: str, amount_subunits: int, reference: str,
                               callback_url: str = None, currency: str = 'GHS',
                               channels=None, metadata: Dict[str, Any] = None) -> PaymentResult:
        """Create a hosted checkout session for the given amount (in subunits)."""
        payload = {
            'email': email,
            'amount': int(amount_subunits),
            'reference': reference,
            'currency': currency,
        }
        if callback_url:
            payload['callback_url'] = callback_url
        if channels:
            payload['channels'] = list(channels)
        if metadata:
            payload['metadata'] = metadata

        try:
            ok, body = self._request('initialize', 'POST', '/transaction/initialize', payload)
        except requests.RequestException as e:
            self.logger.error(json.dumps({
                'event': 'paystack_initialize_error',
                'reference': reference,
                'error': str(e)[:500],
            }), exc_info=True)
            return PaymentResult(False, reference=reference, message='Payment gateway unreachable')

        if not ok or not body.get('status'):
            self.logger.error(json.dumps({
                'event': 'paystack_initialize_failed',
                'reference': reference,
                'message': body.get('message'),
            }))
            return PaymentResult(False, reference=reference,
                                 message=body.get('message') or 'Unable to initialize payment',
                                 data=body)

        data = body.get('data') or {}
        return PaymentResult(
            True,
            status='initialized',
            reference=data.get('reference') or reference,
            amount=Decimal(int(amount_subunits)) / 100,
            authorization_url=data.get('authorization_url'),
            data=data,
        )
