# app/services/razorpay_client.py
import hashlib
import hmac

import requests

from app.domain.errors import PaymentProviderError
from app.utils.retry import http_retry
from app.utils.settings import RAZORPAY_API_URL, RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET
from app.utils.logging import get_logger

logger = get_logger(__name__)


def _hmac_hex(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def verify_webhook_signature(body: bytes, signature: str, webhook_secret: str) -> bool:
    """Podpis webhooka: HMAC-SHA256 surowego body, hex, porownanie w stalym czasie."""
    expected = _hmac_hex(webhook_secret, body)
    return hmac.compare_digest(expected, signature or "")


def verify_payment_signature(order_id: str, payment_id: str, signature: str, key_secret: str) -> bool:
    """Podpis z Razorpay Checkout: HMAC-SHA256 z "order_id|payment_id" kluczem API."""
    expected = _hmac_hex(key_secret, f"{order_id}|{payment_id}".encode())
    return hmac.compare_digest(expected, signature or "")


class RazorpayClient:
    def __init__(
        self,
        key_id: str | None = None,
        key_secret: str | None = None,
        base_url: str | None = None,
        timeout: int = 15,
    ):
        self.key_id = key_id if key_id is not None else RAZORPAY_KEY_ID
        self.key_secret = key_secret if key_secret is not None else RAZORPAY_KEY_SECRET
        self.base_url = (base_url or RAZORPAY_API_URL).rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.key_id and self.key_secret)

    @http_retry()
    def _post(self, path: str, payload: dict) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.info(f"RazorpayClient POST {url}")
        return self.session.post(
            url,
            json=payload,
            auth=(self.key_id, self.key_secret),
            timeout=self.timeout,
        )

    def create_order(self, amount: int, currency: str, receipt: str) -> str:
        """Zaklada zamowienie u dostawcy, zwraca jego id (order_...)."""
        try:
            resp = self._post(
                "/orders",
                {
                    "amount": amount,
                    "currency": currency,
                    "receipt": receipt,
                    "payment_capture": 1,
                },
            )
        except requests.RequestException as e:
            raise PaymentProviderError(f"razorpay create order failed: {e}") from e

        if resp.status_code < 200 or resp.status_code >= 300:
            raise PaymentProviderError(f"razorpay create order failed: status={resp.status_code}")

        try:
            order_id = resp.json().get("id")
        except ValueError as e:
            raise PaymentProviderError("razorpay create order returned invalid json") from e

        if not order_id:
            raise PaymentProviderError("razorpay create order returned empty id")
        return order_id
