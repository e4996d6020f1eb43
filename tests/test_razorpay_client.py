import hashlib
import hmac

import pytest
import requests

from app.domain.errors import PaymentProviderError
from app.services.razorpay_client import RazorpayClient, verify_payment_signature, verify_webhook_signature


def _sign(secret, message: bytes):
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


class FakeResponse:
    def __init__(self, status_code=200, payload=None, raw=None):
        self.status_code = status_code
        self._payload = payload
        self._raw = raw

    def json(self):
        if self._raw is not None:
            raise ValueError("not json")
        return self._payload


@pytest.fixture
def client():
    return RazorpayClient(key_id="rzp_test_key", key_secret="secret", base_url="https://api.example.test/v1/")


def test_webhook_signature():
    body = b'{"event":"payment.captured"}'
    signature = _sign("whsec", body)

    assert verify_webhook_signature(body, signature, "whsec")
    assert not verify_webhook_signature(body + b" ", signature, "whsec")
    assert not verify_webhook_signature(body, signature, "other")
    assert not verify_webhook_signature(body, "", "whsec")


def test_payment_signature():
    signature = _sign("secret", b"order_1|pay_1")

    assert verify_payment_signature("order_1", "pay_1", signature, "secret")
    assert not verify_payment_signature("order_1", "pay_2", signature, "secret")


def test_configured():
    assert RazorpayClient(key_id="k", key_secret="s").configured
    assert not RazorpayClient(key_id="", key_secret="").configured


def test_create_order(client, monkeypatch):
    calls = []

    def fake_post(url, json, auth, timeout):
        calls.append((url, json, auth))
        return FakeResponse(200, {"id": "order_Abc123", "status": "created"})

    monkeypatch.setattr(client.session, "post", fake_post)

    assert client.create_order(1298, "INR", "receipt-1") == "order_Abc123"
    url, payload, auth = calls[0]
    assert url == "https://api.example.test/v1/orders"
    assert payload == {"amount": 1298, "currency": "INR", "receipt": "receipt-1", "payment_capture": 1}
    assert auth == ("rzp_test_key", "secret")


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(401, {"error": {"code": "BAD_REQUEST_ERROR"}}),
        FakeResponse(200, {"id": ""}),
        FakeResponse(200, raw="<html>"),
    ],
)
def test_create_order_bad_response(client, monkeypatch, response):
    monkeypatch.setattr(client.session, "post", lambda *a, **kw: response)
    with pytest.raises(PaymentProviderError):
        client.create_order(100, "INR", "r")


def test_create_order_retries_connection_errors(client, monkeypatch):
    attempts = []

    def fake_post(*args, **kwargs):
        attempts.append(1)
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(client.session, "post", fake_post)

    with pytest.raises(PaymentProviderError):
        client.create_order(100, "INR", "r")
    assert len(attempts) == 3
