"""Tests for the Stripe REST client and webhook signature verification."""

import json
from urllib.parse import parse_qs

import httpx
import pytest

from src.clients.stripe_client import StripeClient, compute_signature
from src.config import Settings
from src.utils.exceptions import BadRequestException, PaymentProviderException

NOW = 1_700_000_000


def make_settings(**overrides):
    values = {
        "stripe_secret_key": "sk_test_abc",
        "stripe_webhook_secret": "whsec_abc",
        "stripe_api_base": "https://stripe.test/v1",
    }
    values.update(overrides)
    return Settings(**values)


def session_kwargs(**overrides):
    kwargs = {
        "course_id": 7,
        "course_title": "Intro to Python",
        "amount": 1999,
        "currency": "usd",
        "user_id": 3,
        "customer_email": "learner@example.com",
        "success_url": "https://app.test/ok?session_id={CHECKOUT_SESSION_ID}",
        "cancel_url": "https://app.test/cancel",
    }
    kwargs.update(overrides)
    return kwargs


class TestCreateCheckoutSession:
    """Checkout Session creation over httpx"""

    @pytest.mark.asyncio
    async def test_posts_form_encoded_session(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(200, json={"id": "cs_123", "url": "https://checkout.stripe.com/c/cs_123"})

        client = StripeClient(make_settings(), transport=httpx.MockTransport(handler))
        session = await client.create_checkout_session(**session_kwargs())

        assert session == {"id": "cs_123", "url": "https://checkout.stripe.com/c/cs_123"}

        request = captured["request"]
        assert request.method == "POST"
        assert str(request.url) == "https://stripe.test/v1/checkout/sessions"
        assert request.headers["Authorization"] == "Bearer sk_test_abc"

        form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
        assert form["mode"] == "payment"
        assert form["line_items[0][price_data][unit_amount]"] == "1999"
        assert form["line_items[0][price_data][currency]"] == "usd"
        assert form["line_items[0][price_data][product_data][name]"] == "Intro to Python"
        assert form["line_items[0][quantity]"] == "1"
        assert form["metadata[course_id]"] == "7"
        assert form["metadata[user_id]"] == "3"
        assert form["client_reference_id"] == "3"
        assert form["success_url"] == "https://app.test/ok?session_id={CHECKOUT_SESSION_ID}"

    @pytest.mark.asyncio
    async def test_error_status_maps_to_provider_exception(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(402, json={"error": {"message": "card_declined"}})
        )
        client = StripeClient(make_settings(), transport=transport)

        with pytest.raises(PaymentProviderException) as exc_info:
            await client.create_checkout_session(**session_kwargs())
        assert "402" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_network_error_maps_to_provider_exception(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = StripeClient(make_settings(), transport=httpx.MockTransport(handler))
        with pytest.raises(PaymentProviderException) as exc_info:
            await client.create_checkout_session(**session_kwargs())
        assert exc_info.value.message == "Payment provider is unreachable"

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"<html>"))
        client = StripeClient(make_settings(), transport=transport)
        with pytest.raises(PaymentProviderException):
            await client.create_checkout_session(**session_kwargs())

    @pytest.mark.asyncio
    async def test_session_without_url(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"id": "cs_1"}))
        client = StripeClient(make_settings(), transport=transport)
        with pytest.raises(PaymentProviderException) as exc_info:
            await client.create_checkout_session(**session_kwargs())
        assert "incomplete" in exc_info.value.message


class TestConstructEvent:
    """Stripe-Signature header verification"""

    payload = json.dumps({"id": "evt_1", "type": "checkout.session.completed"}).encode()

    def header(self, timestamp=NOW, secret="whsec_abc", extra=""):
        signature = compute_signature(secret, str(timestamp), self.payload)
        return f"t={timestamp},v1={signature}{extra}"

    def test_valid_signature(self):
        client = StripeClient(make_settings())
        event = client.construct_event(self.payload, self.header(), now=NOW)
        assert event["type"] == "checkout.session.completed"

    def test_any_matching_v1_signature_is_accepted(self):
        """Stripe sends several v1 entries while a secret is being rolled."""
        client = StripeClient(make_settings())
        good = compute_signature("whsec_abc", str(NOW), self.payload)
        header = f"t={NOW},v1=deadbeef,v1={good},v0=ignored"
        assert client.construct_event(self.payload, header, now=NOW)["id"] == "evt_1"

    def test_tolerance_window(self):
        client = StripeClient(make_settings())
        client.construct_event(self.payload, self.header(timestamp=NOW - 300), now=NOW)
        with pytest.raises(BadRequestException) as exc_info:
            client.construct_event(self.payload, self.header(timestamp=NOW - 301), now=NOW)
        assert "tolerance" in exc_info.value.message

    def test_tampered_payload(self):
        client = StripeClient(make_settings())
        with pytest.raises(BadRequestException) as exc_info:
            client.construct_event(self.payload + b" ", self.header(), now=NOW)
        assert exc_info.value.message == "Invalid Stripe signature"

    @pytest.mark.parametrize("header", [None, "", "v1=abc", "t=abc,v1=abc", f"t={NOW}"])
    def test_missing_or_malformed_header(self, header):
        client = StripeClient(make_settings())
        with pytest.raises(BadRequestException):
            client.construct_event(self.payload, header, now=NOW)

    def test_signed_garbage_is_rejected(self):
        client = StripeClient(make_settings())
        payload = b"not json"
        signature = compute_signature("whsec_abc", str(NOW), payload)
        with pytest.raises(BadRequestException) as exc_info:
            client.construct_event(payload, f"t={NOW},v1={signature}", now=NOW)
        assert exc_info.value.message == "Invalid webhook payload"

    @pytest.mark.parametrize("payload", [b"[]", b'"evt_1"', b"42", b"null"])
    def test_signed_non_object_is_rejected(self, payload):
        client = StripeClient(make_settings())
        signature = compute_signature("whsec_abc", str(NOW), payload)
        with pytest.raises(BadRequestException) as exc_info:
            client.construct_event(payload, f"t={NOW},v1={signature}", now=NOW)
        assert exc_info.value.message == "Invalid webhook payload"
