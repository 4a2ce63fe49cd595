"""
Stripe client for hosted Checkout Sessions and webhook signature checks.

Talks to the Stripe REST API directly over httpx: one form-encoded
POST per checkout, plus local verification of the Stripe-Signature header.
"""

import hashlib
import hmac
import json
import logging
import time
from typing import Any, Dict, Optional

import httpx

from src.config import Settings
from src.utils.exceptions import BadRequestException, PaymentProviderException

logger = logging.getLogger(__name__)

SIGNATURE_TOLERANCE_SECONDS = 300


class StripeClient:
    """Minimal Stripe Checkout client"""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._api_base = settings.stripe_api_base.rstrip("/")
        self._secret_key = settings.stripe_secret_key
        self._webhook_secret = settings.stripe_webhook_secret
        self._timeout = settings.stripe_timeout
        self._transport = transport

    async def create_checkout_session(
            self,
            *,
            course_id: int,
            course_title: str,
            amount: int,
            currency: str,
            user_id: int,
            customer_email: str,
            success_url: str,
            cancel_url: str,
    ) -> Dict[str, Any]:
        """
        Create a one-item Checkout Session in payment mode.

        Returns:
            Dict with "id" and "url" of the hosted session

        Raises:
            PaymentProviderException: Transport failure, non-2xx status or malformed body
        """
        form = {
            "mode": "payment",
            "success_url": success_url,
            "cancel_url": cancel_url,
            "client_reference_id": str(user_id),
            "customer_email": customer_email,
            "line_items[0][quantity]": "1",
            "line_items[0][price_data][currency]": currency,
            "line_items[0][price_data][unit_amount]": str(amount),
            "line_items[0][price_data][product_data][name]": course_title,
            "metadata[user_id]": str(user_id),
            "metadata[course_id]": str(course_id),
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self._api_base}/checkout/sessions",
                    data=form,
                    headers={"Authorization": f"Bearer {self._secret_key}"},
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"❌ Stripe returned {e.response.status_code}: {e.response.text[:500]}")
            raise PaymentProviderException(
                f"Payment provider rejected the request ({e.response.status_code})"
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ Stripe request failed: {str(e)}")
            raise PaymentProviderException("Payment provider is unreachable")
        except ValueError:
            raise PaymentProviderException("Payment provider returned an invalid response")

        if not body.get("id") or not body.get("url"):
            raise PaymentProviderException("Payment provider returned an incomplete session")

        logger.info(f"✅ Created checkout session {body['id']} for course {course_id}")
        return {"id": body["id"], "url": body["url"]}

    def construct_event(self, payload: bytes, signature_header: Optional[str], now: Optional[int] = None) -> Dict[str, Any]:
        """
        Verify a webhook payload and return the parsed event.

        The header looks like ``t=1700000000,v1=<hex>,v1=<hex>``; the signed
        string is ``"{t}.{payload}"`` under HMAC-SHA256 with the webhook secret.

        Raises:
            BadRequestException: Missing/invalid signature, stale timestamp, or a body that is not a JSON object
        """
        if not signature_header:
            raise BadRequestException("Missing Stripe-Signature header")

        timestamp = None
        signatures = []
        for part in signature_header.split(","):
            key, _, value = part.strip().partition("=")
            if key == "t":
                timestamp = value
            elif key == "v1":
                signatures.append(value)

        if not timestamp or not timestamp.isdigit() or not signatures:
            raise BadRequestException("Malformed Stripe-Signature header")

        now = int(time.time()) if now is None else now
        if abs(now - int(timestamp)) > SIGNATURE_TOLERANCE_SECONDS:
            raise BadRequestException("Stripe signature timestamp outside tolerance")

        expected = compute_signature(self._webhook_secret, timestamp, payload)
        if not any(hmac.compare_digest(expected, sig) for sig in signatures):
            raise BadRequestException("Invalid Stripe signature")

        try:
            event = json.loads(payload)
        except ValueError:
            raise BadRequestException("Invalid webhook payload")
        if not isinstance(event, dict):
            raise BadRequestException("Invalid webhook payload")
        return event


def compute_signature(secret: str, timestamp: str, payload: bytes) -> str:
    signed = f"{timestamp}.".encode("utf-8") + payload
    return hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
