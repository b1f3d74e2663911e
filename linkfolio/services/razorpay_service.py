import logging
from typing import Any, Dict, Optional

import requests

from linkfolio.core.config import settings
from linkfolio.core.errors import PaymentGatewayError

logger = logging.getLogger(__name__)


def _auth() -> tuple:
    if not settings.payment_gateway_configured:
        raise PaymentGatewayError("Razorpay credentials not configured")
    return (settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)


def create_order(amount: int, currency: str, receipt: str, notes: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Create a checkout order. ``amount`` is in the smallest currency unit."""
    url = f"{settings.RAZORPAY_API_BASE}/orders"
    try:
        resp = requests.post(
            url,
            auth=_auth(),
            json={
                "amount": amount,
                "currency": currency,
                "receipt": receipt,
                "notes": notes or {},
            },
            timeout=10,
        )
    except requests.RequestException as e:
        raise PaymentGatewayError(f"Razorpay request failed: {e}") from e

    if resp.status_code >= 400:
        raise PaymentGatewayError(f"Failed to create Razorpay order: {resp.status_code}")

    data = resp.json() if resp.content else {}
    if not data.get("id"):
        raise PaymentGatewayError("Razorpay order id missing in response")
    logger.info(f"Razorpay order {data['id']} created for {amount} {currency}")
    return data
