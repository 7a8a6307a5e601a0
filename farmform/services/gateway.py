# farmform/services/gateway.py
"""
Payment gateway client (Razorpay).

Only order creation goes over the wire. The key secret is handed to the SDK
for request auth and is otherwise used locally by the signature check.
"""
import logging
from typing import Any, Dict, Optional, Protocol

import razorpay
from razorpay.errors import BadRequestError, GatewayError, ServerError

logger = logging.getLogger(__name__)


class PaymentGatewayError(RuntimeError):
    """The gateway refused the request or could not be reached."""


class PaymentGateway(Protocol):
    def create_order(self, amount: int, currency: str, receipt: str, notes: Dict[str, str]) -> Dict[str, Any]:
        ...


class RazorpayGateway:
    def __init__(self, key_id: str, key_secret: str, client: Optional[Any] = None):
        self.key_id = key_id
        self._client = client if client is not None else razorpay.Client(auth=(key_id, key_secret))

    def create_order(self, amount: int, currency: str, receipt: str, notes: Dict[str, str]) -> Dict[str, Any]:
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes,
        }
        try:
            order = self._client.order.create(payload)
        except BadRequestError as bre:
            logger.warning("Razorpay BadRequestError while creating order %s: %s", receipt, bre)
            raise PaymentGatewayError(f"Order rejected by gateway: {bre}") from bre
        except (GatewayError, ServerError) as exc:
            logger.error("Razorpay unavailable while creating order %s: %s", receipt, exc)
            raise PaymentGatewayError(f"Gateway error: {exc}") from exc

        if not isinstance(order, dict) or not order.get("id"):
            raise PaymentGatewayError(f"Gateway returned no order id for receipt {receipt}")

        logger.info("Created gateway order %s for receipt %s", order["id"], receipt)
        return order
