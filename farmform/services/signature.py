import hashlib
import hmac
from typing import Any

SEPARATOR = "|"


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    """HMAC-SHA256 of ``order_id|payment_id`` keyed by the gateway secret, lowercase hex."""
    message = f"{order_id}{SEPARATOR}{payment_id}"
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_signature(order_id: Any, payment_id: Any, secret: str, provided_signature: Any) -> bool:
    """True only when ``provided_signature`` is exactly the expected signature."""
    if not all(isinstance(v, str) for v in (order_id, payment_id, provided_signature)):
        return False
    if not secret:
        return False
    expected = compute_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("utf-8"), provided_signature.encode("utf-8"))
