# farmform/services/registration_service.py
"""
Registration payment flow.

create_order: pending registration -> gateway order -> order_id attached.
verify_payment: order binding check, then signature check, then
pending/failed -> paid or pending/failed -> failed. Paid is terminal.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from farmform.core.config import Settings
from farmform.core.errors import (
    InvalidSignature,
    OrderCreationFailed,
    OrderMismatch,
    RegistrationNotFound,
    RegistrationValidationError,
    VerificationFailed,
)
from farmform.database.models import PaymentStatus, Registration
from farmform.database.store import RegistrationStore
from farmform.services.gateway import PaymentGateway
from farmform.services.signature import verify_signature

logger = logging.getLogger(__name__)

RECEIPT_PREFIX = "reg_"


@dataclass(frozen=True)
class CreatedOrder:
    order: Dict[str, Any]
    registration_id: str


def receipt_for(registration_id: str) -> str:
    return f"{RECEIPT_PREFIX}{registration_id}"


class RegistrationPaymentService:
    def __init__(self, store: RegistrationStore, gateway: PaymentGateway, settings: Settings):
        self.store = store
        self.gateway = gateway
        self.settings = settings

    def create_order(self, form: Mapping[str, Any]) -> CreatedOrder:
        try:
            registration = self.store.create(form)
        except RegistrationValidationError as exc:
            logger.info("Registration rejected: %s", exc)
            raise
        except Exception as exc:
            logger.exception("Failed to persist registration")
            raise OrderCreationFailed() from exc

        notes = {
            "farmerName": str(form.get("farmerName") or ""),
            "contactNumber": str(form.get("contactNumber") or ""),
        }
        try:
            order = self.gateway.create_order(
                amount=self.settings.registration_fee,
                currency=self.settings.currency,
                receipt=receipt_for(registration.id),
                notes=notes,
            )
            if not self.store.attach_order(registration.id, order["id"]):
                raise RuntimeError(f"Registration {registration.id} already has an order")
        except Exception as exc:
            logger.exception("Failed to create order for registration %s", registration.id)
            self._mark_order_failed(registration.id)
            raise OrderCreationFailed() from exc

        logger.info("Created order %s for registration %s", order["id"], registration.id)
        return CreatedOrder(order=order, registration_id=registration.id)

    def _mark_order_failed(self, registration_id: str) -> None:
        try:
            self.store.mark_order_failed(registration_id)
        except Exception:
            # the gateway or store error is what the caller sees
            logger.exception("Could not mark registration %s as order_failed", registration_id)

    def verify_payment(
        self,
        registration_id: Any,
        order_id: Any,
        payment_id: Any,
        signature: Any,
    ) -> Registration:
        registration = self.store.find_by_id(registration_id)
        if registration is None:
            logger.info("Verification for unknown registration %s", registration_id)
            raise RegistrationNotFound()

        if registration.order_id is None or registration.order_id != order_id:
            logger.warning(
                "Order mismatch for registration %s (stored=%s claimed=%s)",
                registration.id, registration.order_id, order_id,
            )
            raise OrderMismatch()

        if not verify_signature(order_id, payment_id, self.settings.razorpay_key_secret, signature):
            recorded = self.store.mark_failed(registration.id, payment_id, signature)
            if not recorded:
                logger.warning(
                    "Invalid signature for registration %s in state %s; attempt not recorded",
                    registration.id, registration.payment_status,
                )
            else:
                logger.warning("Signature mismatch for order %s", order_id)
            raise InvalidSignature()

        if not self.store.mark_paid(registration.id, payment_id, signature):
            current = self.store.find_by_id(registration.id)
            if current is not None and current.status is PaymentStatus.PAID:
                logger.info("Registration %s already paid; verification is a no-op", registration.id)
                return current
            raise VerificationFailed(
                f"Registration {registration.id} could not transition to paid"
            )

        logger.info("Payment %s verified for registration %s", payment_id, registration.id)
        return self.store.find_by_id(registration.id)
