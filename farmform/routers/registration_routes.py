# farmform/routers/registration_routes.py
"""
Registration payment routes (Razorpay checkout)
"""
from typing import Any, Dict, Optional
import logging

from fastapi import APIRouter, Body, Depends, Request
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from farmform.core.errors import OrderCreationFailed, RegistrationError, VerificationFailed
from farmform.database.database import get_db
from farmform.database.store import RegistrationStore
from farmform.services.registration_service import RegistrationPaymentService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Registrations"])


class CreateOrderResponse(BaseModel):
    order: Dict[str, Any]
    registrationId: str


class VerifyPaymentRequest(BaseModel):
    # values are checked by the service; a wrong type fails lookup or signature
    registrationId: Optional[Any] = None
    razorpay_order_id: Optional[Any] = None
    razorpay_payment_id: Optional[Any] = None
    razorpay_signature: Optional[Any] = None

    model_config = ConfigDict(extra="ignore")


class VerifyPaymentResponse(BaseModel):
    ok: bool = Field(default=True)


def get_registration_service(request: Request, db: Session = Depends(get_db)) -> RegistrationPaymentService:
    return RegistrationPaymentService(
        store=RegistrationStore(db),
        gateway=request.app.state.gateway,
        settings=request.app.state.settings,
    )


@router.post("/create-order", response_model=CreateOrderResponse)
def create_order(
    form: Any = Body(None),
    service: RegistrationPaymentService = Depends(get_registration_service),
) -> CreateOrderResponse:
    if not isinstance(form, dict):
        form = {}
    logger.debug("create_order fields: %s", sorted(form.keys()))
    try:
        created = service.create_order(form)
    except RegistrationError:
        raise
    except Exception as exc:
        logger.exception("Unexpected error in create_order")
        raise OrderCreationFailed() from exc
    return CreateOrderResponse(order=created.order, registrationId=created.registration_id)


@router.post("/verify-payment", response_model=VerifyPaymentResponse)
def verify_payment(
    body: Any = Body(None),
    service: RegistrationPaymentService = Depends(get_registration_service),
) -> VerifyPaymentResponse:
    payload = VerifyPaymentRequest.model_validate(body if isinstance(body, dict) else {})
    try:
        service.verify_payment(
            registration_id=payload.registrationId,
            order_id=payload.razorpay_order_id,
            payment_id=payload.razorpay_payment_id,
            signature=payload.razorpay_signature,
        )
    except RegistrationError:
        raise
    except Exception as exc:
        logger.exception("Unexpected error in payment verify for registration %s", payload.registrationId)
        raise VerificationFailed() from exc
    return VerifyPaymentResponse(ok=True)
