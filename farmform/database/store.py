# farmform/database/store.py
"""
Persistence for registrations and their payment state.

Form payloads arrive with the frontend's camelCase keys. Known keys map onto
columns of ``Registration``; anything else is kept untouched in ``extra``.
Payment-state changes go through ``transition`` which is a conditional
UPDATE, so two concurrent verifications cannot both win.
"""
import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from farmform.core.errors import RegistrationValidationError
from farmform.database.models import PaymentStatus, Registration, utcnow

logger = logging.getLogger(__name__)

# form key -> column
FORM_FIELDS: Dict[str, str] = {
    "email": "email",
    "registrationDate": "registration_date",
    "farmerName": "farmer_name",
    "fatherSpouseName": "father_spouse_name",
    "contactNumber": "contact_number",
    "altEmail": "alt_email",
    "village": "village",
    "mandal": "mandal",
    "district": "district",
    "state": "state",
    "aadhaarOrFarmerId": "aadhaar_or_farmer_id",
    "totalLand": "total_land",
    "areaUnderNaturalHa": "area_under_natural_ha",
    "crops": "crops",
    "presentCrop": "present_crop",
    "sowingDate": "sowing_date",
    "harvestingDate": "harvesting_date",
    "cropTypes": "crop_types",
    "currentPractice": "current_practice",
    "yearsExperience": "years_experience",
    "irrigationSource": "irrigation_source",
    "livestock": "livestock",
    "willingNaturalInputs": "willing_natural_inputs",
    "trainingRequired": "training_required",
    "localGroup": "local_group",
    "preferredSeason": "preferred_season",
    "remarks": "remarks",
}

REQUIRED_FIELDS = ("email", "farmerName", "fatherSpouseName", "contactNumber")

# keys every entry of the crops list must carry
CROP_REQUIRED_FIELDS = ("cropName", "cropType", "areaAllocated", "sowingDate")

LIST_COLUMNS = {"crops", "livestock"}

# Keys the client must never set through the form
PAYMENT_FIELDS = {"id", "_id", "orderId", "paymentStatus", "paymentId", "signature", "paidAt"}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _is_structured(value: Any) -> bool:
    return isinstance(value, (list, dict))


def _column_value(column: str, value: Any) -> Any:
    if value is None:
        return None
    if column in LIST_COLUMNS:
        return value if isinstance(value, list) else [value]
    # numbers and booleans keep their JSON spelling
    return _as_text(value)


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


def invalid_fields(form: Mapping[str, Any]) -> List[str]:
    """Names of required fields that are missing, blank or not plain values."""
    invalid = [
        name for name in REQUIRED_FIELDS
        if _is_blank(form.get(name)) or _is_structured(form.get(name))
    ]

    crops = form.get("crops")
    if crops is None:
        return invalid
    if not isinstance(crops, list):
        invalid.append("crops")
        return invalid
    for i, entry in enumerate(crops):
        if not isinstance(entry, Mapping):
            invalid.append(f"crops[{i}]")
            continue
        invalid.extend(
            f"crops[{i}].{name}" for name in CROP_REQUIRED_FIELDS if _is_blank(entry.get(name))
        )
    return invalid


class RegistrationStore:
    """Registration persistence on a single SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def create(self, form: Mapping[str, Any]) -> Registration:
        invalid = invalid_fields(form)
        if invalid:
            raise RegistrationValidationError(invalid)

        columns: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in form.items():
            if key in PAYMENT_FIELDS:
                logger.debug("Ignoring payment field %r in registration form", key)
                continue
            column = FORM_FIELDS.get(key)
            if column is None or (column not in LIST_COLUMNS and _is_structured(value)):
                # lists and objects for a text column are kept as sent
                extra[key] = value
            else:
                columns[column] = _column_value(column, value)

        registration = Registration(
            **columns,
            extra=extra or None,
            payment_status=PaymentStatus.PENDING.value,
        )
        self.db.add(registration)
        self._commit()
        self.db.refresh(registration)
        return registration

    def find_by_id(self, registration_id: Optional[str]) -> Optional[Registration]:
        if not registration_id or not isinstance(registration_id, str):
            return None
        return self.db.get(Registration, registration_id, populate_existing=True)

    def save(self, registration: Registration) -> None:
        self.db.add(registration)
        self._commit()

    def attach_order(self, registration_id: str, order_id: str) -> bool:
        """Set order_id once; a registration that already has an order is left alone."""
        stmt = (
            update(Registration)
            .where(
                Registration.id == registration_id,
                Registration.order_id.is_(None),
                Registration.payment_status == PaymentStatus.PENDING.value,
            )
            .values(order_id=order_id)
            .execution_options(synchronize_session=False)
        )
        return self._execute(stmt)

    def transition(
        self,
        registration_id: str,
        allowed: Iterable[PaymentStatus],
        status: PaymentStatus,
        **changes: Any,
    ) -> bool:
        """
        Compare-and-swap on payment_status.

        Applies ``status`` and ``changes`` only while the stored status is one
        of ``allowed``. Returns False when the row was not in an allowed state.
        """
        allowed_values: List[str] = [s.value for s in allowed]
        stmt = (
            update(Registration)
            .where(
                Registration.id == registration_id,
                Registration.payment_status.in_(allowed_values),
            )
            .values(payment_status=status.value, **changes)
            .execution_options(synchronize_session=False)
        )
        return self._execute(stmt)

    def mark_order_failed(self, registration_id: str) -> bool:
        return self.transition(
            registration_id,
            allowed=(PaymentStatus.PENDING,),
            status=PaymentStatus.ORDER_FAILED,
        )

    def mark_paid(self, registration_id: str, payment_id: str, signature: str) -> bool:
        return self.transition(
            registration_id,
            allowed=(PaymentStatus.PENDING, PaymentStatus.FAILED),
            status=PaymentStatus.PAID,
            payment_id=payment_id,
            signature=signature,
            paid_at=utcnow(),
        )

    def mark_failed(self, registration_id: str, payment_id: Any, signature: Any) -> bool:
        """Record a rejected attempt; non-string values are stored in their JSON spelling."""
        return self.transition(
            registration_id,
            allowed=(PaymentStatus.PENDING, PaymentStatus.FAILED),
            status=PaymentStatus.FAILED,
            payment_id=_as_text(payment_id),
            signature=_as_text(signature),
        )

    def _execute(self, stmt) -> bool:
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return result.rowcount == 1
