# farmform/database/models.py
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, String, Text

from farmform.database.database import Base


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    ORDER_FAILED = "order_failed"  # gateway order could not be opened


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_registration_id() -> str:
    return uuid.uuid4().hex


# ==========================
# REGISTRATION MODEL
# ==========================
class Registration(Base):
    __tablename__ = "registrations"

    id = Column(String(32), primary_key=True, default=_new_registration_id)

    # Farmer details
    email = Column(Text, nullable=False)
    registration_date = Column(Text, nullable=True)
    farmer_name = Column(Text, nullable=False)
    father_spouse_name = Column(Text, nullable=False)
    contact_number = Column(Text, nullable=False)
    alt_email = Column(Text, nullable=True)
    village = Column(Text, nullable=True)
    mandal = Column(Text, nullable=True)
    district = Column(Text, nullable=True)
    state = Column(Text, nullable=True)
    aadhaar_or_farmer_id = Column(Text, nullable=True)

    # Land and crops
    total_land = Column(Text, nullable=True)
    area_under_natural_ha = Column(Text, nullable=True)
    crops = Column(JSON, nullable=True)  # list of crop entries
    present_crop = Column(Text, nullable=True)
    sowing_date = Column(Text, nullable=True)
    harvesting_date = Column(Text, nullable=True)
    crop_types = Column(Text, nullable=True)

    # Practices
    current_practice = Column(Text, nullable=True)
    years_experience = Column(Text, nullable=True)
    irrigation_source = Column(Text, nullable=True)
    livestock = Column(JSON, nullable=True)
    willing_natural_inputs = Column(Text, nullable=True)
    training_required = Column(Text, nullable=True)
    local_group = Column(Text, nullable=True)
    preferred_season = Column(Text, nullable=True)
    remarks = Column(Text, nullable=True)

    # Fields the form sent that have no column of their own
    extra = Column(JSON, nullable=True)

    # Payment/order
    order_id = Column(String(100), unique=True, nullable=True, index=True)  # Razorpay order_id
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value, index=True)
    payment_id = Column(Text, nullable=True)  # Razorpay payment_id
    signature = Column(Text, nullable=True)  # last reported HMAC signature
    paid_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    @property
    def status(self) -> PaymentStatus:
        return PaymentStatus(self.payment_status)
