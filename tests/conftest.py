"""
Pytest configuration and fixtures.
"""
from typing import Any, Dict, Iterator, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from farmform.core.config import Settings
from farmform.database.database import build_engine, build_session_factory, init_db
from farmform.database.store import RegistrationStore
from farmform.main import create_app
from farmform.services.gateway import PaymentGatewayError
from farmform.services.registration_service import RegistrationPaymentService

TEST_SECRET = "s3cr3t"


class FakeGateway:
    """In-memory stand-in for the Razorpay order API."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.fail_with: Optional[Exception] = None

    def create_order(self, amount: int, currency: str, receipt: str, notes: Dict[str, str]) -> Dict[str, Any]:
        self.calls.append({"amount": amount, "currency": currency, "receipt": receipt, "notes": notes})
        if self.fail_with is not None:
            raise self.fail_with
        return {
            "id": f"order_test{len(self.calls):04d}",
            "entity": "order",
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "status": "created",
            "notes": notes,
        }


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        razorpay_key_id="rzp_test_key",
        razorpay_key_secret=TEST_SECRET,
        database_url="sqlite://",
        registration_fee=30000,
        currency="INR",
        allowed_origins=("http://testserver-frontend",),
        log_level="DEBUG",
    )


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Iterator[Session]:
    session = build_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def store(db: Session) -> RegistrationStore:
    return RegistrationStore(db)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def service(store: RegistrationStore, gateway: FakeGateway, test_settings: Settings) -> RegistrationPaymentService:
    return RegistrationPaymentService(store=store, gateway=gateway, settings=test_settings)


@pytest.fixture
def client(test_settings: Settings, engine: Engine, gateway: FakeGateway) -> Iterator[TestClient]:
    """Create test HTTP client."""
    app = create_app(test_settings, engine=engine, gateway=gateway)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def form_payload() -> Dict[str, Any]:
    return {
        "email": "ravi@example.com",
        "registrationDate": "2025-06-01",
        "farmerName": "Ravi Kumar",
        "fatherSpouseName": "Suresh Kumar",
        "contactNumber": "9876543210",
        "village": "Kondapur",
        "district": "Medak",
        "state": "Telangana",
        "crops": [
            {"cropName": "Paddy", "cropType": "Kharif", "areaAllocated": "2", "sowingDate": "2025-06-15"},
        ],
        "livestock": ["cow", "goat"],
        "remarks": "Interested in natural farming training",
    }


@pytest.fixture
def gateway_down(gateway: FakeGateway) -> FakeGateway:
    gateway.fail_with = PaymentGatewayError("Gateway error: connection refused")
    return gateway
