# farmform/main.py
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from farmform.core.config import Settings, get_settings
from farmform.core.errors import InvalidRequestBody, RegistrationError
from farmform.database.database import build_engine, build_session_factory, init_db
from farmform.database.models import utcnow
from farmform.services.gateway import PaymentGateway, RazorpayGateway

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    gateway: Optional[PaymentGateway] = None,
) -> FastAPI:
    """
    Build the FastAPI app. Settings are resolved once here; a missing gateway
    credential raises ConfigurationError and the process does not start.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    engine = engine or build_engine(settings.database_url)
    init_db(engine)

    app = FastAPI(
        title=settings.project_name,
        description="Farmer registration with Razorpay payment verification",
        version=settings.version,
    )
    app.state.settings = settings
    app.state.session_factory = build_session_factory(engine)
    app.state.gateway = gateway or RazorpayGateway(settings.razorpay_key_id, settings.razorpay_key_secret)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    @app.exception_handler(RegistrationError)
    async def registration_error_handler(request: Request, exc: RegistrationError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # unparseable JSON; every shape of parsed body is handled by the routes
        logger.info("Rejected request body on %s: %s", request.url.path, [e.get("type") for e in exc.errors()])
        error = InvalidRequestBody()
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    from farmform.routers import health, registration_routes

    app.include_router(health.router)
    app.include_router(registration_routes.router, prefix="/api")

    @app.get("/")
    def root():
        return {
            "message": "Farmer Form Backend API",
            "version": settings.version,
            "status": "running",
            "endpoints": {
                "health": "/health",
                "test": "/api/test",
                "createOrder": "/api/create-order",
                "verifyPayment": "/api/verify-payment",
            },
            "timestamp": utcnow().isoformat(),
        }

    logger.info("✓ %s ready (currency=%s fee=%s)", settings.project_name, settings.currency, settings.registration_fee)
    return app
