# farmform/core/errors.py
"""
Error taxonomy for registration and payment flows.

Every RegistrationError carries the HTTP status, a stable machine-readable
code and the public message the API returns. Internals never go into the
message; they stay on the chained exception for server-side logs.
"""
from typing import Any, Dict, List, Optional


class ConfigurationError(RuntimeError):
    """Missing or invalid configuration. Fatal at startup."""


class RegistrationError(Exception):
    status_code: int = 500
    code: str = "internal_error"
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}


class RegistrationValidationError(RegistrationError):
    status_code = 422
    code = "validation_failed"
    message = "Invalid registration"

    def __init__(self, fields: List[str]):
        self.fields = list(fields)
        super().__init__(f"Missing or invalid fields: {', '.join(self.fields)}")

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["fields"] = self.fields
        return body


class InvalidRequestBody(RegistrationError):
    status_code = 400
    code = "invalid_request"
    message = "Invalid request body"


class RegistrationNotFound(RegistrationError):
    status_code = 404
    code = "registration_not_found"
    message = "Registration not found"


class OrderMismatch(RegistrationError):
    status_code = 400
    code = "order_mismatch"
    message = "Order mismatch"


class InvalidSignature(RegistrationError):
    status_code = 400
    code = "signature_invalid"
    message = "Signature invalid"


class OrderCreationFailed(RegistrationError):
    code = "order_creation_failed"
    message = "Failed to create order"


class VerificationFailed(RegistrationError):
    code = "verification_failed"
    message = "Verification failed"
