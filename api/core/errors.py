"""
API error taxonomy.

Services raise these; `main.py` turns them into JSON responses of the form
{"error": <kind>, "message": <text>}.
"""

from __future__ import annotations


class ApiError(Exception):
    status_code = 500
    kind = "internal_failure"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.kind

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class ClientInputError(ApiError):
    status_code = 400
    kind = "client_input"


class PayloadTooLarge(ClientInputError):
    status_code = 413
    kind = "payload_too_large"


class AuthenticationMissing(ApiError):
    status_code = 401
    kind = "authentication_missing"


class AuthorizationDenied(ApiError):
    status_code = 403
    kind = "authorization_denied"


class NotFound(ApiError):
    status_code = 404
    kind = "not_found"


class InternalFailure(ApiError):
    pass
