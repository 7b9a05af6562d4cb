"""
Service error taxonomy.

Services raise these; the exception handlers registered in `app.main` turn
them into `{"error": <kind>, "message": <text>}` JSON bodies.
"""
from typing import Iterable, Optional


class ServiceError(Exception):
    kind: str = "ServiceError"
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"error": self.kind, "message": self.message}


class ValidationError(ServiceError):
    kind = "ValidationError"
    status_code = 400

    def __init__(self, message: str, fields: Optional[Iterable[str]] = None) -> None:
        super().__init__(message)
        self.fields = sorted(set(fields or ()))

    def to_body(self) -> dict:
        body = super().to_body()
        if self.fields:
            body["fields"] = self.fields
        return body


class NotFound(ServiceError):
    kind = "NotFound"
    status_code = 404


class ConflictError(ServiceError):
    kind = "ConflictError"
    status_code = 409


class StoreError(ServiceError):
    kind = "StoreError"
    status_code = 500
