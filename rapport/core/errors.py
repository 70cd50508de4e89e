"""
Typed failures raised by the core and the collaborator layers.

Each class carries the HTTP status the API layer renders it with, so the core
never builds a response itself. rapport.main owns the translation.
"""


class RapportError(Exception):
    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_payload(self) -> dict:
        return {"status": "error", "error": self.code, "detail": self.message}


class ValidationError(RapportError):
    status_code = 400
    code = "validation_error"


class UnauthorizedError(RapportError):
    status_code = 401
    code = "unauthorized"


class ForbiddenError(RapportError):
    status_code = 403
    code = "forbidden"


class NotFoundError(RapportError):
    status_code = 404
    code = "not_found"


class ConflictError(RapportError):
    status_code = 409
    code = "conflict"
