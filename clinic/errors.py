"""
Error taxonomy for the record API.

Services raise these; the app factory turns them into JSON responses
(`{"error": ..., "code": ...}`) so handlers never build error payloads by hand.
"""


class ClinicError(Exception):
    status_code = 500
    code = "internal_error"
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class BadRequest(ClinicError):
    status_code = 400
    code = "bad_request"
    default_message = "Invalid request"

    def __init__(self, message: str | None = None, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []

    def to_dict(self) -> dict:
        payload = super().to_dict()
        if self.fields:
            payload["fields"] = self.fields
        return payload


class InvalidCredentials(ClinicError):
    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid email or password"


class Unauthorized(ClinicError):
    status_code = 401
    code = "unauthorized"
    default_message = "Authentication required"


class Forbidden(ClinicError):
    status_code = 403
    code = "forbidden"
    default_message = "You do not have access to this record"


class NotFound(ClinicError):
    status_code = 404
    code = "not_found"
    default_message = "Record not found"


class Conflict(ClinicError):
    status_code = 409
    code = "conflict"
    default_message = "Record already exists"


class InternalError(ClinicError):
    status_code = 500
    code = "internal_error"
    default_message = "Something went wrong, please try again"
