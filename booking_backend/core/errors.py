"""Error taxonomy shared by the HTTP routes and the tool interface.

Services raise these; the exception handlers in ``booking_backend.main`` turn them
into ``{error_code, message, details?}`` responses, and the tool dispatcher turns
them into ``isError`` envelopes. Nothing is retried.
"""

from typing import Any

from fastapi import status


class BookingAppError(Exception):
    error_code = "SERVER_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error_code": self.error_code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class BadRequestError(BookingAppError):
    """Validation failures, conflicts and business-rule violations."""

    error_code = "BAD_REQUEST"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(BookingAppError):
    error_code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    @classmethod
    def for_resource(cls, resource: str, resource_id: str) -> "NotFoundError":
        return cls(f"{resource} not found: {resource_id}")


class ServerError(BookingAppError):
    pass


def error_body(error_code: str, message: str, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error_code": error_code, "message": message}
    if details is not None:
        body["details"] = details
    return body
