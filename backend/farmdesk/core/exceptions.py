"""
Domain errors raised by the sync layer and services.

Each error carries the HTTP status it maps to; the app registers a single
handler (see farmdesk.core.middleware.farmdesk_error_handler) that turns them
into JSON responses.
"""
from typing import Any, Optional


class FarmDeskError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


class ProfileError(FarmDeskError):
    """No user profile or role for an authenticated identity. Fatal for the session."""
    status_code = 401


class BulkLoadError(FarmDeskError):
    status_code = 503

    def __init__(self, error_count: int, errors: Optional[list[BaseException]] = None):
        super().__init__(f"Failed to fetch data. Encountered {error_count} errors.")
        self.error_count = error_count
        self.errors = errors or []


class MutationError(FarmDeskError):
    """A save or delete rejected by the database. Carries the backend's text."""
    status_code = 400

    def __init__(self, action: str, table: str, backend_message: str):
        super().__init__(f"Error {action} data: {backend_message}")
        self.action = action
        self.table = table
        self.backend_message = backend_message

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "table": self.table}


class ValidationFailure(FarmDeskError):
    """Pre-submission check failed (required fields, referenced records)."""
    status_code = 422


class RecordNotFound(FarmDeskError):
    status_code = 404
