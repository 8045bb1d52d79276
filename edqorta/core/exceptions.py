"""Custom exceptions for the workflow engine."""

from typing import Any


class AppException(Exception):
    """Base exception for application errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class ConfigurationError(AppException):
    """Raised when there's a configuration problem."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)


class ValidationError(AppException):
    """Raised when caller-supplied input is malformed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class NotFound(AppException):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(
            f"{entity.capitalize()} not found: {entity_id}",
            code="NOT_FOUND",
            details={"entity": entity, "id": entity_id},
        )


class InvalidState(AppException):
    """Raised when an operation is attempted from a state that forbids it."""

    def __init__(
        self,
        entity: str,
        entity_id: str,
        current: str | None,
        operation: str,
    ) -> None:
        super().__init__(
            f"Cannot {operation} {entity} {entity_id} while it is {current or 'unset'}",
            code="INVALID_STATE",
            details={
                "entity": entity,
                "id": entity_id,
                "current": current,
                "operation": operation,
            },
        )


class OutOfRange(AppException):
    """Raised when a verification geolocation falls outside the geofence."""

    def __init__(self, distance_meters: float, limit_meters: float) -> None:
        super().__init__(
            f"You are {distance_meters:.2f}m from the property. "
            f"Please move within {limit_meters:g}m of the property location.",
            code="OUT_OF_RANGE",
            details={
                "distance_meters": round(distance_meters, 3),
                "limit_meters": limit_meters,
            },
        )


class MissingEvidence(AppException):
    """Raised when a verification submission carries no photos."""

    def __init__(self, property_id: str) -> None:
        super().__init__(
            "Please capture at least one photo of the property.",
            code="MISSING_EVIDENCE",
            details={"property_id": property_id},
        )


class AlreadyPending(AppException):
    """Raised when a property already has a verification awaiting review."""

    def __init__(self, property_id: str) -> None:
        super().__init__(
            f"Verification already pending for property {property_id}",
            code="ALREADY_PENDING",
            details={"property_id": property_id},
        )
