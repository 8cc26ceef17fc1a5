"""
ChartChat - Custom Exceptions.

Centralized exception handling with standardized error responses.
"""

from typing import Any
from uuid import UUID


class ChartChatException(Exception):
    """Base exception for ChartChat application."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
        request_id: UUID | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.request_id = request_id
        super().__init__(message)


class FeatureDisabledException(ChartChatException):
    """Raised when a feature flag is disabled."""

    def __init__(self, feature_name: str):
        super().__init__(
            code="FEATURE_DISABLED",
            message=f"Feature '{feature_name}' is currently disabled",
            status_code=503,
            details={"feature": feature_name},
        )


class ExternalServiceException(ChartChatException):
    """Raised when an external service fails."""

    def __init__(self, service_name: str, message: str):
        super().__init__(
            code="EXTERNAL_SERVICE_ERROR",
            message=f"{service_name} error: {message}",
            status_code=502,
            details={"service": service_name},
        )


# =============================================================================
# Visual host errors
# =============================================================================


class HostException(ChartChatException):
    """Raised when the embedded visual host rejects or fails an operation."""

    def __init__(
        self,
        message: str,
        code: str = "HOST_ERROR",
        status_code: int = 502,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status_code,
            details=details,
        )


class RoleUnavailableException(HostException):
    """Raised when a data role does not exist on the visual's chart kind."""

    def __init__(self, role: str, visual_type: str | None = None):
        super().__init__(
            code="ROLE_UNAVAILABLE",
            message=f"Data role '{role}' is not available on this visual",
            status_code=409,
            details={"role": role, "visual_type": visual_type},
        )
        self.role = role


class NothingToRemoveException(HostException):
    """Raised when a removal addresses an index that holds no field."""

    def __init__(self, role: str, index: int):
        super().__init__(
            code="NOTHING_TO_REMOVE",
            message=f"No field at index {index} of data role '{role}'",
            status_code=409,
            details={"role": role, "index": index},
        )
        self.role = role
        self.index = index


class HostTimeoutException(HostException):
    """Raised when the host does not acknowledge an operation in time."""

    def __init__(self, operation: str, timeout_seconds: float):
        super().__init__(
            code="HOST_TIMEOUT",
            message=f"Visual host did not acknowledge '{operation}' within {timeout_seconds:g}s",
            status_code=504,
            details={"operation": operation, "timeout_seconds": timeout_seconds},
        )


# =============================================================================
# Intent application errors
# =============================================================================


class VisualNotFoundException(ChartChatException):
    """Raised when no active page or no eligible chart visual exists."""

    def __init__(self, message: str, available_types: list[str] | None = None):
        super().__init__(
            code="NOT_FOUND",
            message=message,
            status_code=404,
            details={"available_types": available_types} if available_types is not None else None,
        )


class MandatoryAssignmentException(ChartChatException):
    """Raised when the Y or Category role rejects its field."""

    def __init__(self, role: str, field_name: str, reason: str):
        super().__init__(
            code="MANDATORY_ASSIGNMENT_FAILED",
            message=f"Could not add '{field_name}' to the {role} data role: {reason}",
            status_code=502,
            details={"role": role, "field": field_name},
        )


class ChartTypeChangeException(ChartChatException):
    """Raised when the host refuses to change the visual's chart kind."""

    def __init__(self, current_type: str, target_type: str, reason: str):
        super().__init__(
            code="CHART_TYPE_CHANGE_FAILED",
            message=f"Could not change chart type from {current_type} to {target_type}: {reason}",
            status_code=502,
            details={"current_type": current_type, "target_type": target_type},
        )


class SessionClosedException(ChartChatException):
    """Raised when a run reaches a chart session that has already ended."""

    def __init__(self, session_id: str):
        super().__init__(
            code="SESSION_CLOSED",
            message=f"Chart session '{session_id}' has ended",
            status_code=409,
            details={"session_id": session_id},
        )
