from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    MEMBERSHIP_CONFIG_INVALID = ErrorDefinition(
        "MEMBERSHIP_CONFIG_INVALID",
        "Membership configuration is invalid",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    MEMBERSHIP_CONFIG_UNAVAILABLE = ErrorDefinition(
        "MEMBERSHIP_CONFIG_UNAVAILABLE",
        "Membership configuration unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None):
        self.error = error
        self.details = details
        super().__init__(error.message)
