from typing import Any

from fastapi import status


class AppError(Exception):
    code: str = "APP_ERROR"
    message: str = "Application error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    details: Any | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
    ):
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        if details is not None:
            self.details = details

        super().__init__(self.message)


class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    message = "Validation error"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    code = "NOT_FOUND"
    message = "Resource not found"
    status_code = status.HTTP_404_NOT_FOUND


class CredentialError(AppError):
    code = "CREDENTIAL_ERROR"
    message = "Authentication failed"
    status_code = status.HTTP_401_UNAUTHORIZED


class AccountNotFoundError(CredentialError):
    code = "ACCOUNT_NOT_FOUND"
    message = "Account not found"


class AccountDisabledError(CredentialError):
    code = "ACCOUNT_DISABLED"
    message = "Account is disabled"


class BadCredentialError(CredentialError):
    code = "BAD_CREDENTIAL"
    message = "Incorrect password"


class CapabilityError(AppError):
    code = "CAPABILITY_DENIED"
    message = "Insufficient permissions"
    status_code = status.HTTP_403_FORBIDDEN


class CeilingViolation(AppError):
    code = "RANK_CEILING_VIOLATION"
    message = "You cannot set a Community Rank higher than your own"
    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(AppError):
    code = "CONFLICT_ERROR"
    message = "Resource conflict"
    status_code = status.HTTP_409_CONFLICT


class CommunityNumberExhaustedError(ConflictError):
    code = "COMMUNITY_NUMBER_EXHAUSTED"
    message = "No community numbers are left to issue"


class InternalError(AppError):
    code = "INTERNAL_ERROR"
    message = "Internal server error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_payload(
    code: str,
    message: str,
    details: Any | None = None,
) -> dict[str, Any]:
    return {"error": {"code": code, "message": message, "details": details}}
