from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base for exceptions that map straight onto an HTTP status."""

    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail_default = "Internal server error"

    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=self.status_code_default,
            detail=detail or self.detail_default,
        )


class UnauthorizedException(AppException):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    detail_default = "Unauthorized"


class ForbiddenException(AppException):
    status_code_default = status.HTTP_403_FORBIDDEN
    detail_default = "Forbidden"


class NotFoundException(AppException):
    status_code_default = status.HTTP_404_NOT_FOUND
    detail_default = "Not found"


class ValidationException(AppException):
    status_code_default = status.HTTP_400_BAD_REQUEST
    detail_default = "Invalid request"


class ConflictException(AppException):
    status_code_default = status.HTTP_409_CONFLICT
    detail_default = "Conflict"
