from fastapi import HTTPException, status
from typing import Any, Optional, Dict


# HTTP-facing exceptions. Domain errors are translated into these at the
# route layer so FastAPI's handlers produce the JSON error body.

class BaseAppException(HTTPException):
    """Base class for custom application exceptions for consistent logging."""
    def __init__(self, status_code: int, detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=status_code, detail=detail or "Application error", headers=headers)

class NotFoundError(BaseAppException):
    """Resource not found (HTTP 404)."""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class BadRequestError(BaseAppException):
    """Client provided invalid data or made a bad request (HTTP 400)."""
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class UnauthorizedError(BaseAppException):
    """Credential missing (HTTP 401)."""
    def __init__(self, detail: str = "Not authorized", headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail, headers=headers)

class ForbiddenError(BaseAppException):
    """Credential present but not accepted (HTTP 403)."""
    def __init__(self, detail: str = "Permission denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class InternalServerError(BaseAppException):
    """Generic unexpected server error (HTTP 500)."""
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
