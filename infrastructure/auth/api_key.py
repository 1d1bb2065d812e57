import secrets
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader

from app.config import Settings, get_settings
from app.exceptions import ForbiddenError, UnauthorizedError
from infrastructure.utils.logging_config import logger

API_KEY_HEADER = "X-API-Key"

api_key_scheme = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


async def require_api_key(
    api_key: Annotated[Optional[str], Depends(api_key_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """
    FastAPI dependency enforcing the shared API key.

    Disabled when ``API_KEY`` is empty. Otherwise a missing header is a
    401 and a wrong key is a 403.
    """
    expected = settings.API_KEY
    if not expected:
        return
    if not api_key:
        logger.warning("Request rejected: missing API key header")
        raise UnauthorizedError(f"missing {API_KEY_HEADER} header")
    if not secrets.compare_digest(api_key.encode(), expected.encode()):
        logger.warning("Request rejected: invalid API key")
        raise ForbiddenError(f"invalid {API_KEY_HEADER}")
