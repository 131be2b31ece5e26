import structlog
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from .api_key import API_KEY_HEADER, key_matches

logger = structlog.get_logger(__name__)

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


async def verify_internal_api_key(request: Request, api_key: str | None = Depends(api_key_header)) -> None:
    """Router-level dependency guarding every business route."""
    if not key_matches(api_key):
        logger.warning("api_key_rejected", path=request.url.path, header_present=bool(api_key))
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Invalid or missing {API_KEY_HEADER} header",
        )
