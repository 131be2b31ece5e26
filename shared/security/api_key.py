"""
Shared-secret check between the API layer and the warehouse core.

The expected key comes from INTERNAL_API_KEY. There is no built-in fallback:
when the variable is unset the core refuses every business request, and says
so once in the log at import time.
"""
import secrets

import structlog

from shared.config.settings import INTERNAL_API_KEY

logger = structlog.get_logger(__name__)

API_KEY_HEADER = "X-Internal-API-Key"

if not INTERNAL_API_KEY:
    logger.warning("internal_api_key_unset", effect="business routes will answer 403")


def key_matches(provided_key: str | None, expected_key: str = INTERNAL_API_KEY) -> bool:
    """Constant-time comparison; an empty key on either side never matches."""
    if not provided_key or not expected_key:
        return False
    # compare bytes so non-ASCII header values are rejected instead of raising TypeError
    return secrets.compare_digest(provided_key.encode("utf-8"), expected_key.encode("utf-8"))
