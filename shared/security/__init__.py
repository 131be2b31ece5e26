from .api_key import API_KEY_HEADER, key_matches
from .dependencies import verify_internal_api_key

__all__ = [
    "API_KEY_HEADER",
    "key_matches",
    "verify_internal_api_key",
]
