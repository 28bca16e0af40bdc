# api_server/core/security.py
import hmac
import os
from typing import Optional

from fastapi import Depends, HTTPException, Security, status
from fastapi.security.api_key import APIKeyHeader

# The key clients must present, taken from SERVER_API_KEY when set.
SERVER_API_KEY_ENV_VAR = "SERVER_API_KEY"
DEFAULT_DEV_API_KEY = "drbg_dev_api_key_change_me"

API_KEY_NAME = "X-API-Key"

# auto_error=False so a missing header and a wrong key get different messages
api_key_header_auth = APIKeyHeader(name=API_KEY_NAME, auto_error=False)


def expected_api_key() -> str:
    return os.environ.get(SERVER_API_KEY_ENV_VAR, DEFAULT_DEV_API_KEY)


async def get_api_key(api_key_header: Optional[str] = Security(api_key_header_auth)):
    """
    Dependency to validate the API key from the X-API-Key header.
    The comparison is constant time.
    """
    if api_key_header is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated: X-API-Key header missing.",
        )
    if not hmac.compare_digest(api_key_header.encode(), expected_api_key().encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API Key.",
        )
    return api_key_header


async def verify_api_key(api_key: str = Depends(get_api_key)):
    """Route-level dependency; get_api_key raises before this runs on bad keys."""
    return True
