"""
Authentication module for Vitals Service API.

Provides API key authentication for securing endpoints, and resolves the
owner an authenticated request acts for.

The API key identifies the calling client (the app backend). The owner is
passed by that client in the X-Owner-Id header, with optional X-Owner-Email
and X-Owner-Name headers used only for report headers.
"""
import logging
import secrets
from typing import Optional

from fastapi import Header, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from core.config import API_KEY
from core.exceptions import NotAuthenticatedError
from models.owner import Owner

logger = logging.getLogger(__name__)

# Header name for API key authentication
API_KEY_HEADER_NAME = "X-API-Key"

# Create the API key header security scheme
api_key_header = APIKeyHeader(
    name=API_KEY_HEADER_NAME,
    auto_error=False,  # We'll handle the error ourselves for better messages
    description="API key for authenticating requests. Include in the X-API-Key header.",
)


async def verify_api_key(
    api_key: Optional[str] = Security(api_key_header),
) -> str:
    """
    Verify the API key from the request header.

    This dependency should be used on all protected endpoints.
    Uses constant-time comparison to prevent timing attacks.

    Args:
        api_key: The API key from the X-API-Key header.

    Returns:
        str: The validated API key.

    Raises:
        HTTPException: 401 Unauthorized if key is missing.
        HTTPException: 403 Forbidden if key is invalid.
    """
    if api_key is None:
        logger.warning("API request without authentication header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key. Include it in the X-API-Key header.",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    # Use constant-time comparison to prevent timing attacks
    if not secrets.compare_digest(api_key, API_KEY):
        logger.warning("API request with invalid API key")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key",
        )

    return api_key


async def get_current_owner(
    x_owner_id: Optional[str] = Header(None, description="Identifier of the owner the request acts for"),
    x_owner_email: Optional[str] = Header(None, description="Owner email, shown on reports"),
    x_owner_name: Optional[str] = Header(None, description="Owner display name, shown on reports"),
) -> Owner:
    """
    Resolve the owner of the current request.

    Raises:
        NotAuthenticatedError: If no owner id header is present.
    """
    if not x_owner_id or not x_owner_id.strip():
        logger.warning("API request without owner context")
        raise NotAuthenticatedError()

    return Owner(
        owner_id=x_owner_id.strip(),
        email=x_owner_email,
        display_name=x_owner_name,
    )
