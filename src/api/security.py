"""Shared-secret authentication for the trigger endpoints."""

import logging
import os
import secrets

from fastapi import HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_cron_secret() -> str:
    """Retrieve the shared trigger secret from environment.

    :returns: The configured secret.
    :raises ValueError: If CRON_SECRET is not set.
    """
    secret = os.environ.get("CRON_SECRET")
    if not secret:
        raise ValueError("Trigger secret not configured. Set CRON_SECRET environment variable.")
    return secret


def verify_token(
    credentials: HTTPAuthorizationCredentials = Security(security),
) -> str:
    """Verify the Bearer token from request headers.

    :param credentials: The HTTP Authorisation credentials.
    :returns: The validated token.
    :raises HTTPException: If token is invalid or missing.
    """
    try:
        expected_token = get_cron_secret()
    except ValueError as e:
        logger.error(f"Trigger secret configuration error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Trigger authentication not configured",
        ) from e

    if not secrets.compare_digest(credentials.credentials, expected_token):
        logger.warning("Invalid trigger token provided")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return credentials.credentials
