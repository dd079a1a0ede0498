import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from app.core.config import get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)

OPEN_ENVIRONMENTS = ("local", "test")


async def verify_internal_api_key(
    internal_api_key: Optional[str] = Header(
        default=None,
        alias="X-Internal-Api-Key",
        description="Shared key sent by the live-update feed and other internal callers.",
    ),
) -> None:
    """
    Guard for /internal endpoints (live-update pushes, maintenance calls).

    Rules
    -----
    - No key configured:
        - local/test -> open
        - any other environment -> 500, the deployment is misconfigured
    - Key configured (any environment):
        - header must be present and equal to INTERNAL_API_KEY, otherwise 401
    """
    settings = get_settings()
    env = (settings.APP_ENV or "local").lower()
    expected = getattr(settings, "INTERNAL_API_KEY", None)

    if not expected:
        if env in OPEN_ENVIRONMENTS:
            return
        logger.error("internal_api_key_missing", environment=env)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="INTERNAL_API_KEY not configured for this environment.",
        )

    if not internal_api_key or not secrets.compare_digest(internal_api_key, expected):
        logger.warning("internal_api_key_rejected", environment=env)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing internal API key.",
        )
