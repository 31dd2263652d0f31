"""API Dependencies — caller identity and collaborator injection for routes.

Invariants:
    - Identity arrives explicitly in the X-User-Id header (set by the sign-in proxy)
    - Role is loaded from storage on every request; nothing is cached between requests
    - Missing/malformed/unknown identity → UnauthenticatedError (401)
    - The text generator is a FastAPI dependency so tests can override it

Design Decisions:
    - Principal is returned (not the ORM User): policies get identity + role and nothing else
"""

import logging
from functools import lru_cache
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from larder.config import get_settings
from larder.core.domain_types import Principal
from larder.core.errors import UnauthenticatedError
from larder.infrastructure.anthropic_client import ResilientAnthropicClient
from larder.infrastructure.database import get_db
from larder.services.insight_service import TextGenerator
from larder.services.user_service import UserService

logger = logging.getLogger(__name__)


async def get_current_principal(
    x_user_id: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """Resolve the calling user and their stored role."""
    if not x_user_id:
        raise UnauthenticatedError()
    try:
        user_id = UUID(x_user_id.strip())
    except ValueError:
        raise UnauthenticatedError("Malformed user identity")
    user = await UserService(db).get(user_id)
    if not user:
        logger.warning(f"Unknown user identity {user_id}")
        raise UnauthenticatedError("Unknown user identity")
    return user.to_principal()


@lru_cache
def _anthropic_client() -> ResilientAnthropicClient:
    settings = get_settings()
    return ResilientAnthropicClient(
        api_key=settings.anthropic_api_key,
        model=settings.text_generation_model,
        max_tokens=settings.text_generation_max_tokens,
        max_retries=settings.anthropic_max_retries,
        base_delay_ms=settings.anthropic_base_delay_ms,
        max_delay_ms=settings.anthropic_max_delay_ms,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )


def get_text_generator() -> TextGenerator:
    return _anthropic_client()
