"""
FastAPI dependency injection functions.

Provides Redis connections, organization context and pagination parameters.
"""

from __future__ import annotations

from dataclasses import dataclass

import redis.asyncio as aioredis
from fastapi import Depends, Header, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.config import settings
from worksite.core.database import get_db
from worksite.core.errors import ForbiddenError, NotFoundError
from worksite.models.member import OrganizationMember
from worksite.models.organization import Organization

# ---------------------------------------------------------------------------
# Redis
# ---------------------------------------------------------------------------

_redis_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """
    Return a shared async Redis client.

    Uses a module-level pool so connections are reused across requests.
    """
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            str(settings.REDIS_URL),
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis_pool


async def close_redis() -> None:
    global _redis_pool
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None


# ---------------------------------------------------------------------------
# Organization context
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OrgContext:
    organization_id: str
    user_id: str
    membership_id: str
    role_id: str


async def get_org_context(
    x_organization_id: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> OrgContext:
    """
    Resolve the organization from request headers and verify membership.

    Raises 403 if either header is missing, 404 if the organization does not
    exist, 403 if the user is not a member.
    """
    if not x_organization_id or not x_user_id:
        raise ForbiddenError(
            "Organization context is required",
            code="MISSING_ORG_CONTEXT",
        )

    organization = await db.get(Organization, x_organization_id)
    if organization is None:
        raise NotFoundError("Organization not found", code="ORG_NOT_FOUND")

    result = await db.execute(
        select(OrganizationMember).where(
            OrganizationMember.organization_id == x_organization_id,
            OrganizationMember.user_id == x_user_id,
        )
    )
    member = result.scalar_one_or_none()
    if member is None:
        raise ForbiddenError(
            "You are not a member of this organization",
            code="NOT_A_MEMBER",
        )

    return OrgContext(
        organization_id=organization.id,
        user_id=x_user_id,
        membership_id=member.id,
        role_id=member.role_id,
    )


async def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Caller identity for routes that are not organization-scoped."""
    if not x_user_id:
        raise ForbiddenError("User context is required", code="MISSING_USER_CONTEXT")
    return x_user_id


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def get_page_params(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> PageParams:
    return PageParams(page=page, limit=limit)
