"""
Forum API Endpoints.

Forum catalog, follow / unfollow and engagement ranking.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from forumhub.api.deps import CurrentUser, OptionalUser
from forumhub.core.database import get_db
from forumhub.modules.forum import ForumService, MembershipService
from forumhub.modules.forum.views import (
    forum_detail,
    forum_engagement,
    forum_summary,
)

router = APIRouter()


def _viewer_id(user: Any) -> int | None:
    return user.id if user else None


# ==================== Schemas ====================


class CreateForumRequest(BaseModel):
    """Create new forum."""

    name: str = Field(..., min_length=1, max_length=150)
    photo: str | None = None
    description: str | None = None


class FollowForumRequest(BaseModel):
    """Follow a forum by name."""

    forum_name: str = Field(..., min_length=1)


class UnfollowForumRequest(BaseModel):
    """Unfollow a forum by name."""

    name: str = Field(..., min_length=1)


# ==================== Catalog ====================


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_forum(
    request: CreateForumRequest,
    user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Create new forum owned by the current user."""
    forums = ForumService(db)
    forum = await forums.create_forum(
        owner=user,
        name=request.name,
        photo=request.photo,
        description=request.description,
    )

    return {
        "success": True,
        "forum": forum_summary(forum, user.id),
    }


@router.get("")
async def get_forums(
    user: OptionalUser,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get all forums."""
    forums = await ForumService(db).get_forums()
    viewer_id = _viewer_id(user)

    return {
        "success": True,
        "range": len(forums),
        "forums": [forum_summary(f, viewer_id) for f in forums],
    }


@router.get("/popular")
async def get_forums_by_engagement(
    user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get forums ordered by number of discussions."""
    forums = await ForumService(db).get_forums_by_engagement()

    return {
        "success": True,
        "forums": [forum_engagement(f, user.id) for f in forums],
    }


@router.get("/following")
async def get_followed_forums(
    user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get forums the current user follows."""
    forums = await MembershipService(db).get_followed_forums(user.id)

    return {
        "success": True,
        "range": len(forums),
        "forums": [forum_summary(f, user.id) for f in forums],
    }


@router.get("/lookup")
async def get_forum_by_name(
    user: OptionalUser,
    name: str = Query(..., min_length=1, description="Exact forum name"),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get forum details by name."""
    forum = await ForumService(db).get_forum(name=name)

    return {
        "success": True,
        "forum": forum_detail(forum, _viewer_id(user)),
    }


@router.get("/{forum_id}")
async def get_forum(
    forum_id: str,
    user: OptionalUser,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get forum details by ID."""
    forum = await ForumService(db).get_forum(forum_id=forum_id)

    return {
        "success": True,
        "forum": forum_detail(forum, _viewer_id(user)),
    }


# ==================== Membership ====================


@router.post("/follow")
async def follow_forum(
    request: FollowForumRequest,
    user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Follow a forum."""
    message = await MembershipService(db).follow(request.forum_name, user.id)

    return {
        "success": True,
        "message": message,
    }


@router.post("/unfollow", status_code=status.HTTP_204_NO_CONTENT)
async def unfollow_forum(
    request: UnfollowForumRequest,
    user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Unfollow a forum."""
    await MembershipService(db).unfollow(request.name, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
