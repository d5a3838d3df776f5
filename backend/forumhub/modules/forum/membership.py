"""
Forum Membership - follow / unfollow and viewer-relative flags.
"""

from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from forumhub.core.exceptions import (
    AlreadyMemberError,
    ForumNotFoundError,
    NotMemberError,
    UserNotFoundError,
)
from forumhub.models.forum import Forum, ForumMembership
from forumhub.models.user import User


def same_id(a: Any, b: Any) -> bool:
    """Compare identifiers by their canonical string form."""
    return str(a) == str(b)


def is_following(forum: Any, viewer_id: Any | None) -> bool:
    """
    Whether the viewer is among the forum's followers.

    Works on anything exposing ``enrolled`` as a list of users (or of raw
    ids). Anonymous viewers never follow.
    """
    if viewer_id is None:
        return False
    return any(
        same_id(getattr(member, "id", member), viewer_id)
        for member in forum.enrolled
    )


class MembershipService:
    """
    Maintains the follow relation between users and forums.

    Usage:
        members = MembershipService(db_session)
        message = await members.follow("Chess Club", user_id)
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize membership service with database session."""
        self.db = db

    async def _get_forum(self, name: str) -> Forum:
        query = (
            select(Forum)
            .options(selectinload(Forum.enrolled))
            .where(Forum.name == name)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        forum = result.scalar_one_or_none()
        if not forum:
            raise ForumNotFoundError()
        return forum

    async def _get_user(self, user_id: Any) -> User:
        user = await self.db.get(User, int(user_id))
        if not user:
            raise UserNotFoundError(user_id)
        return user

    async def follow(self, forum_name: str, user_id: Any) -> str:
        """
        Add user to forum followers.

        Args:
            forum_name: Exact forum name
            user_id: Viewer user ID

        Returns:
            Confirmation message

        Raises:
            ForumNotFoundError: No forum with that name
            AlreadyMemberError: User already follows the forum
        """
        forum = await self._get_forum(forum_name)
        if is_following(forum, user_id):
            raise AlreadyMemberError()

        user = await self._get_user(user_id)
        forum.enrolled.append(user)

        try:
            await self.db.flush()
        except IntegrityError as e:
            # Concurrent follow inserted the same edge first
            await self.db.rollback()
            raise AlreadyMemberError() from e

        logger.info(f"User {user_id} now follows forum '{forum.name}'")
        return f"Now following {forum.name}"

    async def unfollow(self, forum_name: str, user_id: Any) -> None:
        """
        Remove user from forum followers.

        Raises:
            ForumNotFoundError: No forum with that name
            NotMemberError: User does not follow the forum
        """
        forum = await self._get_forum(forum_name)
        member = next(
            (u for u in forum.enrolled if same_id(u.id, user_id)),
            None,
        )
        if member is None:
            raise NotMemberError()

        forum.enrolled.remove(member)
        await self.db.flush()

        logger.info(f"User {user_id} unfollowed forum '{forum.name}'")

    async def get_followed_forums(self, user_id: Any) -> list[Forum]:
        """Forums the user follows, oldest membership first."""
        query = (
            select(Forum)
            .join(ForumMembership, ForumMembership.forum_id == Forum.id)
            .options(
                selectinload(Forum.owner),
                selectinload(Forum.enrolled),
                selectinload(Forum.discussions),
                selectinload(Forum.topics),
            )
            .where(ForumMembership.user_id == int(user_id))
            .order_by(ForumMembership.joined_at, Forum.id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
