"""
Forum Service - Forum catalog: create, list, fetch and rank.
"""

from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from forumhub.core.exceptions import ForumExistsError, ForumNotFoundError
from forumhub.models.forum import Discussion, Forum, Topic
from forumhub.models.user import User


class ForumService:
    """
    Service for creating and reading forums.

    Usage:
        forums = ForumService(db_session)
        ranked = await forums.get_forums_by_engagement()
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize forum service with database session."""
        self.db = db

    async def get_forum_by_name(self, name: str) -> Forum | None:
        """Get forum by exact name, without relations."""
        query = select(Forum).where(Forum.name == name)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def create_forum(
        self,
        owner: User,
        name: str,
        photo: str | None = None,
        description: str | None = None,
    ) -> Forum:
        """
        Create new forum owned by ``owner``.

        The owner becomes the first follower, so the forum also shows up
        in the owner's followed forums.

        Args:
            owner: Creating user
            name: Unique forum name (case-sensitive)
            photo: Cover image URL
            description: Short description

        Returns:
            Created forum with relations loaded

        Raises:
            ForumExistsError: Name already taken
        """
        if await self.get_forum_by_name(name):
            raise ForumExistsError(name)

        forum = Forum(
            name=name,
            photo=photo,
            description=description,
            owner=owner,
            enrolled=[owner],
            discussions=[],
            topics=[],
        )
        self.db.add(forum)

        try:
            await self.db.flush()
        except IntegrityError as e:
            # Lost a race against another create with the same name
            await self.db.rollback()
            raise ForumExistsError(name) from e

        logger.info(f"Forum '{forum.name}' created by user {owner.id}")
        return forum

    async def get_forums(self) -> list[Forum]:
        """Get all forums with owner and follower ids."""
        query = (
            select(Forum)
            .options(
                selectinload(Forum.owner),
                selectinload(Forum.enrolled),
                selectinload(Forum.discussions),
                selectinload(Forum.topics),
            )
            .order_by(Forum.id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_forum(
        self,
        name: str | None = None,
        forum_id: Any = None,
    ) -> Forum:
        """
        Get one forum with owner, followers, discussions and topics.

        Looks up by ``name`` when given, otherwise by ``forum_id``.

        Raises:
            ForumNotFoundError: No match
        """
        query = select(Forum).options(
            selectinload(Forum.owner),
            selectinload(Forum.enrolled),
            selectinload(Forum.discussions),
            selectinload(Forum.topics),
        ).execution_options(populate_existing=True)

        if name:
            query = query.where(Forum.name == name)
        elif str(forum_id).isdigit():
            query = query.where(Forum.id == int(forum_id))
        else:
            raise ForumNotFoundError("Forum with the name does not exist")

        result = await self.db.execute(query)
        forum = result.scalar_one_or_none()

        if not forum:
            raise ForumNotFoundError("Forum with the name does not exist")
        return forum

    async def get_forums_by_engagement(self) -> list[Forum]:
        """
        Get all forums ordered by discussion count, most active first.

        Ties are broken by forum id so the order is stable.
        """
        query = select(Forum).options(
            selectinload(Forum.discussions).selectinload(Discussion.replies),
            selectinload(Forum.topics).selectinload(Topic.answers),
            selectinload(Forum.topics).selectinload(Topic.replies),
            selectinload(Forum.owner),
            selectinload(Forum.enrolled),
        ).execution_options(populate_existing=True)
        result = await self.db.execute(query)
        forums = list(result.scalars().all())

        forums.sort(key=lambda f: (-len(f.discussions), f.id))
        return forums
