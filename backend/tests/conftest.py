import os

# Must be set before forumhub settings are first imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./forumhub-test.db")
os.environ.setdefault("JWT_SECRET_KEY", "forumhub-test-secret-0123456789abcdef")

from collections.abc import AsyncGenerator, Awaitable, Callable
from itertools import count

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from forumhub.core.database import Base, get_db
from forumhub.core.security import create_access_token
from forumhub.main import app
from forumhub.models.forum import (
    Discussion,
    DiscussionReply,
    Forum,
    Topic,
    TopicAnswer,
)
from forumhub.models.user import User

_emails = count(1)


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'forumhub.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db) -> Callable[..., Awaitable[User]]:
    """Persist a user in the test session."""

    async def _make_user(first_name: str = "Ada", **kwargs) -> User:
        user = User(
            email=kwargs.pop("email", f"user{next(_emails)}@example.com"),
            first_name=first_name,
            last_name=kwargs.pop("last_name", "Lovelace"),
            occupation=kwargs.pop("occupation", "Engineer"),
            **kwargs,
        )
        db.add(user)
        await db.flush()
        return user

    return _make_user


@pytest.fixture
def add_discussions(db) -> Callable[..., Awaitable[list[Discussion]]]:
    """Attach ``n`` discussions (each with one reply) to a forum."""

    async def _add(forum: Forum, author: User, n: int) -> list[Discussion]:
        discussions = []
        for i in range(n):
            discussion = Discussion(
                forum_id=forum.id,
                author_id=author.id,
                title=f"{forum.name} discussion {i}",
                content="...",
            )
            db.add(discussion)
            await db.flush()
            db.add(
                DiscussionReply(
                    discussion_id=discussion.id,
                    author_id=author.id,
                    content="Agreed",
                )
            )
            discussions.append(discussion)
        await db.flush()
        return discussions

    return _add


@pytest.fixture
def add_topic(db) -> Callable[..., Awaitable[Topic]]:
    async def _add(forum: Forum, author: User, title: str = "How to start?") -> Topic:
        topic = Topic(forum_id=forum.id, author_id=author.id, title=title)
        db.add(topic)
        await db.flush()
        db.add(TopicAnswer(topic_id=topic.id, author_id=author.id, content="Like this"))
        await db.flush()
        return topic

    return _add


@pytest.fixture
def auth() -> Callable[[User], dict[str, str]]:
    """Bearer header for a user."""

    def _auth(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _auth
