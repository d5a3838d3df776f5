"""
Forum models for community discussions.

Includes:
- Forums and their membership edges
- Discussions with replies
- Topics with answers and replies

Discussions and topics are written by the posting service; this backend
only reads them.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forumhub.core.database import Base
from forumhub.models.user import User


class ForumMembership(Base):
    """
    Follow edge between a user and a forum.

    The composite primary key is the single source of truth for both
    Forum.enrolled and User.forums.
    """

    __tablename__ = "forum_memberships"

    forum_id: Mapped[int] = mapped_column(
        ForeignKey("forums.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    joined_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class Forum(Base):
    """Named community with an owner and followers."""

    __tablename__ = "forums"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), unique=True, index=True)
    photo: Mapped[str | None] = mapped_column(String(500))
    description: Mapped[str | None] = mapped_column(Text)
    created_by_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    owner: Mapped["User"] = relationship(foreign_keys=[created_by_id])
    enrolled: Mapped[list["User"]] = relationship(
        secondary="forum_memberships",
        back_populates="forums",
        order_by="User.id",
    )
    discussions: Mapped[list["Discussion"]] = relationship(
        back_populates="forum", order_by="Discussion.id"
    )
    topics: Mapped[list["Topic"]] = relationship(
        back_populates="forum", order_by="Topic.id"
    )

    def __repr__(self) -> str:
        return f"<Forum {self.name}>"


class Discussion(Base):
    """Discussion thread inside a forum."""

    __tablename__ = "forum_discussions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    forum_id: Mapped[int] = mapped_column(ForeignKey("forums.id"), index=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    title: Mapped[str] = mapped_column(String(255))
    content: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    forum: Mapped["Forum"] = relationship(back_populates="discussions")
    replies: Mapped[list["DiscussionReply"]] = relationship(
        back_populates="discussion", order_by="DiscussionReply.id"
    )

    def __repr__(self) -> str:
        return f"<Discussion {self.title[:30]}>"


class DiscussionReply(Base):
    """Reply to a discussion."""

    __tablename__ = "forum_discussion_replies"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    discussion_id: Mapped[int] = mapped_column(
        ForeignKey("forum_discussions.id"), index=True
    )
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    content: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    discussion: Mapped["Discussion"] = relationship(back_populates="replies")


class Topic(Base):
    """Question-style topic inside a forum."""

    __tablename__ = "forum_topics"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    forum_id: Mapped[int] = mapped_column(ForeignKey("forums.id"), index=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    title: Mapped[str] = mapped_column(String(255))
    content: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    forum: Mapped["Forum"] = relationship(back_populates="topics")
    answers: Mapped[list["TopicAnswer"]] = relationship(
        back_populates="topic", order_by="TopicAnswer.id"
    )
    replies: Mapped[list["TopicReply"]] = relationship(
        back_populates="topic", order_by="TopicReply.id"
    )

    def __repr__(self) -> str:
        return f"<Topic {self.title[:30]}>"


class TopicAnswer(Base):
    """Answer posted to a topic."""

    __tablename__ = "forum_topic_answers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(ForeignKey("forum_topics.id"), index=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    content: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    topic: Mapped["Topic"] = relationship(back_populates="answers")


class TopicReply(Base):
    """Comment on a topic."""

    __tablename__ = "forum_topic_replies"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(ForeignKey("forum_topics.id"), index=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    content: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    topic: Mapped["Topic"] = relationship(back_populates="replies")
