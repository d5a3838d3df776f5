"""
User model.

Accounts are managed by the authentication service; this backend only
reads profile fields and the set of followed forums.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forumhub.core.database import Base

if TYPE_CHECKING:
    from forumhub.models.forum import Forum


class User(Base):
    """User account model."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    # Profile
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    middle_name: Mapped[str | None] = mapped_column(String(100))
    photo: Mapped[str | None] = mapped_column(String(500))
    occupation: Mapped[str | None] = mapped_column(String(150))

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Forums this user follows (same rows as Forum.enrolled)
    forums: Mapped[list["Forum"]] = relationship(
        secondary="forum_memberships",
        back_populates="enrolled",
        order_by="Forum.id",
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
