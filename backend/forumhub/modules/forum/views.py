"""
Forum read models.

One projection per response shape. Each returns a fresh dict built from
the loaded entities plus the viewer-relative ``isFollowing`` flag; the
entities themselves are never modified.
"""

from datetime import datetime
from typing import Any

from forumhub.models.forum import (
    Discussion,
    DiscussionReply,
    Forum,
    Topic,
    TopicAnswer,
    TopicReply,
)
from forumhub.models.user import User
from forumhub.modules.forum.membership import is_following


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def user_profile(user: User | None) -> dict[str, Any] | None:
    """Public profile fields of a user."""
    if user is None:
        return None
    return {
        "id": user.id,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "middleName": user.middle_name,
        "photo": user.photo,
        "occupation": user.occupation,
    }


def _post(post: DiscussionReply | TopicAnswer | TopicReply) -> dict[str, Any]:
    return {
        "id": post.id,
        "author": post.author_id,
        "content": post.content,
        "createdAt": _iso(post.created_at),
    }


def discussion_view(
    discussion: Discussion,
    with_replies: bool = False,
) -> dict[str, Any]:
    """Discussion fields, optionally with its replies."""
    data: dict[str, Any] = {
        "id": discussion.id,
        "forum": discussion.forum_id,
        "author": discussion.author_id,
        "title": discussion.title,
        "content": discussion.content,
        "createdAt": _iso(discussion.created_at),
    }
    if with_replies:
        data["replies"] = [_post(r) for r in discussion.replies]
    return data


def topic_view(topic: Topic, with_posts: bool = False) -> dict[str, Any]:
    """Topic fields, optionally with answers and replies."""
    data: dict[str, Any] = {
        "id": topic.id,
        "forum": topic.forum_id,
        "author": topic.author_id,
        "title": topic.title,
        "content": topic.content,
        "createdAt": _iso(topic.created_at),
    }
    if with_posts:
        data["answers"] = [_post(a) for a in topic.answers]
        data["replies"] = [_post(r) for r in topic.replies]
    return data


def _forum_base(forum: Forum) -> dict[str, Any]:
    return {
        "id": forum.id,
        "name": forum.name,
        "photo": forum.photo,
        "description": forum.description,
        "createdAt": _iso(forum.created_at),
    }


def forum_summary(forum: Forum, viewer_id: Any | None = None) -> dict[str, Any]:
    """
    Listing shape: owner profile, relations as id lists.

    Used by the forum list, the followed-forums list and the create
    response.
    """
    data = _forum_base(forum)
    data.update(
        {
            "createdBy": user_profile(forum.owner),
            "enrolled": [u.id for u in forum.enrolled],
            "discussion": [d.id for d in forum.discussions],
            "topics": [t.id for t in forum.topics],
            "isFollowing": is_following(forum, viewer_id),
        }
    )
    return data


def forum_detail(forum: Forum, viewer_id: Any | None = None) -> dict[str, Any]:
    """Single-forum shape: owner, followers, discussions and topics expanded."""
    data = _forum_base(forum)
    data.update(
        {
            "createdBy": user_profile(forum.owner),
            "enrolled": [u.id for u in forum.enrolled],
            "followers": [user_profile(u) for u in forum.enrolled],
            "discussion": [discussion_view(d) for d in forum.discussions],
            "topics": [topic_view(t) for t in forum.topics],
            "isFollowing": is_following(forum, viewer_id),
        }
    )
    return data


def forum_engagement(forum: Forum, viewer_id: Any | None = None) -> dict[str, Any]:
    """Ranking shape: detail plus nested replies, answers and counts."""
    data = forum_detail(forum, viewer_id)
    data.update(
        {
            "discussion": [
                discussion_view(d, with_replies=True) for d in forum.discussions
            ],
            "topics": [topic_view(t, with_posts=True) for t in forum.topics],
            "discussionCount": len(forum.discussions),
        }
    )
    return data
