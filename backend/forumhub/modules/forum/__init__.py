"""
Forum Module - Community forums.

Features:
- Forum catalog (create, list, fetch)
- Follow / unfollow membership
- Engagement ranking
"""

from forumhub.modules.forum.membership import MembershipService, is_following
from forumhub.modules.forum.service import ForumService

__all__ = [
    "ForumService",
    "MembershipService",
    "is_following",
]
