"""
Tests for the forum catalog: create, list, fetch and rank.
"""

import pytest

from forumhub.core.exceptions import ForumExistsError, ForumNotFoundError
from forumhub.modules.forum import ForumService, MembershipService, is_following


class TestCreateForum:
    async def test_create_forum(self, db, make_user):
        owner = await make_user()
        forum = await ForumService(db).create_forum(
            owner=owner,
            name="Chess Club",
            photo="https://cdn.example.com/chess.png",
            description="Openings, endgames and everything between",
        )

        assert forum.id is not None
        assert forum.name == "Chess Club"
        assert forum.owner is owner
        assert forum.discussions == []
        assert forum.topics == []

    async def test_owner_is_first_follower(self, db, make_user):
        owner = await make_user()
        forum = await ForumService(db).create_forum(owner=owner, name="Chess Club")

        assert [u.id for u in forum.enrolled] == [owner.id]
        assert is_following(forum, owner.id)

        followed = await MembershipService(db).get_followed_forums(owner.id)
        assert [f.id for f in followed] == [forum.id]

    async def test_duplicate_name_conflicts(self, db, make_user):
        owner = await make_user()
        other = await make_user()
        forums = ForumService(db)
        original = await forums.create_forum(
            owner=owner, name="Chess Club", description="original"
        )

        with pytest.raises(ForumExistsError) as exc:
            await forums.create_forum(owner=other, name="Chess Club", description="copy")
        assert exc.value.status_code == 409

        all_forums = await forums.get_forums()
        assert len(all_forums) == 1
        assert all_forums[0].id == original.id
        assert all_forums[0].description == "original"
        assert all_forums[0].owner.id == owner.id

    async def test_names_differing_in_case_are_distinct(self, db, make_user):
        owner = await make_user()
        forums = ForumService(db)
        await forums.create_forum(owner=owner, name="Chess Club")
        await forums.create_forum(owner=owner, name="chess club")

        assert len(await forums.get_forums()) == 2

    async def test_unique_constraint_reported_as_conflict(
        self, db, make_user, monkeypatch
    ):
        owner = await make_user()
        forums = ForumService(db)
        await forums.create_forum(owner=owner, name="Chess Club")
        await db.commit()

        # Simulate a concurrent writer slipping past the pre-check
        async def no_match(name):
            return None

        monkeypatch.setattr(forums, "get_forum_by_name", no_match)

        with pytest.raises(ForumExistsError):
            await forums.create_forum(owner=owner, name="Chess Club")

        monkeypatch.undo()
        assert len(await forums.get_forums()) == 1


class TestGetForums:
    async def test_get_forums_returns_all(self, db, make_user):
        owner = await make_user()
        forums = ForumService(db)
        for name in ("Alpha", "Beta", "Gamma"):
            await forums.create_forum(owner=owner, name=name)

        result = await forums.get_forums()
        assert [f.name for f in result] == ["Alpha", "Beta", "Gamma"]

    async def test_get_forums_empty(self, db):
        assert await ForumService(db).get_forums() == []


class TestGetForum:
    async def test_by_name(self, db, make_user, add_discussions, add_topic):
        owner = await make_user()
        forums = ForumService(db)
        created = await forums.create_forum(owner=owner, name="Chess Club")
        await add_discussions(created, owner, 2)
        await add_topic(created, owner)

        forum = await forums.get_forum(name="Chess Club")
        assert forum.id == created.id
        assert len(forum.discussions) == 2
        assert len(forum.topics) == 1

    async def test_by_id(self, db, make_user):
        owner = await make_user()
        forums = ForumService(db)
        created = await forums.create_forum(owner=owner, name="Chess Club")

        forum = await forums.get_forum(forum_id=created.id)
        assert forum.name == "Chess Club"

    async def test_name_takes_precedence_over_id(self, db, make_user):
        owner = await make_user()
        forums = ForumService(db)
        first = await forums.create_forum(owner=owner, name="First")
        second = await forums.create_forum(owner=owner, name="Second")

        forum = await forums.get_forum(name="Second", forum_id=first.id)
        assert forum.id == second.id

    async def test_missing_forum(self, db):
        forums = ForumService(db)
        with pytest.raises(ForumNotFoundError):
            await forums.get_forum(name="Nope")
        with pytest.raises(ForumNotFoundError):
            await forums.get_forum(forum_id=999)
        with pytest.raises(ForumNotFoundError):
            await forums.get_forum()

    async def test_non_numeric_id_is_not_found(self, db, make_user):
        owner = await make_user()
        forums = ForumService(db)
        await forums.create_forum(owner=owner, name="Chess Club")

        for bad_id in ("abc", "1a", "-1", ""):
            with pytest.raises(ForumNotFoundError):
                await forums.get_forum(forum_id=bad_id)


class TestEngagementRanking:
    async def test_ordered_by_discussion_count(self, db, make_user, add_discussions):
        owner = await make_user()
        forums = ForumService(db)
        three = await forums.create_forum(owner=owner, name="Three")
        one = await forums.create_forum(owner=owner, name="One")
        two = await forums.create_forum(owner=owner, name="Two")
        await add_discussions(three, owner, 3)
        await add_discussions(one, owner, 1)
        await add_discussions(two, owner, 2)

        ranked = await forums.get_forums_by_engagement()

        assert [f.name for f in ranked] == ["Three", "Two", "One"]
        assert [len(f.discussions) for f in ranked] == [3, 2, 1]

    async def test_ties_broken_by_id(self, db, make_user, add_discussions):
        owner = await make_user()
        forums = ForumService(db)
        quiet_b = await forums.create_forum(owner=owner, name="Quiet B")
        busy = await forums.create_forum(owner=owner, name="Busy")
        quiet_a = await forums.create_forum(owner=owner, name="Quiet A")
        await add_discussions(busy, owner, 1)

        ranked = await forums.get_forums_by_engagement()

        assert [f.id for f in ranked] == [busy.id, quiet_b.id, quiet_a.id]

    async def test_nested_posts_loaded(self, db, make_user, add_discussions, add_topic):
        owner = await make_user()
        forums = ForumService(db)
        forum = await forums.create_forum(owner=owner, name="Chess Club")
        await add_discussions(forum, owner, 1)
        await add_topic(forum, owner)

        [ranked] = await forums.get_forums_by_engagement()

        assert len(ranked.discussions[0].replies) == 1
        assert len(ranked.topics[0].answers) == 1
        assert ranked.topics[0].replies == []
