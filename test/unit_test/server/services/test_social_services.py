import uuid

import pytest
import pytest_asyncio

from ytgify_share.core.cache import TTLCache
from ytgify_share.core.database.entities.gifs import Gif
from ytgify_share.core.database.entities.notifications import NotificationAction
from ytgify_share.core.database.entities.users import User
from ytgify_share.core.errors import ValidationFailedError
from ytgify_share.core.models.io.collections import CollectionCreate
from ytgify_share.server.services.collections import CollectionService
from ytgify_share.server.services.follows import FollowService
from ytgify_share.server.services.hashtags import HashtagService
from ytgify_share.server.services.notifications import NotificationService
from ytgify_share.server.services.pagination import PageParams

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def users(session):
    alice = User(email="alice@example.com", username="alice", password_hash="x")
    bob = User(email="bob@example.com", username="bob", password_hash="x")
    session.add_all([alice, bob])
    await session.commit()
    return alice, bob


async def _gif(session, owner: User, **fields) -> Gif:
    gif = Gif(user_id=owner.id, **fields)
    session.add(gif)
    await session.commit()
    return gif


class TestNotificationService:
    async def test_no_notification_for_own_actions(self, session, users):
        alice, _ = users
        result = await NotificationService(session).notify(alice.id, alice, NotificationAction.LIKE, "Like", uuid.uuid4())
        assert result is None

    async def test_inbox_and_unread_count(self, session, users):
        alice, bob = users
        service = NotificationService(session)
        await service.notify(alice.id, bob, NotificationAction.FOLLOW, "Follow", uuid.uuid4())
        await service.notify(alice.id, bob, NotificationAction.LIKE, "Like", uuid.uuid4())
        await session.commit()

        rows, total = await service.inbox(alice, PageParams.build(1, 1))
        assert len(rows) == 1
        assert total == 2
        assert await service.unread_count(alice) == 2
        assert await service.mark_all_as_read(alice) == 0


class TestFollowService:
    async def test_toggle_updates_counters(self, session, users):
        alice, bob = users
        service = FollowService(session)

        assert await service.toggle(alice, bob) is True
        assert (alice.following_count, bob.follower_count) == (1, 1)
        assert await service.is_following(alice, bob)

        assert await service.toggle(alice, bob) is False
        assert (alice.following_count, bob.follower_count) == (0, 0)

    async def test_cannot_follow_self(self, session, users):
        alice, _ = users
        with pytest.raises(ValidationFailedError):
            await FollowService(session).toggle(alice, alice)


class TestHashtagService:
    async def test_set_gif_hashtags_tracks_usage(self, session, users):
        alice, _ = users
        gif = await _gif(session, alice)
        cache = TTLCache()
        service = HashtagService(session, cache)

        assert await service.set_gif_hashtags(gif, ["#Cats", "dogs", "cats", "!!!"]) == ["cats", "dogs"]
        await session.commit()
        assert (await service.get_by_slug("cats")).usage_count == 1

        assert await service.set_gif_hashtags(gif, ["dogs", "birds"]) == ["birds", "dogs"]
        await session.commit()
        assert (await service.get_by_slug("cats")).usage_count == 0
        assert (await service.get_by_slug("dogs")).usage_count == 1
        assert (await service.get_by_slug("birds")).usage_count == 1

    async def test_popular_is_cached(self, session, users):
        alice, _ = users
        gif = await _gif(session, alice)
        cache = TTLCache()
        service = HashtagService(session, cache)
        await service.set_gif_hashtags(gif, ["cats"])
        await session.commit()

        first = await service.popular(10)
        await service.set_gif_hashtags(gif, ["cats", "dogs"])
        await session.commit()
        # linking invalidates the cached listings
        second = await service.popular(10)
        assert [h.name for h in first] == ["cats"]
        assert [h.name for h in second] == ["cats", "dogs"]


class TestCollectionService:
    async def test_reorder_ignores_unknown_gifs(self, session, users):
        alice, _ = users
        first = await _gif(session, alice, title="first")
        second = await _gif(session, alice, title="second")
        service = CollectionService(session)
        collection = await service.create(alice, CollectionCreate(name="Mix"))
        await service.add_gif(collection.id, alice, first.id)
        await service.add_gif(collection.id, alice, second.id)

        await service.reorder(collection.id, alice, [uuid.uuid4(), second.id, first.id])
        gifs, total = await service.gifs_of(collection, alice, PageParams.build())
        assert [g.title for g in gifs] == ["second", "first"]
        assert total == 2

    async def test_private_gifs_hidden_from_other_viewers(self, session, users):
        alice, bob = users
        private = await _gif(session, alice, privacy="private")
        service = CollectionService(session)
        collection = await service.create(alice, CollectionCreate(name="Mine", is_public=True))
        await service.add_gif(collection.id, alice, private.id)

        visible, total = await service.gifs_of(collection, bob, PageParams.build())
        assert visible == []
        assert total == 0

    async def test_pages_are_full_when_private_gifs_are_hidden(self, session, users):
        alice, bob = users
        service = CollectionService(session)
        collection = await service.create(alice, CollectionCreate(name="Mixed", is_public=True))
        for title, privacy in [("hidden", "private"), ("a", "public"), ("b", "unlisted"), ("c", "public")]:
            gif = await _gif(session, alice, title=title, privacy=privacy)
            await service.add_gif(collection.id, alice, gif.id)

        page, total = await service.gifs_of(collection, bob, PageParams.build(1, 2))
        assert [g.title for g in page] == ["a", "b"]
        assert total == 3

        anonymous, _ = await service.gifs_of(collection, None, PageParams.build(2, 2))
        assert [g.title for g in anonymous] == ["c"]

        own, own_total = await service.gifs_of(collection, alice, PageParams.build(1, 2))
        assert [g.title for g in own] == ["hidden", "a"]
        assert own_total == 4
