import pytest
import pytest_asyncio

from ytgify_share.core.cache import TRENDING_GIFS_KEY, TTLCache
from ytgify_share.core.database.entities.gifs import Gif
from ytgify_share.core.database.entities.users import User
from ytgify_share.core.errors import NotFoundError, PermissionDeniedError
from ytgify_share.core.models.io.gifs import GifUpdate
from ytgify_share.server.services.gifs import GifService, RequestInfo, normalize_remix_overlay


class TestNormalizeRemixOverlay:
    def test_empty(self):
        assert normalize_remix_overlay(None) == {}
        assert normalize_remix_overlay({}) == {}

    def test_defaults(self):
        overlay = normalize_remix_overlay({"text": "Hi"})
        assert overlay == {
            "text": "Hi",
            "font_family": "Arial",
            "font_size": 48,
            "font_weight": "bold",
            "color": "#ffffff",
            "outline_color": "#000000",
            "outline_width": 2,
            "position": {"x": 0.5, "y": 0.9},
        }

    def test_clamps_values(self):
        overlay = normalize_remix_overlay(
            {"text": "x", "font_size": 4, "outline_width": 99, "position": {"x": -1, "y": "0.25"}}
        )
        assert overlay["font_size"] == 12
        assert overlay["outline_width"] == 10
        assert overlay["position"] == {"x": 0, "y": 0.25}

    def test_garbage_numbers_fall_back(self):
        overlay = normalize_remix_overlay({"font_size": "huge", "position": "center"})
        assert overlay["font_size"] == 48
        assert overlay["position"] == {"x": 0.5, "y": 0.9}


class TestVisibility:
    def _user(self, name: str) -> User:
        return User(email=f"{name}@example.com", username=name, password_hash="x")

    @pytest.mark.parametrize("privacy", ["public", "unlisted"])
    def test_shared_gifs_visible_to_anyone(self, privacy):
        owner = self._user("owner")
        gif = Gif(user_id=owner.id, privacy=privacy)
        assert GifService.can_view(gif, None)
        assert GifService.can_view(gif, self._user("other"))

    def test_private_gif_visible_to_owner_only(self):
        owner = self._user("owner")
        gif = Gif(user_id=owner.id, privacy="private")
        assert GifService.can_view(gif, owner)
        assert not GifService.can_view(gif, self._user("other"))
        assert not GifService.can_view(gif, None)


class TestGifServiceWithDatabase:
    @pytest_asyncio.fixture
    async def owner(self, session) -> User:
        user = User(email="svc@example.com", username="svc", password_hash="x")
        session.add(user)
        await session.commit()
        return user

    @pytest.mark.asyncio
    async def test_deleted_gif_is_not_found(self, session, storage, owner):
        gif = Gif(user_id=owner.id)
        session.add(gif)
        await session.commit()
        service = GifService(session, TTLCache(), storage)

        await service.soft_delete(gif.id, owner)
        with pytest.raises(NotFoundError):
            await service.get_visible(gif.id, owner)

    @pytest.mark.asyncio
    async def test_owner_check(self, session, storage, owner):
        gif = Gif(user_id=owner.id)
        session.add(gif)
        stranger = User(email="x@example.com", username="stranger", password_hash="x")
        session.add(stranger)
        await session.commit()

        with pytest.raises(PermissionDeniedError):
            await GifService(session, TTLCache(), storage).get_owned(gif.id, stranger)

    @pytest.mark.asyncio
    async def test_show_records_unique_views(self, session, storage, owner):
        gif = Gif(user_id=owner.id)
        session.add(gif)
        await session.commit()
        service = GifService(session, TTLCache(), storage)

        await service.show(gif.id, None, RequestInfo(ip_address="10.0.0.1"))
        await service.show(gif.id, None, RequestInfo(ip_address="10.0.0.1"))
        await service.show(gif.id, None, RequestInfo(ip_address="10.0.0.2"))
        shown = await service.show(gif.id, owner)
        assert shown.view_count == 2

    @pytest.mark.asyncio
    async def test_update_invalidates_feed_cache(self, session, storage, owner):
        gif = Gif(user_id=owner.id)
        session.add(gif)
        await session.commit()
        cache = TTLCache()
        await cache.set(f"{TRENDING_GIFS_KEY}/page_1/per_20", ["stale"])

        await GifService(session, cache, storage).update(gif.id, owner, GifUpdate(title="Fresh"))
        assert await cache.get(f"{TRENDING_GIFS_KEY}/page_1/per_20") is None
