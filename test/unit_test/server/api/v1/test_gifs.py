import json

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestCreateGif:
    async def test_create_gif(self, client: AsyncClient, register, upload_gif):
        owner = await register("alice")
        gif = await upload_gif(owner["headers"], title="Cat jump", tags=["Cats", "#funny", "cats"])

        assert gif["title"] == "Cat jump"
        assert gif["privacy"] == "public"
        assert gif["user"]["username"] == "alice"
        assert gif["hashtag_names"] == ["cats", "funny"]
        assert gif["file_url"].startswith("/media/gifs/")
        assert gif["file_size"] > 0
        assert gif["is_remix"] is False
        assert gif["public_url"] == f"https://ytgify.com/gifs/{gif['id']}"

        me = await client.get("/api/auth/me", headers=owner["headers"])
        assert me.json()["user"]["gifs_count"] == 1

    async def test_create_gif_response_message(self, client: AsyncClient, register, gif_bytes):
        owner = await register("bob")
        response = await client.post(
            "/api/gifs",
            headers=owner["headers"],
            data={"gif[title]": "Wrapped fields", "gif[privacy]": "unlisted"},
            files={"gif[file]": ("clip.gif", gif_bytes, "image/gif")},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "GIF created successfully"
        assert body["gif"]["title"] == "Wrapped fields"
        assert body["gif"]["privacy"] == "unlisted"

    async def test_background_processing_fills_metadata(self, client: AsyncClient, register, upload_gif):
        owner = await register("carol")
        gif = await upload_gif(owner["headers"])

        response = await client.get(f"/api/gifs/{gif['id']}", headers=owner["headers"])
        assert response.status_code == 200
        detail = response.json()["gif"]
        assert detail["resolution_width"] == 40
        assert detail["resolution_height"] == 30
        assert detail["fps"] == 10
        assert detail["duration"] == pytest.approx(0.3)
        assert detail["thumbnail_url"].startswith("/media/thumbnails/")

    async def test_duration_from_youtube_timestamps(self, client: AsyncClient, register, upload_gif):
        owner = await register("dave")
        gif = await upload_gif(
            owner["headers"],
            youtube_video_url="https://www.youtube.com/watch?v=abc",
            youtube_timestamp_start="5",
            youtube_timestamp_end="8.5",
        )
        assert gif["duration"] == pytest.approx(3.5)
        assert gif["youtube_video_url"] == "https://www.youtube.com/watch?v=abc"

    async def test_timestamps_must_be_ordered(self, client: AsyncClient, register, gif_bytes):
        owner = await register("erin")
        response = await client.post(
            "/api/gifs",
            headers=owner["headers"],
            data={"youtube_timestamp_start": "9", "youtube_timestamp_end": "3"},
            files={"file": ("clip.gif", gif_bytes, "image/gif")},
        )
        assert response.status_code == 422
        assert response.json()["message"] == "GIF creation failed"

    async def test_privacy_aliases_and_invalid_privacy(self, client: AsyncClient, register, upload_gif, gif_bytes):
        owner = await register("frank")
        gif = await upload_gif(owner["headers"], privacy="private_access")
        assert gif["privacy"] == "private"

        response = await client.post(
            "/api/gifs",
            headers=owner["headers"],
            data={"privacy": "friends"},
            files={"file": ("clip.gif", gif_bytes, "image/gif")},
        )
        assert response.status_code == 422

    async def test_privacy_defaults_to_user_preference(self, client: AsyncClient, register, upload_gif):
        owner = await register("grace")
        await client.patch(
            "/api/users/me/preferences", headers=owner["headers"], json={"default_privacy": "unlisted"}
        )
        gif = await upload_gif(owner["headers"])
        assert gif["privacy"] == "unlisted"

    async def test_upload_records_recent_tags(self, client: AsyncClient, register, upload_gif):
        owner = await register("heidi")
        await upload_gif(owner["headers"], tags=["one", "two"])
        await upload_gif(owner["headers"], tags=["three", "one"])

        response = await client.get("/api/tags/recent", headers=owner["headers"])
        assert response.json()["tags"] == ["three", "one", "two"]

    async def test_description_hashtags_are_linked(self, client: AsyncClient, register, upload_gif):
        owner = await register("dora")
        gif = await upload_gif(owner["headers"], tags=["dogs"], description="Look at #Cats and #dogs #funny")

        assert sorted(gif["hashtag_names"]) == ["cats", "dogs", "funny"]
        cats = await client.get("/api/hashtags/cats")
        assert cats.json()["hashtag"]["usage_count"] == 1

    async def test_create_requires_authentication(self, client: AsyncClient, gif_bytes):
        response = await client.post("/api/gifs", files={"file": ("clip.gif", gif_bytes, "image/gif")})
        assert response.status_code == 401

    async def test_create_requires_file(self, client: AsyncClient, register):
        owner = await register("ivan")
        response = await client.post("/api/gifs", headers=owner["headers"], data={"title": "No file"})
        assert response.status_code == 400
        assert response.json() == {"error": "Upload failed", "message": "file is required"}

    async def test_create_rejects_other_content_types(self, client: AsyncClient, register):
        owner = await register("judy")
        response = await client.post(
            "/api/gifs",
            headers=owner["headers"],
            files={"file": ("image.png", b"\x89PNG\r\n\x1a\n", "image/png")},
        )
        assert response.status_code == 400
        assert "must be a GIF image" in response.json()["message"]

    async def test_create_rejects_bad_signature(self, client: AsyncClient, register):
        owner = await register("kim")
        response = await client.post(
            "/api/gifs",
            headers=owner["headers"],
            files={"file": ("fake.gif", b"not really a gif", "image/gif")},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "file is not a valid GIF file"

    async def test_extension_upload_with_composite_and_overlay(self, client: AsyncClient, register, gif_bytes):
        owner = await register("leo")
        overlay = {"text": "Hello", "font_size": 32}
        response = await client.post(
            "/api/gifs/upload",
            headers=owner["headers"],
            data={"title": "With text", "overlay": json.dumps(overlay), "tags": "memes, reactions"},
            files={
                "file": ("clip.gif", gif_bytes, "image/gif"),
                "composite_file": ("composite.gif", gif_bytes, "image/gif"),
            },
        )
        assert response.status_code == 201
        gif = response.json()["gif"]
        assert gif["has_text_overlay"] is True
        assert gif["text_overlay_data"] == overlay
        assert gif["composite_file_url"].startswith("/media/gifs/composite/")
        assert gif["hashtag_names"] == ["memes", "reactions"]

    async def test_invalid_overlay_json(self, client: AsyncClient, register, gif_bytes):
        owner = await register("mia")
        response = await client.post(
            "/api/gifs/upload",
            headers=owner["headers"],
            data={"overlay": "{not json"},
            files={"file": ("clip.gif", gif_bytes, "image/gif")},
        )
        assert response.status_code == 422
        assert response.json()["message"] == "Invalid overlay data"


class TestShowGif:
    async def test_private_gif_only_visible_to_owner(self, client: AsyncClient, register, upload_gif):
        owner = await register("nina")
        other = await register("oscar")
        gif = await upload_gif(owner["headers"], privacy="private")

        assert (await client.get(f"/api/gifs/{gif['id']}", headers=owner["headers"])).status_code == 200
        response = await client.get(f"/api/gifs/{gif['id']}", headers=other["headers"])
        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden"
        assert (await client.get(f"/api/gifs/{gif['id']}")).status_code == 403

    async def test_unlisted_gif_visible_by_id(self, client: AsyncClient, register, upload_gif):
        owner = await register("paul")
        gif = await upload_gif(owner["headers"], privacy="unlisted")
        assert (await client.get(f"/api/gifs/{gif['id']}")).status_code == 200

        listing = await client.get("/api/gifs")
        assert gif["id"] not in [g["id"] for g in listing.json()["gifs"]]

    async def test_unknown_gif(self, client: AsyncClient):
        response = await client.get("/api/gifs/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
        assert response.json()["error"] == "Record not found"

    async def test_views_are_counted_once_per_viewer(self, client: AsyncClient, register, upload_gif):
        owner = await register("quinn")
        viewer = await register("rose")
        gif = await upload_gif(owner["headers"])
        url = f"/api/gifs/{gif['id']}"

        await client.get(url, headers=owner["headers"])
        first = await client.get(url, headers=viewer["headers"])
        await client.get(url, headers=viewer["headers"])
        await client.get(url)
        final = await client.get(url, headers=owner["headers"])

        assert first.json()["gif"]["view_count"] == 1
        assert final.json()["gif"]["view_count"] == 2


class TestListGifs:
    async def test_lists_public_gifs_only(self, client: AsyncClient, register, upload_gif):
        owner = await register("sam")
        public = await upload_gif(owner["headers"], title="Public")
        await upload_gif(owner["headers"], title="Hidden", privacy="private")

        response = await client.get("/api/gifs")
        assert response.status_code == 200
        body = response.json()
        assert [g["id"] for g in body["gifs"]] == [public["id"]]
        assert body["pagination"] == {"page": 1, "per_page": 20, "total": 1}

    async def test_filters_by_user_and_type(self, client: AsyncClient, register, upload_gif, gif_bytes):
        alice = await register("tina")
        bob = await register("umar")
        original = await upload_gif(alice["headers"])
        await upload_gif(bob["headers"])
        remix = await client.post(
            f"/api/gifs/{original['id']}/remix",
            headers=bob["headers"],
            files={"file": ("remix.gif", gif_bytes, "image/gif")},
        )
        remix_id = remix.json()["gif"]["id"]

        by_user = await client.get("/api/gifs", params={"user_id": alice["user"]["id"]})
        assert [g["id"] for g in by_user.json()["gifs"]] == [original["id"]]

        remixes = await client.get("/api/gifs", params={"type": "remix"})
        assert [g["id"] for g in remixes.json()["gifs"]] == [remix_id]

        originals = await client.get("/api/gifs", params={"type": "original"})
        assert remix_id not in [g["id"] for g in originals.json()["gifs"]]
        assert originals.json()["pagination"]["total"] == 2

    async def test_pagination_is_clamped(self, client: AsyncClient, register, upload_gif):
        owner = await register("vera")
        for i in range(3):
            await upload_gif(owner["headers"], title=f"GIF {i}")

        response = await client.get("/api/gifs", params={"page": 2, "per_page": 2})
        body = response.json()
        assert len(body["gifs"]) == 1
        assert body["pagination"] == {"page": 2, "per_page": 2, "total": 3}

        response = await client.get("/api/gifs", params={"page": 0, "per_page": 1000})
        assert response.json()["pagination"]["page"] == 1
        assert response.json()["pagination"]["per_page"] == 100


class TestUpdateGif:
    async def test_owner_updates_gif(self, client: AsyncClient, register, upload_gif):
        owner = await register("walt")
        gif = await upload_gif(owner["headers"], tags=["old"])

        response = await client.patch(
            f"/api/gifs/{gif['id']}",
            headers=owner["headers"],
            json={"gif": {"title": "New title", "privacy": "private_access", "hashtag_names": ["new"]}},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "GIF updated successfully"
        assert body["gif"]["title"] == "New title"
        assert body["gif"]["privacy"] == "private"
        assert body["gif"]["hashtag_names"] == ["new"]

        old = await client.get("/api/hashtags/old")
        assert old.json()["hashtag"]["usage_count"] == 0

    async def test_description_update_adds_hashtags(self, client: AsyncClient, register, upload_gif):
        owner = await register("wade")
        gif = await upload_gif(owner["headers"], tags=["kept"])

        response = await client.patch(
            f"/api/gifs/{gif['id']}", headers=owner["headers"], json={"description": "now with #extra"}
        )

        assert response.status_code == 200
        assert sorted(response.json()["gif"]["hashtag_names"]) == ["extra", "kept"]

    async def test_put_alias(self, client: AsyncClient, register, upload_gif):
        owner = await register("xena")
        gif = await upload_gif(owner["headers"])
        response = await client.put(f"/api/gifs/{gif['id']}", headers=owner["headers"], json={"description": "Hi"})
        assert response.status_code == 200
        assert response.json()["gif"]["description"] == "Hi"

    async def test_non_owner_cannot_update(self, client: AsyncClient, register, upload_gif):
        owner = await register("yuri")
        other = await register("zoe")
        gif = await upload_gif(owner["headers"])
        response = await client.patch(f"/api/gifs/{gif['id']}", headers=other["headers"], json={"title": "Mine"})
        assert response.status_code == 403

    async def test_title_too_long(self, client: AsyncClient, register, upload_gif):
        owner = await register("abby")
        gif = await upload_gif(owner["headers"])
        response = await client.patch(f"/api/gifs/{gif['id']}", headers=owner["headers"], json={"title": "x" * 101})
        assert response.status_code == 422


class TestDeleteGif:
    async def test_soft_delete(self, client: AsyncClient, register, upload_gif):
        owner = await register("bert")
        gif = await upload_gif(owner["headers"], tags=["gone"])

        response = await client.delete(f"/api/gifs/{gif['id']}", headers=owner["headers"])
        assert response.status_code == 200
        assert response.json() == {"message": "GIF deleted successfully"}

        assert (await client.get(f"/api/gifs/{gif['id']}", headers=owner["headers"])).status_code == 404
        assert (await client.get("/api/gifs")).json()["gifs"] == []
        me = await client.get("/api/auth/me", headers=owner["headers"])
        assert me.json()["user"]["gifs_count"] == 0
        hashtag = await client.get("/api/hashtags/gone")
        assert hashtag.json()["hashtag"]["usage_count"] == 0

    async def test_non_owner_cannot_delete(self, client: AsyncClient, register, upload_gif):
        owner = await register("cleo")
        other = await register("dora")
        gif = await upload_gif(owner["headers"])
        response = await client.delete(f"/api/gifs/{gif['id']}", headers=other["headers"])
        assert response.status_code == 403


class TestRemix:
    async def test_remix_public_gif(self, client: AsyncClient, register, upload_gif, gif_bytes):
        owner = await register("eddy")
        remixer = await register("fay")
        source = await upload_gif(owner["headers"], title="Original")

        response = await client.post(
            f"/api/gifs/{source['id']}/remix",
            headers=remixer["headers"],
            data={"text_overlay_data": json.dumps({"text": " Hi ", "font_size": 500, "position": {"x": 2}})},
            files={"file": ("remix.gif", gif_bytes, "image/gif")},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Remix created successfully"
        remix = body["gif"]
        assert remix["is_remix"] is True
        assert remix["parent_gif_id"] == source["id"]
        assert remix["title"] == "Remix of Original"
        assert remix["text_overlay_data"]["text"] == "Hi"
        assert remix["text_overlay_data"]["font_size"] == 120
        assert remix["text_overlay_data"]["position"] == {"x": 1, "y": 0.9}

        parent = await client.get(f"/api/gifs/{source['id']}", headers=owner["headers"])
        assert parent.json()["gif"]["remix_count"] == 1

        processed = await client.get(f"/api/gifs/{remix['id']}", headers=remixer["headers"])
        assert processed.json()["gif"]["resolution_width"] == 40

        remixes = await client.get(f"/api/gifs/{source['id']}/remixes")
        assert [g["id"] for g in remixes.json()["gifs"]] == [remix["id"]]

        notifications = await client.get("/api/notifications", headers=owner["headers"])
        actions = [n["action"] for n in notifications.json()["notifications"]]
        assert actions == ["remix"]

    async def test_cannot_remix_private_gif_of_others(self, client: AsyncClient, register, upload_gif, gif_bytes):
        owner = await register("gina")
        other = await register("hugo")
        source = await upload_gif(owner["headers"], privacy="private")
        response = await client.post(
            f"/api/gifs/{source['id']}/remix",
            headers=other["headers"],
            files={"file": ("remix.gif", gif_bytes, "image/gif")},
        )
        assert response.status_code == 403

    async def test_remix_missing_gif(self, client: AsyncClient, register, gif_bytes):
        user = await register("iris")
        response = await client.post(
            "/api/gifs/00000000-0000-0000-0000-000000000000/remix",
            headers=user["headers"],
            files={"file": ("remix.gif", gif_bytes, "image/gif")},
        )
        assert response.status_code == 404


class TestShareAndAnalytics:
    async def test_share_counts_and_returns_link(self, client: AsyncClient, register, upload_gif):
        owner = await register("jack")
        gif = await upload_gif(owner["headers"])

        await client.post(f"/api/gifs/{gif['id']}/share")
        response = await client.post(f"/api/gifs/{gif['id']}/share")
        assert response.status_code == 200
        assert response.json() == {
            "share_count": 2,
            "public_url": f"https://ytgify.com/gifs/{gif['id']}",
        }

    async def test_analytics_for_owner(self, client: AsyncClient, register, upload_gif):
        owner = await register("kate")
        viewer = await register("liam")
        gif = await upload_gif(owner["headers"])

        await client.get(f"/api/gifs/{gif['id']}", headers={**viewer["headers"], "Referer": "https://youtube.com"})
        await client.get(f"/api/gifs/{gif['id']}")

        response = await client.get(f"/api/gifs/{gif['id']}/analytics", headers=owner["headers"])
        assert response.status_code == 200
        data = response.json()
        assert data["gif_id"] == gif["id"]
        assert data["total_views"] == 2
        assert data["unique_viewers"] == 2
        assert data["view_count"] == 2
        assert len(data["views_by_day"]) == 7
        assert sum(data["views_by_day"].values()) == 2
        assert data["top_referrers"] == [{"referer": "https://youtube.com", "views": 1}]

    async def test_analytics_owner_only(self, client: AsyncClient, register, upload_gif):
        owner = await register("mona")
        other = await register("ned")
        gif = await upload_gif(owner["headers"])
        response = await client.get(f"/api/gifs/{gif['id']}/analytics", headers=other["headers"])
        assert response.status_code == 403
