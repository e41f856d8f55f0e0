"""Tests for moment listing and creation."""

import uuid
from datetime import datetime, timezone

import pytest
from core.errors import AuthorizationDenied
from moments import service
from moments.schemas import MomentCreateRequest

ACTIVE = {"role": "owner", "status": "active"}


def _moment(moment_id, day_key="2025-12-01", story=None, moment_time=None):
    return {
        "id": moment_id,
        "story": story,
        "location_name": None,
        "moment_time": moment_time,
        "day_key": day_key,
    }


class TestListMoments:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [1, 3, 12])
    async def test_children_are_fetched_in_one_batch_each(self, conn, ctx, trip_id, count):
        moment_ids = [uuid.uuid4() for _ in range(count)]
        conn.respond("FROM trip_members", ACTIVE)
        conn.respond("FROM moments", [_moment(mid) for mid in moment_ids])

        await service.list_moments(conn, ctx, trip_id)

        media_queries = conn.queries("FROM media")
        attachment_queries = conn.queries("FROM attachments")
        assert len(media_queries) == 1
        assert len(attachment_queries) == 1
        assert media_queries[0][2] == (moment_ids,)
        assert "ANY($1::uuid[])" in media_queries[0][1]
        assert attachment_queries[0][2] == (moment_ids,)

    @pytest.mark.asyncio
    async def test_no_moments_means_no_child_queries(self, conn, ctx, trip_id):
        conn.respond("FROM trip_members", ACTIVE)

        assert await service.list_moments(conn, ctx, trip_id) == []
        assert conn.queries("FROM media") == []
        assert conn.queries("FROM attachments") == []

    @pytest.mark.asyncio
    async def test_children_are_grouped_in_order(self, conn, ctx, trip_id):
        first, second, bare = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
        conn.respond("FROM trip_members", ACTIVE)
        conn.respond("FROM moments", [_moment(first), _moment(second), _moment(bare, day_key="2025-12-02")])
        conn.respond(
            "FROM media",
            [
                {"id": "m1", "moment_id": first, "type": "photo", "cdn_url": "https://cdn/1.jpg", "thumb_url": None, "sort_order": 0},
                {"id": "m2", "moment_id": first, "type": "photo", "cdn_url": "https://cdn/2.jpg", "thumb_url": "https://cdn/2t.jpg", "sort_order": 1},
                {"id": "m3", "moment_id": second, "type": "video", "cdn_url": "", "thumb_url": None, "sort_order": 0},
            ],
        )
        conn.respond(
            "FROM attachments",
            [
                {"id": "a1", "moment_id": second, "type": "link", "title": "", "url": "https://example.com", "cdn_url": None},
                {"id": "a2", "moment_id": second, "type": "pdf", "title": "Tickets", "url": None, "cdn_url": "https://cdn/t.pdf"},
            ],
        )

        moments = await service.list_moments(conn, ctx, trip_id)

        assert [m["id"] for m in moments] == [first, second, bare]
        assert [m["id"] for m in moments[0]["media"]] == ["m1", "m2"]
        assert moments[0]["media"][0] == {
            "id": "m1",
            "type": "photo",
            "url": "https://cdn/1.jpg",
            "thumbUrl": "https://cdn/1.jpg",
            "streamUrl": "https://cdn/1.jpg",
        }
        assert moments[0]["media"][1]["thumbUrl"] == "https://cdn/2t.jpg"
        assert moments[1]["media"][0]["url"] is None
        assert moments[1]["attachments"] == [
            {"id": "a1", "type": "link", "title": None, "url": "https://example.com"},
            {"id": "a2", "type": "pdf", "title": "Tickets", "url": "https://cdn/t.pdf"},
        ]
        assert moments[0]["attachments"] == []
        assert moments[2]["media"] == []
        assert moments[2]["attachments"] == []
        assert moments[2]["dayKey"] == "2025-12-02"

    @pytest.mark.asyncio
    async def test_day_key_uses_effective_time_in_utc(self, conn, ctx, trip_id):
        conn.respond("FROM trip_members", ACTIVE)

        await service.list_moments(conn, ctx, trip_id)

        sql = conn.queries("FROM moments")[0][1]
        assert "COALESCE(moment_time, created_at) AT TIME ZONE 'UTC'" in sql
        assert "ORDER BY COALESCE(moment_time, created_at) ASC" in sql

    @pytest.mark.asyncio
    async def test_empty_text_fields_render_as_empty_strings(self, conn, ctx, trip_id):
        conn.respond("FROM trip_members", ACTIVE)
        conn.respond("FROM moments", [_moment(uuid.uuid4())])

        moments = await service.list_moments(conn, ctx, trip_id)

        assert moments[0]["story"] == ""
        assert moments[0]["locationName"] == ""
        assert moments[0]["momentTime"] is None

    @pytest.mark.asyncio
    async def test_non_member_is_denied(self, conn, ctx, trip_id):
        with pytest.raises(AuthorizationDenied):
            await service.list_moments(conn, ctx, trip_id)

        assert conn.queries("FROM moments") == []


class TestCreateMoment:
    @pytest.mark.asyncio
    async def test_absent_fields_are_stored_as_null(self, conn, ctx, trip_id):
        moment_id = uuid.uuid4()
        conn.respond("FROM trip_members", ACTIVE)
        conn.respond("INSERT INTO moments", {"id": moment_id})

        result = await service.create_moment(conn, ctx, trip_id, MomentCreateRequest())

        assert result == {"id": moment_id}
        assert conn.queries("INSERT INTO moments")[0][2] == (trip_id, ctx.user_id, None, None, None)

    @pytest.mark.asyncio
    async def test_empty_strings_are_kept(self, conn, ctx, trip_id):
        conn.respond("FROM trip_members", ACTIVE)
        conn.respond("INSERT INTO moments", {"id": uuid.uuid4()})

        payload = MomentCreateRequest.model_validate({"story": "", "locationName": ""})
        await service.create_moment(conn, ctx, trip_id, payload)

        args = conn.queries("INSERT INTO moments")[0][2]
        assert args[2] == ""
        assert args[3] == ""

    @pytest.mark.asyncio
    async def test_naive_moment_time_is_treated_as_utc(self, conn, ctx, trip_id):
        conn.respond("FROM trip_members", ACTIVE)
        conn.respond("INSERT INTO moments", {"id": uuid.uuid4()})

        payload = MomentCreateRequest.model_validate({"momentTime": "2025-12-01T23:30:00"})
        await service.create_moment(conn, ctx, trip_id, payload)

        moment_time = conn.queries("INSERT INTO moments")[0][2][4]
        assert moment_time == datetime(2025, 12, 1, 23, 30, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_non_member_cannot_create(self, conn, ctx, trip_id):
        with pytest.raises(AuthorizationDenied):
            await service.create_moment(conn, ctx, trip_id, MomentCreateRequest(story="hi"))

        assert conn.queries("INSERT INTO moments") == []
