"""
Tests for the /api/videos/{video_id}/comments endpoints.
"""

import pytest

from tests.fixtures.entities import create_comment


@pytest.mark.asyncio
class TestComments:
    async def test_add_and_list(self, test_client, acting_user, bob, alice_video):
        acting_user["user"] = bob

        response = test_client.post(
            f"/api/videos/{alice_video.id}/comments", json={"text": "Great!"}
        )

        assert response.status_code == 201
        assert response.json()["comment"]["author"]["username"] == "bob"

        listed = test_client.get(f"/api/videos/{alice_video.id}/comments").json()
        assert [c["text"] for c in listed] == ["Great!"]

    async def test_blank_text_is_400(self, test_client, acting_user, bob, alice_video):
        acting_user["user"] = bob
        response = test_client.post(
            f"/api/videos/{alice_video.id}/comments", json={"text": "   "}
        )
        assert response.status_code == 400

    async def test_comment_on_missing_video_is_404(self, test_client, acting_user, bob):
        acting_user["user"] = bob
        response = test_client.post("/api/videos/missing/comments", json={"text": "hi"})
        assert response.status_code == 404

    async def test_author_edits(self, test_client, db_session, acting_user, bob, alice_video):
        comment = await create_comment(db_session, alice_video, bob, "frist")
        acting_user["user"] = bob

        response = test_client.put(
            f"/api/videos/{alice_video.id}/comments/{comment.id}", json={"text": "first"}
        )

        assert response.status_code == 200
        assert response.json()["comment"]["text"] == "first"

    async def test_non_author_edit_is_403(
        self, test_client, db_session, acting_user, alice, bob, alice_video
    ):
        comment = await create_comment(db_session, alice_video, bob)
        acting_user["user"] = alice

        response = test_client.put(
            f"/api/videos/{alice_video.id}/comments/{comment.id}", json={"text": "edited"}
        )

        assert response.status_code == 403

    async def test_author_deletes(self, test_client, db_session, acting_user, bob, alice_video):
        comment = await create_comment(db_session, alice_video, bob)
        acting_user["user"] = bob

        response = test_client.delete(f"/api/videos/{alice_video.id}/comments/{comment.id}")

        assert response.status_code == 200
        assert test_client.get(f"/api/videos/{alice_video.id}/comments").json() == []

    async def test_non_author_delete_is_403(
        self, test_client, db_session, acting_user, alice, bob, alice_video
    ):
        comment = await create_comment(db_session, alice_video, bob)
        acting_user["user"] = alice

        response = test_client.delete(f"/api/videos/{alice_video.id}/comments/{comment.id}")

        assert response.status_code == 403
