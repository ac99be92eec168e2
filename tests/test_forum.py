"""
Forum posts, likes, comments and deletion, through the service layer and the API.
"""

from __future__ import annotations

import pytest
from fastapi import HTTPException

from mindful_youth.models.forum import Post, PostLike, Comment
from mindful_youth.models.user import User
from mindful_youth.services import forum_service
from mindful_youth.services.snapshot_feed import feed, posts_topic, comments_topic


def _make_user(db, email: str) -> User:
    user = User(email=email, password_hash="x", display_name="", token_version=0)
    db.add(user)
    db.commit()
    return user


def _assert_counters_match_rows(db, post_id: int) -> None:
    post = db.get(Post, post_id)
    db.refresh(post)
    assert post.likes == db.query(PostLike).filter(PostLike.post_id == post_id).count()
    assert post.likes == len(post.liked_by)
    assert post.comments == db.query(Comment).filter(Comment.post_id == post_id).count()


def test_new_post_is_anonymous_with_zero_counters(db) -> None:
    user = _make_user(db, "a@example.com")

    post = forum_service.create_post(db, user.id, "Hello everyone")

    assert post.author == "Anonymous"
    assert post.likes == 0
    assert post.comments == 0
    assert post.liked_by == []


def test_like_then_unlike_keeps_counter_in_step(db) -> None:
    author = _make_user(db, "author@example.com")
    u1 = _make_user(db, "u1@example.com")
    u2 = _make_user(db, "u2@example.com")
    post = forum_service.create_post(db, author.id, "Tips for exams?")

    forum_service.toggle_like(db, post.id, u1.id)
    forum_service.toggle_like(db, post.id, u2.id)
    liked = forum_service.toggle_like(db, post.id, u1.id)

    assert liked.likes == 1
    assert liked.liked_by == [u2.id]
    _assert_counters_match_rows(db, post.id)


def test_comment_increments_counter(db) -> None:
    author = _make_user(db, "author@example.com")
    post = forum_service.create_post(db, author.id, "Post")

    forum_service.add_comment(db, post.id, author.id, "first")
    forum_service.add_comment(db, post.id, author.id, "second")

    comments = forum_service.list_comments(db, post.id)
    assert [c.content for c in comments] == ["first", "second"]
    assert all(c.author == "Anonymous" for c in comments)
    _assert_counters_match_rows(db, post.id)


def test_posts_listed_newest_first(db) -> None:
    user = _make_user(db, "a@example.com")
    first = forum_service.create_post(db, user.id, "first")
    second = forum_service.create_post(db, user.id, "second")

    assert [p.id for p in forum_service.list_posts(db)] == [second.id, first.id]


def test_delete_post_removes_comments_and_likes(db, monkeypatch) -> None:
    monkeypatch.setattr(forum_service, "COMMENT_DELETE_BATCH", 2)
    author = _make_user(db, "author@example.com")
    other = _make_user(db, "other@example.com")
    post = forum_service.create_post(db, author.id, "Going away")
    for index in range(5):
        forum_service.add_comment(db, post.id, other.id, f"comment {index}")
    forum_service.toggle_like(db, post.id, other.id)
    post_id = post.id

    removed = forum_service.delete_post(db, post_id, author.id)

    assert removed == 5
    assert db.get(Post, post_id) is None
    assert db.query(Comment).filter(Comment.post_id == post_id).count() == 0
    assert db.query(PostLike).filter(PostLike.post_id == post_id).count() == 0


def test_only_author_can_delete(db) -> None:
    author = _make_user(db, "author@example.com")
    other = _make_user(db, "other@example.com")
    post = forum_service.create_post(db, author.id, "Mine")

    with pytest.raises(HTTPException) as excinfo:
        forum_service.delete_post(db, post.id, other.id)

    assert excinfo.value.status_code == 403
    assert db.get(Post, post.id) is not None


@pytest.mark.asyncio
async def test_writes_publish_to_subscribers(db) -> None:
    user = _make_user(db, "a@example.com")
    listing = feed.subscribe(posts_topic())
    try:
        post = forum_service.create_post(db, user.id, "Live")
        assert await listing.wait(1) is True

        thread = feed.subscribe(comments_topic(post.id))
        try:
            forum_service.add_comment(db, post.id, user.id, "Live comment")
            assert await thread.wait(1) is True
            assert await listing.wait(1) is True
        finally:
            feed.unsubscribe(thread)
    finally:
        feed.unsubscribe(listing)


# ---------- HTTP API ----------

def test_like_scenario_over_api(client, alice, bob) -> None:
    created = client.post("/forum/posts", headers=alice["headers"], json={"content": "Stay kind"})
    assert created.status_code == 201
    post_id = created.json()["id"]

    client.post(f"/forum/posts/{post_id}/like", headers=alice["headers"])
    liked = client.post(f"/forum/posts/{post_id}/like", headers=bob["headers"]).json()
    assert liked["likes"] == 2
    assert liked["liked_by_me"] is True
    assert sorted(liked["liked_by"]) == sorted([alice["id"], bob["id"]])

    unliked = client.post(f"/forum/posts/{post_id}/like", headers=alice["headers"]).json()
    assert unliked["likes"] == 1
    assert unliked["liked_by"] == [bob["id"]]

    listed = client.get("/forum/posts", headers=alice["headers"]).json()
    assert listed[0]["liked_by_me"] is False
    assert listed[0]["is_author"] is True


def test_blank_post_and_comment_rejected(client, alice) -> None:
    assert client.post("/forum/posts", headers=alice["headers"], json={"content": "   "}).status_code == 422

    post_id = client.post("/forum/posts", headers=alice["headers"], json={"content": "ok"}).json()["id"]
    response = client.post(f"/forum/posts/{post_id}/comments", headers=alice["headers"], json={"content": ""})
    assert response.status_code == 422


def test_comments_over_api(client, alice, bob) -> None:
    post_id = client.post("/forum/posts", headers=alice["headers"], json={"content": "Ask me"}).json()["id"]

    client.post(f"/forum/posts/{post_id}/comments", headers=bob["headers"], json={"content": "one"})
    client.post(f"/forum/posts/{post_id}/comments", headers=alice["headers"], json={"content": "two"})

    comments = client.get(f"/forum/posts/{post_id}/comments", headers=bob["headers"]).json()
    assert [c["content"] for c in comments] == ["one", "two"]
    assert [c["is_author"] for c in comments] == [True, False]
    assert client.get(f"/forum/posts/{post_id}", headers=bob["headers"]).json()["comments"] == 2


def test_delete_over_api(client, alice, bob) -> None:
    post_id = client.post("/forum/posts", headers=alice["headers"], json={"content": "Temp"}).json()["id"]
    client.post(f"/forum/posts/{post_id}/comments", headers=bob["headers"], json={"content": "hi"})

    assert client.delete(f"/forum/posts/{post_id}", headers=bob["headers"]).status_code == 403

    response = client.delete(f"/forum/posts/{post_id}", headers=alice["headers"])
    assert response.status_code == 200
    assert response.json()["comments_deleted"] == 1
    assert client.get(f"/forum/posts/{post_id}", headers=alice["headers"]).status_code == 404


def test_missing_post_is_404(client, alice) -> None:
    assert client.post("/forum/posts/999/like", headers=alice["headers"]).status_code == 404
    assert client.get("/forum/posts/999/comments", headers=alice["headers"]).status_code == 404


def test_like_unlike_round_trip_scenario(db) -> None:
    user_a = _make_user(db, "a@example.com")
    user_b = _make_user(db, "b@example.com")
    post = forum_service.create_post(db, user_a.id, "hello")
    assert post.likes == 0

    post = forum_service.toggle_like(db, post.id, user_b.id)
    assert post.likes == 1
    assert post.liked_by == [user_b.id]

    post = forum_service.toggle_like(db, post.id, user_b.id)
    assert post.likes == 0
    assert post.liked_by == []
