import pytest

from stemforum.services.article_service import article_service


# --- Stats ---

def test_stats_creates_unseen_article(client, mongo_db):
    """First stats request creates a zero-valued record"""
    response = client.get("/api/article/42/stats")

    assert response.status_code == 200
    assert response.json() == {"views": 0, "likes": 0, "hasLiked": False, "comments": 0}
    doc = mongo_db.articles.find_one({"articleId": 42})
    assert doc is not None
    assert doc["views"] == 0
    assert doc["likes"] == []


def test_stats_counts_comments(client, mongo_db):
    mongo_db.comments.insert_many([
        {"articleId": 3, "content": "a", "author": "A", "userId": "u1"},
        {"articleId": 3, "content": "b", "author": "B", "userId": "u2"},
        {"articleId": 4, "content": "c", "author": "C", "userId": "u3"},
    ])

    response = client.get("/api/article/3/stats")

    assert response.json()["comments"] == 2


def test_stats_rejects_non_positive_id(client):
    assert client.get("/api/article/0/stats").status_code == 422
    assert client.get("/api/article/abc/stats").status_code == 422


def test_stats_degrades_when_database_down(client, db_down):
    response = client.get("/api/article/1/stats")

    assert response.status_code == 200
    assert response.json() == {"views": 0, "likes": 0, "hasLiked": False, "comments": 0}


# --- Views ---

def test_view_on_fresh_article_then_stats(client):
    response = client.post("/api/article/7/view", json={"sessionId": "s1"})

    assert response.status_code == 200
    assert response.json()["views"] == 1

    stats = client.get("/api/article/7/stats").json()
    assert stats["views"] == 1
    assert stats["likes"] == 0


def test_views_increase_by_number_of_sessions(client):
    client.get("/api/article/5/stats")
    for i in range(5):
        client.post("/api/article/5/view", json={"sessionId": f"session-{i}"})

    assert client.get("/api/article/5/stats").json()["views"] == 5


def test_view_requires_session_id(client, mongo_db):
    response = client.post("/api/article/7/view", json={})

    assert response.status_code == 400
    assert response.json()["detail"] == "Session ID required"
    assert mongo_db.articles.find_one({"articleId": 7}) is None


def test_view_fails_with_500_when_database_down(client, db_down):
    response = client.post("/api/article/7/view", json={"sessionId": "s1"})

    assert response.status_code == 500


# --- Likes ---

def test_like_then_like_again_is_noop(client):
    first = client.post("/api/article/2/like", json={"userId": "u1", "action": "like"})
    second = client.post("/api/article/2/like", json={"userId": "u1", "action": "like"})

    assert first.json()["likes"] == 1
    assert first.json()["hasLiked"] is True
    assert second.json()["likes"] == 1
    assert client.get("/api/article/2/stats").json()["likes"] == 1


def test_unlike_without_like_is_noop(client):
    client.post("/api/article/2/like", json={"userId": "u1", "action": "like"})

    response = client.post("/api/article/2/like", json={"userId": "u2", "action": "unlike"})

    assert response.status_code == 200
    assert response.json()["likes"] == 1
    assert response.json()["hasLiked"] is False


def test_unlike_removes_like(client, mongo_db):
    client.post("/api/article/2/like", json={"userId": "u1", "action": "like"})
    client.post("/api/article/2/like", json={"userId": "u2", "action": "like"})

    response = client.post("/api/article/2/like", json={"userId": "u1", "action": "unlike"})

    assert response.json()["likes"] == 1
    assert response.json()["message"] == "Article unliked successfully"
    likes = mongo_db.articles.find_one({"articleId": 2})["likes"]
    assert [like["userId"] for like in likes] == ["u2"]


def test_like_requires_user_id(client):
    response = client.post("/api/article/2/like", json={"action": "like"})

    assert response.status_code == 400
    assert response.json()["detail"] == "User ID required"


def test_like_rejects_unknown_action(client):
    response = client.post("/api/article/2/like", json={"userId": "u1", "action": "love"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_toggle_like_service_rejects_unknown_action():
    with pytest.raises(ValueError):
        await article_service.toggle_like(1, "u1", "love")


# --- Aggregate stats ---

def test_all_stats_with_totals(client):
    client.post("/api/article/1/view", json={"sessionId": "s1"})
    client.post("/api/article/1/view", json={"sessionId": "s2"})
    client.post("/api/article/2/view", json={"sessionId": "s1"})
    client.post("/api/article/2/like", json={"userId": "u1", "action": "like"})
    client.post("/api/articles/2/comments", json={"content": "Nice", "userId": "u1"})

    body = client.get("/api/articles/stats").json()

    assert body["1"] == {"views": 2, "likes": 0, "comments": 0}
    assert body["2"] == {"views": 1, "likes": 1, "comments": 1}
    totals = body["_totals"]
    entries = [v for k, v in body.items() if k != "_totals"]
    assert totals["views"] == sum(e["views"] for e in entries) == 3
    assert totals["likes"] == 1
    assert totals["comments"] == 1
    assert totals["articles"] == 2


def test_all_stats_includes_comment_only_articles(client, mongo_db):
    mongo_db.comments.insert_one(
        {"articleId": 99, "content": "orphan", "author": "A", "userId": "u1"}
    )

    body = client.get("/api/articles/stats").json()

    assert body["99"] == {"views": 0, "likes": 0, "comments": 1}
    assert body["_totals"]["comments"] == 1


def test_all_stats_degrades_to_empty(client, db_down):
    response = client.get("/api/articles/stats")

    assert response.status_code == 200
    assert response.json() == {}


def test_ids_beyond_int64_are_rejected(client, mongo_db):
    too_big = 2**64

    assert client.get(f"/api/article/{too_big}/stats").status_code == 422
    assert client.post(f"/api/article/{too_big}/view", json={"sessionId": "s1"}).status_code == 422
    assert client.post(
        f"/api/article/{too_big}/like", json={"userId": "u1", "action": "like"}
    ).status_code == 422
    assert client.get(f"/api/articles/{too_big}/comments").status_code == 422
    assert client.post(
        f"/api/articles/{too_big}/comments", json={"content": "Hi", "userId": "u1"}
    ).status_code == 422
    assert mongo_db.articles.count_documents({}) == 0


def test_largest_int64_id_is_accepted(client):
    response = client.get(f"/api/article/{2**63 - 1}/stats")

    assert response.status_code == 200
    assert response.json()["views"] == 0
