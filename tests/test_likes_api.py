import uuid

from app.models import Like


def test_like_video_twice(client, auth, alice, bob, make_video, db):
    video = make_video(bob)
    url = f"/api/v1/likes/toggle/v/{video.id}"

    first = client.post(url, headers=auth(alice))
    assert first.status_code == 200
    assert first.json()["data"] == {"active": True}
    assert first.json()["message"] == "Video liked successfully"

    second = client.post(url, headers=auth(alice))
    assert second.json()["data"] == {"active": False}
    assert db.query(Like).count() == 0


def test_like_comment_and_tweet(client, auth, alice, bob, make_video, make_comment, make_tweet):
    comment = make_comment(bob, make_video(bob))
    tweet = make_tweet(bob)
    assert client.post(f"/api/v1/likes/toggle/c/{comment.id}", headers=auth(alice)).json()["data"] == {"active": True}
    assert client.post(f"/api/v1/likes/toggle/t/{tweet.id}", headers=auth(alice)).json()["data"] == {"active": True}

    comments = client.get(f"/api/v1/comments/{comment.video_id}", headers=auth(alice)).json()["data"]
    assert comments["items"][0]["likesCount"] == 1


def test_like_missing_or_malformed_target(client, auth, alice):
    assert client.post("/api/v1/likes/toggle/v/bad-id", headers=auth(alice)).status_code == 400
    response = client.post(f"/api/v1/likes/toggle/t/{uuid.uuid4()}", headers=auth(alice))
    assert response.status_code == 404
    assert response.json()["success"] is False


def test_detail_reports_likes(client, auth, alice, bob, make_video):
    video = make_video(bob)
    client.post(f"/api/v1/likes/toggle/v/{video.id}", headers=auth(alice))
    data = client.get(f"/api/v1/videos/{video.id}", headers=auth(alice)).json()["data"]
    assert data["likesCount"] == 1
    assert data["isLiked"] is True
    data = client.get(f"/api/v1/videos/{video.id}", headers=auth(bob)).json()["data"]
    assert data["isLiked"] is False


def test_liked_videos(client, auth, alice, bob, make_video):
    videos = [make_video(bob, f"V{i}") for i in range(3)]
    for video in videos:
        client.post(f"/api/v1/likes/toggle/v/{video.id}", headers=auth(alice))

    page = client.get("/api/v1/likes/videos", params={"limit": 2}, headers=auth(alice)).json()["data"]
    assert page["totalDocs"] == 3
    assert len(page["items"]) == 2
    item = page["items"][0]
    assert item["likedById"] == alice.id
    assert item["video"]["owner"]["username"] == "bob"

    assert client.get("/api/v1/likes/videos", headers=auth(bob)).json()["data"]["totalDocs"] == 0


def test_cannot_like_hidden_video(client, auth, alice, bob, make_video, db):
    draft = make_video(bob, "Draft", is_published=False)
    response = client.post(f"/api/v1/likes/toggle/v/{draft.id}", headers=auth(alice))
    assert response.status_code == 404
    assert db.query(Like).count() == 0
