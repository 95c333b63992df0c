import uuid
from datetime import timedelta

from conftest import BASE_TIME


def test_comment_lifecycle(client, auth, alice, bob, make_video):
    video = make_video(alice)
    response = client.post(f"/api/v1/comments/{video.id}", json={"content": " Great video "}, headers=auth(bob))
    assert response.status_code == 201
    comment = response.json()["data"]
    assert comment["content"] == "Great video"
    assert comment["videoId"] == video.id
    assert comment["owner"]["username"] == "bob"

    url = f"/api/v1/comments/c/{comment['id']}"
    assert client.patch(url, json={"content": "Hijacked"}, headers=auth(alice)).status_code == 403
    response = client.patch(url, json={"content": "Edited"}, headers=auth(bob))
    assert response.json()["data"]["content"] == "Edited"

    assert client.delete(url, headers=auth(alice)).status_code == 403
    assert client.delete(url, headers=auth(bob)).status_code == 200
    page = client.get(f"/api/v1/comments/{video.id}", headers=auth(bob)).json()["data"]
    assert page["totalDocs"] == 0


def test_comment_validation(client, auth, alice, make_video):
    video = make_video(alice)
    assert client.post(f"/api/v1/comments/{video.id}", json={"content": "   "}, headers=auth(alice)).status_code == 400
    assert client.post(f"/api/v1/comments/{uuid.uuid4()}", json={"content": "hi"}, headers=auth(alice)).status_code == 404
    assert client.get("/api/v1/comments/nope", headers=auth(alice)).status_code == 400


def test_comments_newest_first(client, auth, alice, make_video, make_comment):
    video = make_video(alice)
    for i in range(3):
        make_comment(alice, video, f"c{i}", created_at=BASE_TIME + timedelta(minutes=i))
    page = client.get(f"/api/v1/comments/{video.id}", params={"limit": 2}, headers=auth(alice)).json()["data"]
    assert [c["content"] for c in page["items"]] == ["c2", "c1"]
    assert page["hasNextPage"] is True


def test_tweet_lifecycle(client, auth, alice, bob):
    response = client.post("/api/v1/tweets", json={"content": "First!"}, headers=auth(alice))
    assert response.status_code == 201
    tweet_id = response.json()["data"]["id"]

    page = client.get(f"/api/v1/tweets/user/{alice.id}", headers=auth(bob)).json()["data"]
    assert [t["content"] for t in page["items"]] == ["First!"]
    assert page["items"][0]["likesCount"] == 0

    assert client.patch(f"/api/v1/tweets/{tweet_id}", json={"content": "x"}, headers=auth(bob)).status_code == 403
    response = client.patch(f"/api/v1/tweets/{tweet_id}", json={"content": "Second"}, headers=auth(alice))
    assert response.json()["data"]["content"] == "Second"

    assert client.delete(f"/api/v1/tweets/{tweet_id}", headers=auth(alice)).status_code == 200
    assert client.get(f"/api/v1/tweets/user/{alice.id}", headers=auth(bob)).json()["data"]["totalDocs"] == 0


def test_tweet_validation(client, auth, alice):
    assert client.post("/api/v1/tweets", json={"content": ""}, headers=auth(alice)).status_code == 400
    assert client.post("/api/v1/tweets", json={}, headers=auth(alice)).status_code == 400
    assert client.get(f"/api/v1/tweets/user/{uuid.uuid4()}", headers=auth(alice)).status_code == 404


def test_comments_on_hidden_video(client, auth, alice, bob, make_video):
    draft = make_video(bob, "Draft", is_published=False)
    assert client.get(f"/api/v1/comments/{draft.id}", headers=auth(alice)).status_code == 404
    response = client.post(f"/api/v1/comments/{draft.id}", json={"content": "hi"}, headers=auth(alice))
    assert response.status_code == 404

    assert client.post(f"/api/v1/comments/{draft.id}", json={"content": "note"}, headers=auth(bob)).status_code == 201
    assert client.get(f"/api/v1/comments/{draft.id}", headers=auth(bob)).json()["data"]["totalDocs"] == 1
