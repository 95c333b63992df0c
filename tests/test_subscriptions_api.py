import uuid


def test_subscribe_and_unsubscribe(client, auth, alice, bob):
    url = f"/api/v1/subscriptions/c/{bob.id}"
    response = client.post(url, headers=auth(alice))
    assert response.json()["data"] == {"active": True}
    assert response.json()["message"] == "Subscribed successfully"

    subscribers = client.get(f"/api/v1/subscriptions/c/subscribers/{bob.id}", headers=auth(alice)).json()["data"]
    assert subscribers["totalDocs"] == 1
    assert subscribers["items"][0]["subscriber"] == {
        "id": alice.id, "username": "alice", "fullName": "Alice", "avatar": "/media/alice.png",
    }

    channels = client.get(f"/api/v1/subscriptions/u/subscribed-channels/{alice.id}", headers=auth(alice)).json()["data"]
    assert [c["channel"]["username"] for c in channels["items"]] == ["bob"]

    response = client.post(url, headers=auth(alice))
    assert response.json()["data"] == {"active": False}
    subscribers = client.get(f"/api/v1/subscriptions/c/subscribers/{bob.id}", headers=auth(alice)).json()["data"]
    assert subscribers["totalDocs"] == 0


def test_cannot_subscribe_to_self(client, auth, alice):
    response = client.post(f"/api/v1/subscriptions/c/{alice.id}", headers=auth(alice))
    assert response.status_code == 403
    assert response.json()["message"] == "You cannot subscribe to yourself"


def test_subscription_errors(client, auth, alice):
    assert client.post("/api/v1/subscriptions/c/xyz", headers=auth(alice)).status_code == 400
    assert client.post(f"/api/v1/subscriptions/c/{uuid.uuid4()}", headers=auth(alice)).status_code == 404
    assert client.get(f"/api/v1/subscriptions/c/subscribers/{uuid.uuid4()}", headers=auth(alice)).status_code == 404


def test_channel_profile_counts(client, auth, alice, bob, make_user):
    carol = make_user("carol")
    client.post(f"/api/v1/subscriptions/c/{bob.id}", headers=auth(alice))
    client.post(f"/api/v1/subscriptions/c/{bob.id}", headers=auth(carol))
    client.post(f"/api/v1/subscriptions/c/{alice.id}", headers=auth(bob))

    profile = client.get("/api/v1/users/c/bob", headers=auth(alice)).json()["data"]
    assert profile["subscribersCount"] == 2
    assert profile["channelsSubscribedToCount"] == 1
    assert profile["isSubscribed"] is True

    profile = client.get("/api/v1/users/c/BOB", headers=auth(bob)).json()["data"]
    assert profile["isSubscribed"] is False
    assert client.get("/api/v1/users/c/nobody", headers=auth(bob)).status_code == 404
