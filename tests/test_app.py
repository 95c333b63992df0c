from app.main import app as fastapi_app


def test_routes_registered():
    paths = {route.path for route in fastapi_app.routes}
    for path in (
        "/api/v1/tweets/user/{user_id}",
        "/api/v1/playlists/user/{user_id}",
        "/api/v1/videos",
        "/api/v1/likes/videos",
        "/api/v1/subscriptions/c/subscribers/{channel_id}",
        "/api/v1/healthcheck",
    ):
        assert path in paths


def test_path_user_id_is_independent_of_user_id_query(client, auth, alice, bob, make_tweet, make_playlist):
    make_tweet(alice, "from alice")
    make_tweet(bob, "from bob")
    make_playlist(alice, "alice list")

    response = client.get(f"/api/v1/tweets/user/{alice.id}", params={"userId": bob.id}, headers=auth(alice))
    assert response.status_code == 200
    assert [t["content"] for t in response.json()["data"]["items"]] == ["from alice"]

    response = client.get(f"/api/v1/playlists/user/{alice.id}", params={"userId": bob.id}, headers=auth(bob))
    assert response.status_code == 200
    assert [p["name"] for p in response.json()["data"]["items"]] == ["alice list"]
