import uuid

import pytest

from app.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.models import Like, LikeTarget, Subscription
from app.repositories.relation_repository import SubscriptionStore, likes, subscriptions
from app.services.toggle_service import toggle_like, toggle_subscription


def _like_edges(db):
    return db.query(Like).count()


@pytest.mark.parametrize("toggles", [1, 2, 3, 4, 5])
def test_toggle_parity(db, alice, bob, make_video, toggles):
    video = make_video(bob)
    states = [likes.toggle(db, alice.id, LikeTarget.VIDEO, video.id) for _ in range(toggles)]
    assert states == [i % 2 == 0 for i in range(toggles)]
    assert likes.exists(db, alice.id, LikeTarget.VIDEO, video.id) is (toggles % 2 == 1)
    assert _like_edges(db) == toggles % 2


def test_like_edges_are_per_target_type(db, alice, bob, make_video, make_tweet):
    video = make_video(bob)
    tweet = make_tweet(bob)
    assert likes.toggle(db, alice.id, LikeTarget.VIDEO, video.id) is True
    assert likes.toggle(db, alice.id, LikeTarget.TWEET, tweet.id) is True
    assert {(e.target_type, e.target_id) for e in db.query(Like)} == {
        (LikeTarget.VIDEO.value, video.id),
        (LikeTarget.TWEET.value, tweet.id),
    }
    assert not likes.exists(db, alice.id, LikeTarget.COMMENT, video.id)


def test_duplicate_create_leaves_one_edge(db, alice, bob, make_video):
    video = make_video(bob)
    likes.create(db, alice.id, LikeTarget.VIDEO, video.id)
    with pytest.raises(ConflictError):
        likes.create(db, alice.id, LikeTarget.VIDEO, video.id)
    assert _like_edges(db) == 1


def test_create_on_missing_target(db, alice):
    with pytest.raises(NotFoundError, match="Comment not found"):
        likes.create(db, alice.id, LikeTarget.COMMENT, str(uuid.uuid4()))


def test_unknown_target_type(db, alice):
    with pytest.raises(ValidationError):
        likes.find(db, alice.id, "playlist", str(uuid.uuid4()))


def test_toggle_converges_when_a_concurrent_request_created_the_edge(db, alice, bob, make_video, monkeypatch):
    video = make_video(bob)
    likes.create(db, alice.id, LikeTarget.VIDEO, video.id)
    # The read happened before the other request's insert became visible
    monkeypatch.setattr(likes, "find", lambda *args, **kwargs: None)

    assert likes.toggle(db, alice.id, LikeTarget.VIDEO, video.id) is True
    assert _like_edges(db) == 1


def test_subscribe_to_self_is_forbidden(db, alice):
    with pytest.raises(AuthorizationError):
        subscriptions.toggle(db, alice.id, SubscriptionStore.CHANNEL, alice.id)
    with pytest.raises(AuthorizationError):
        toggle_subscription(db, alice, alice.id)
    assert db.query(Subscription).count() == 0


def test_subscription_toggle(db, alice, bob):
    assert toggle_subscription(db, alice, bob.id) == {"active": True}
    assert subscriptions.exists(db, alice.id, SubscriptionStore.CHANNEL, bob.id)
    assert not subscriptions.exists(db, bob.id, SubscriptionStore.CHANNEL, alice.id)
    assert toggle_subscription(db, alice, bob.id) == {"active": False}
    assert db.query(Subscription).count() == 0


def test_toggle_subscription_validates_channel(db, alice):
    with pytest.raises(ValidationError, match="Invalid channel id"):
        toggle_subscription(db, alice, "nope")
    with pytest.raises(NotFoundError, match="Channel not found"):
        toggle_subscription(db, alice, str(uuid.uuid4()))


def test_toggle_like_validates_target(db, alice):
    with pytest.raises(ValidationError, match="Invalid video id"):
        toggle_like(db, alice, LikeTarget.VIDEO, "123")
    with pytest.raises(NotFoundError, match="Tweet not found"):
        toggle_like(db, alice, LikeTarget.TWEET, str(uuid.uuid4()))


def test_clear_removes_likes_on_targets(db, alice, bob, make_video, make_comment):
    video = make_video(bob)
    comments = [make_comment(bob, video, f"c{i}") for i in range(2)]
    for comment in comments:
        likes.toggle(db, alice.id, LikeTarget.COMMENT, comment.id)
    likes.toggle(db, alice.id, LikeTarget.VIDEO, video.id)

    assert likes.clear(db, LikeTarget.COMMENT, [c.id for c in comments]) == 2
    db.commit()
    assert _like_edges(db) == 1
    assert likes.clear(db, LikeTarget.COMMENT, []) == 0



def test_toggle_like_on_hidden_video(db, alice, bob, make_video):
    draft = make_video(bob, "Draft", is_published=False)
    with pytest.raises(NotFoundError, match="Video not found"):
        toggle_like(db, alice, LikeTarget.VIDEO, draft.id)
    assert _like_edges(db) == 0
    assert toggle_like(db, bob, LikeTarget.VIDEO, draft.id) == {"active": True}
