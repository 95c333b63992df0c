from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.auth import get_current_user
from app.core.errors import NotFoundError
from app.core.responses import respond
from app.database import get_db
from app.models.like import LikeTarget
from app.models.tweet import Tweet
from app.models.user import User
from app.query import feeds
from app.query.options import ListOptions, list_options
from app.query.pagination import paginate
from app.query.pipeline import first
from app.repositories.entity_repository import delete_owned, get_or_404, require_owner, update_owned
from app.repositories.relation_repository import likes
from app.schemas.tweet import TweetBody, TweetResponse

router = APIRouter(prefix="/api/v1/tweets", tags=["tweets"])


def _tweet(db: Session, tweet_id: str) -> TweetResponse:
    doc = first(db, feeds.tweet_detail(tweet_id))
    if doc is None:
        raise NotFoundError("Tweet not found")
    return TweetResponse.model_validate(doc)


@router.post("")
def create_tweet(
    body: TweetBody,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    tweet = Tweet(content=body.content, owner_id=user.id)
    db.add(tweet)
    db.commit()
    db.refresh(tweet)
    return respond(_tweet(db, tweet.id), "Tweet created successfully", status.HTTP_201_CREATED)


@router.get("/user/{user_id}")
def list_user_tweets(
    user_id: str,
    options: ListOptions = Depends(list_options),
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    owner = get_or_404(db, User, user_id, "User")
    page = paginate(
        db,
        feeds.user_tweets(owner.id),
        options.page,
        options.limit,
        serialize=TweetResponse.model_validate,
    )
    return respond(page, "Tweets fetched successfully")


@router.patch("/{tweet_id}")
def update_tweet(
    tweet_id: str,
    body: TweetBody,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    tweet = get_or_404(db, Tweet, tweet_id, "Tweet")
    require_owner(tweet, user.id, "update your own tweets")
    update_owned(db, Tweet, tweet.id, user.id, {Tweet.content: body.content})
    return respond(_tweet(db, tweet.id), "Tweet updated successfully")


@router.delete("/{tweet_id}")
def delete_tweet(
    tweet_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    tweet = get_or_404(db, Tweet, tweet_id, "Tweet")
    require_owner(tweet, user.id, "delete your own tweets")
    likes.clear(db, LikeTarget.TWEET, [tweet.id])
    delete_owned(db, Tweet, tweet.id, user.id)
    return respond({}, "Tweet deleted successfully")
