from app.models.user import User
from app.models.video import Video
from app.models.comment import Comment
from app.models.tweet import Tweet
from app.models.playlist import Playlist, PlaylistVideo
from app.models.like import Like, LikeTarget
from app.models.subscription import Subscription

__all__ = [
    "User", "Video", "Comment", "Tweet", "Playlist", "PlaylistVideo",
    "Like", "LikeTarget", "Subscription",
]
