"""
Pipeline builders for every list and detail view. List views filter and sort before they
join; detail views match the id first and then join.
"""
from app.core.errors import ValidationError
from app.models.like import LikeTarget
from app.query.enrichment import OWNER_JOIN, PUBLIC_USER_FIELDS, Join, owner_join
from app.query.options import ListOptions
from app.query.pipeline import (
    CountRelated,
    LookupMany,
    Match,
    MatchAny,
    Pipeline,
    Project,
    ReplaceRoot,
    SizeOf,
    Sort,
    TextSearch,
)

NEWEST_FIRST = Sort("created_at", descending=True)

# sortBy values accepted by the video feed -> column
VIDEO_SORT_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
    "views": "views",
    "duration": "duration",
}
VIDEO_SEARCH_FIELDS = ("title", "description")

PLAYLIST_SUMMARY_FIELDS = ("id", "name", "description", "total_videos", "created_at", "updated_at")
CHANNEL_PROFILE_FIELDS = (
    "id", "username", "full_name", "email", "avatar", "cover_image",
    "subscribers_count", "channels_subscribed_to_count", "created_at",
)


def sort_stage(options: ListOptions, allowed: dict[str, str]) -> Sort:
    descending = options.sort_type != "asc"
    if not options.sort_by:
        return Sort("created_at", descending=descending)
    field = allowed.get(options.sort_by)
    if field is None:
        raise ValidationError(
            f"Cannot sort by '{options.sort_by}'. Allowed: {', '.join(sorted(allowed))}"
        )
    return Sort(field, descending=descending)


def likes_count(target: LikeTarget) -> CountRelated:
    return CountRelated("likes_count", "likes", "target_id", where=(("target_type", target.value),))


def visible_to(viewer_id: str | None, within: str | None = None) -> MatchAny:
    """Published videos, plus the viewer's own unpublished ones."""
    prefix = f"{within}." if within else ""
    return MatchAny(((f"{prefix}is_published", True), (f"{prefix}owner_id", viewer_id)))


# ---------- Videos ----------


def video_feed(options: ListOptions, viewer_id: str | None) -> Pipeline:
    stages = []
    if options.query:
        stages.append(TextSearch(VIDEO_SEARCH_FIELDS, options.query))
    if options.user_id:
        stages.append(Match("owner_id", options.user_id))
    stages.append(visible_to(viewer_id))
    stages.append(sort_stage(options, VIDEO_SORT_FIELDS))
    stages.append(OWNER_JOIN)
    return Pipeline("videos", tuple(stages))


def video_detail(video_id: str, viewer_id: str | None) -> Pipeline:
    return Pipeline("videos", (
        Match("id", video_id),
        visible_to(viewer_id),
        OWNER_JOIN,
        likes_count(LikeTarget.VIDEO),
    ))


# ---------- Comments / tweets ----------


def video_comments(video_id: str) -> Pipeline:
    return Pipeline("comments", (
        Match("video_id", video_id),
        NEWEST_FIRST,
        OWNER_JOIN,
        likes_count(LikeTarget.COMMENT),
    ))


def user_tweets(user_id: str) -> Pipeline:
    return Pipeline("tweets", (
        Match("owner_id", user_id),
        NEWEST_FIRST,
        OWNER_JOIN,
        likes_count(LikeTarget.TWEET),
    ))


def comment_detail(comment_id: str) -> Pipeline:
    return Pipeline("comments", (Match("id", comment_id), OWNER_JOIN, likes_count(LikeTarget.COMMENT)))


def tweet_detail(tweet_id: str) -> Pipeline:
    return Pipeline("tweets", (Match("id", tweet_id), OWNER_JOIN, likes_count(LikeTarget.TWEET)))


# ---------- Playlists ----------


def playlist_videos(viewer_id: str | None) -> Pipeline:
    """Videos of one playlist in membership order; LookupMany adds the playlist match."""
    return Pipeline("playlist_videos", (
        Sort("position", descending=False),
        Join("videos", "video_id", "id", "video", required=True),
        visible_to(viewer_id, within="video"),
        owner_join(within="video"),
        ReplaceRoot("video"),
    ))


def user_playlists(user_id: str, viewer_id: str | None) -> Pipeline:
    """Summaries; `total_videos` counts the same videos the detail view lists for this viewer."""
    return Pipeline("playlists", (
        Match("owner_id", user_id),
        NEWEST_FIRST,
        CountRelated(
            "total_videos",
            "playlist_videos",
            "playlist_id",
            resolve=("videos", "video_id"),
            resolve_any=visible_to(viewer_id).conditions,
        ),
        Project(PLAYLIST_SUMMARY_FIELDS),
    ))


def playlist_detail(playlist_id: str, viewer_id: str | None) -> Pipeline:
    return Pipeline("playlists", (
        Match("id", playlist_id),
        OWNER_JOIN,
        LookupMany("videos", playlist_videos(viewer_id), foreign_key="playlist_id"),
        SizeOf("videos", "total_videos"),
    ))


# ---------- Likes ----------


def liked_videos(user_id: str) -> Pipeline:
    """Like edges of one user on videos, joined to the video and then to its owner."""
    return Pipeline("likes", (
        Match("liked_by_id", user_id),
        Match("target_type", LikeTarget.VIDEO.value),
        NEWEST_FIRST,
        Join("videos", "target_id", "id", "video", required=True),
        visible_to(user_id, within="video"),
        owner_join(within="video"),
    ))


# ---------- Subscriptions / channels ----------


def channel_subscribers(channel_id: str) -> Pipeline:
    return Pipeline("subscriptions", (
        Match("channel_id", channel_id),
        NEWEST_FIRST,
        owner_join(local_key="subscriber_id", output="subscriber", fields=PUBLIC_USER_FIELDS),
    ))


def subscribed_channels(subscriber_id: str) -> Pipeline:
    return Pipeline("subscriptions", (
        Match("subscriber_id", subscriber_id),
        NEWEST_FIRST,
        owner_join(local_key="channel_id", output="channel", fields=PUBLIC_USER_FIELDS),
    ))


def channel_profile(username: str) -> Pipeline:
    return Pipeline("users", (
        Match("username", username.strip().lower()),
        CountRelated("subscribers_count", "subscriptions", "channel_id"),
        CountRelated("channels_subscribed_to_count", "subscriptions", "subscriber_id"),
        Project(CHANNEL_PROFILE_FIELDS),
    ))
