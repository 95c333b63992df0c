import uuid
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401 - register mappers
from app.auth import create_access_token, hash_password
from app.database import Base, get_db
from app.main import app as fastapi_app
from app.models import Comment, Playlist, Tweet, User, Video
from app.services.media_upload import MediaUploader, get_media_uploader

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)
PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def uploader(tmp_path):
    return MediaUploader(tmp_path / "media", tmp_path / "tmp", url_prefix="/media", probe=lambda path: 42.5)


@pytest.fixture
def client(db, uploader):
    """TestClient whose requests run on the test session."""
    def override_get_db():
        yield db

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_media_uploader] = lambda: uploader
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture
def make_user(db, password_hash):
    def _make(username: str, **kwargs) -> User:
        user = User(
            id=str(uuid.uuid4()),
            username=username,
            email=kwargs.pop("email", f"{username}@example.com"),
            full_name=kwargs.pop("full_name", username.title()),
            avatar=kwargs.pop("avatar", f"/media/{username}.png"),
            password=password_hash,
            **kwargs,
        )
        db.add(user)
        db.commit()
        return user
    return _make


@pytest.fixture
def make_video(db):
    counter = {"n": 0}

    def _make(owner: User, title: str = "Video", **kwargs) -> Video:
        counter["n"] += 1
        created = kwargs.pop("created_at", BASE_TIME + timedelta(minutes=counter["n"]))
        video = Video(
            id=str(uuid.uuid4()),
            video_file=f"/media/{counter['n']}.mp4",
            thumbnail=f"/media/{counter['n']}.png",
            title=title,
            description=kwargs.pop("description", ""),
            duration=kwargs.pop("duration", 60.0),
            owner_id=owner.id,
            created_at=created,
            updated_at=created,
            **kwargs,
        )
        db.add(video)
        db.commit()
        return video
    return _make


@pytest.fixture
def make_comment(db):
    def _make(owner: User, video: Video, content: str = "Nice", **kwargs) -> Comment:
        comment = Comment(id=str(uuid.uuid4()), content=content, video_id=video.id, owner_id=owner.id, **kwargs)
        db.add(comment)
        db.commit()
        return comment
    return _make


@pytest.fixture
def make_tweet(db):
    def _make(owner: User, content: str = "Hello", **kwargs) -> Tweet:
        tweet = Tweet(id=str(uuid.uuid4()), content=content, owner_id=owner.id, **kwargs)
        db.add(tweet)
        db.commit()
        return tweet
    return _make


@pytest.fixture
def make_playlist(db):
    def _make(owner: User, name: str = "Favourites", **kwargs) -> Playlist:
        playlist = Playlist(id=str(uuid.uuid4()), name=name, owner_id=owner.id, **kwargs)
        db.add(playlist)
        db.commit()
        return playlist
    return _make


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.username)}"}


@pytest.fixture
def auth():
    return auth_headers


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")
