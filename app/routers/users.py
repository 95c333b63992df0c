from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.auth import (
    create_access_token,
    create_refresh_token,
    decode_token,
    get_current_user,
    hash_password,
    verify_password,
)
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.responses import respond
from app.database import get_db
from app.models.user import User
from app.query import feeds
from app.query.pipeline import first
from app.repositories.relation_repository import SubscriptionStore, subscriptions
from app.schemas.user import (
    ChannelProfileResponse,
    LoginRequest,
    RefreshRequest,
    TokenResponse,
    UserResponse,
)
from app.services.media_upload import MediaUploader, get_media_uploader

router = APIRouter(prefix="/api/v1/users", tags=["users"])


def _issue_tokens(user: User, db: Session) -> TokenResponse:
    """New access + refresh pair; the refresh token is stored so it can be revoked."""
    refresh_token = create_refresh_token(user.id)
    user.refresh_token = refresh_token
    db.commit()
    db.refresh(user)
    return TokenResponse(
        access_token=create_access_token(user.id, user.username),
        refresh_token=refresh_token,
        user=UserResponse.model_validate(user),
    )


@router.post("/register")
def register(
    username: str = Form(""),
    email: str = Form(""),
    full_name: str = Form("", alias="fullName"),
    password: str = Form(""),
    avatar: UploadFile | None = File(None),
    cover_image: UploadFile | None = File(None, alias="coverImage"),
    uploader: MediaUploader = Depends(get_media_uploader),
    db: Session = Depends(get_db),
):
    """Create an account. Multipart: username, email, fullName, password, avatar, coverImage (optional)."""
    username = username.strip().lower()
    email = email.strip().lower()
    full_name = full_name.strip()
    if not all([username, email, full_name, password.strip()]):
        raise ValidationError("All fields are required")
    if not avatar or not avatar.filename:
        raise ValidationError("Avatar file is required")
    existing = db.query(User.id).filter(or_(User.username == username, User.email == email)).first()
    if existing:
        raise ConflictError("User with email or username already exists")

    files = [(avatar, "image")]
    if cover_image and cover_image.filename:
        files.append((cover_image, "image"))
    avatar_media, *rest = uploader.upload_files(files)
    cover_media = rest[0] if rest else None

    user = User(
        username=username,
        email=email,
        full_name=full_name,
        avatar=avatar_media.url,
        cover_image=cover_media.url if cover_media else None,
        password=hash_password(password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User with email or username already exists")
    db.refresh(user)
    return respond(UserResponse.model_validate(user), "User registered successfully", status.HTTP_201_CREATED)


@router.post("/login")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Login with email or username and password."""
    identifier = (body.email or body.username or "").strip().lower()
    user = (
        db.query(User)
        .filter(or_(func.lower(User.email) == identifier, User.username == identifier))
        .first()
    )
    if not user:
        raise NotFoundError("User does not exist")
    if not verify_password(body.password, user.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid user credentials")
    return respond(_issue_tokens(user, db), "User logged in successfully")


@router.post("/refresh-token")
def refresh_access_token(body: RefreshRequest, db: Session = Depends(get_db)):
    if not body.refresh_token:
        raise ValidationError("Refresh token is required")
    payload = decode_token(body.refresh_token, expected_type="refresh")
    user = db.query(User).filter(User.id == payload.sub).first() if payload else None
    if not user or user.refresh_token != body.refresh_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Refresh token is expired or used")
    return respond(_issue_tokens(user, db), "Access token refreshed")


@router.post("/logout")
def logout(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    db.query(User).filter(User.id == user.id).update({User.refresh_token: None}, synchronize_session=False)
    db.commit()
    return respond({}, "User logged out")


@router.get("/current-user")
def current_user(user: User = Depends(get_current_user)):
    return respond(UserResponse.model_validate(user), "Current user fetched successfully")


@router.get("/c/{username}")
def channel_profile(
    username: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Channel page: public profile with subscriber counts and whether the requester is subscribed."""
    if not username.strip():
        raise ValidationError("Username is missing")
    doc = first(db, feeds.channel_profile(username))
    if doc is None:
        raise NotFoundError("Channel does not exist")
    doc["is_subscribed"] = subscriptions.exists(db, user.id, SubscriptionStore.CHANNEL, doc["id"])
    return respond(ChannelProfileResponse.model_validate(doc), "User channel fetched successfully")
