import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.config import get_settings
from app.core.errors import ApiError
from app.core.responses import respond_error
from app.routers import comments, healthcheck, likes, playlists, subscriptions, tweets, users, videos
from app.services.media_upload import media_dir

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    media_dir(settings.media_root, "media").mkdir(parents=True, exist_ok=True)
    media_dir(settings.temp_upload_dir, "tmp").mkdir(parents=True, exist_ok=True)
    yield


app = FastAPI(title="VideoTube API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origin.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return respond_error(exc.status_code, exc.message, exc.errors)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return respond_error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ())[1:])
        text = str(first.get("msg", "")).removeprefix("Value error, ")
        message = f"{field}: {text}" if field else text
    return respond_error(400, message, [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors])


app.include_router(users.router)
app.include_router(videos.router)
app.include_router(comments.router)
app.include_router(tweets.router)
app.include_router(likes.router)
app.include_router(subscriptions.router)
app.include_router(playlists.router)
app.include_router(healthcheck.router)

app.mount(
    settings.media_url_prefix,
    StaticFiles(directory=media_dir(settings.media_root, "media"), check_dir=False),
    name="media",
)


@app.get("/")
def root():
    return {"message": "VideoTube API", "docs": "/docs"}
