"""
Media upload collaborator. Incoming multipart files are staged to a temp dir, then handed to
the media store, which returns a durable URL plus derived metadata (duration for videos).
Failures surface as UpstreamError right away; nothing is retried here.
"""
import logging
import shutil
import subprocess
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from fastapi import UploadFile

from app.config import get_settings
from app.core.errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

VIDEO_CONTENT_TYPES = {"video/mp4", "video/webm", "video/ogg", "video/quicktime"}
VIDEO_EXTENSIONS = (".mp4", ".webm", ".ogg", ".mov")
CHUNK_SIZE = 1024 * 1024  # 1 MB


@dataclass(frozen=True)
class UploadedMedia:
    url: str
    duration: float | None = None


def probe_duration(path: Path, timeout: int = 60) -> float | None:
    """Duration in seconds via ffprobe. None when ffprobe is missing or cannot read the file."""
    cmd = [
        "ffprobe",
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(path),
    ]
    try:
        result = subprocess.run(cmd, check=True, capture_output=True, timeout=timeout)
        return float(result.stdout.decode().strip())
    except subprocess.CalledProcessError as e:
        logger.warning("ffprobe failed for %s: %s", path, e.stderr and e.stderr.decode() or e)
    except subprocess.TimeoutExpired:
        logger.warning("ffprobe timed out for %s", path)
    except FileNotFoundError:
        logger.warning("ffprobe not found; install FFmpeg to record video durations")
    except ValueError:
        logger.warning("ffprobe returned no duration for %s", path)
    return None


def media_dir(configured: str, name: str) -> Path:
    """Configured directory, or uploads/<name> next to the app package."""
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parent.parent.parent / "uploads" / name


class MediaUploader:
    def __init__(
        self,
        media_root: Path,
        temp_dir: Path,
        url_prefix: str = "/media",
        probe: Callable[[Path], float | None] | None = None,
    ):
        self.media_root = Path(media_root)
        self.temp_dir = Path(temp_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self._probe = probe or probe_duration

    def stage(self, file: UploadFile, kind: str) -> Path:
        """Write an incoming upload to the temp dir. kind is "video" or "image"."""
        ct = (file.content_type or "").split(";")[0].strip().lower()
        name = (file.filename or "").lower()
        if kind == "video":
            if ct not in VIDEO_CONTENT_TYPES and not name.endswith(VIDEO_EXTENSIONS):
                raise ValidationError("File must be a video (mp4, webm, ogg, mov)")
        elif not ct.startswith("image/"):
            raise ValidationError("File must be an image")
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        ext = Path(file.filename or "").suffix or (".mp4" if kind == "video" else ".png")
        if len(ext) > 10:
            ext = ".bin"
        path = self.temp_dir / f"{uuid.uuid4().hex}{ext}"
        try:
            with path.open("wb") as f:
                while chunk := file.file.read(CHUNK_SIZE):
                    f.write(chunk)
        except Exception:
            path.unlink(missing_ok=True)
            raise
        return path

    def upload(self, local_path: Path, kind: str = "image") -> UploadedMedia:
        """Move a local file into the media store. The local file is gone afterwards either way."""
        local_path = Path(local_path)
        if not local_path.is_file():
            raise UpstreamError("Upload failed: local file not found")
        dest = self.media_root / f"{uuid.uuid4().hex}{local_path.suffix}"
        try:
            self.media_root.mkdir(parents=True, exist_ok=True)
            shutil.move(str(local_path), dest)
        except OSError as e:
            logger.error("Media upload failed for %s: %s", local_path, e)
            local_path.unlink(missing_ok=True)
            raise UpstreamError("Upload failed") from e
        duration = self._probe(dest) if kind == "video" else None
        return UploadedMedia(url=f"{self.url_prefix}/{dest.name}", duration=duration)

    def remove(self, media: UploadedMedia) -> None:
        """Delete a stored file by its URL."""
        (self.media_root / media.url.rsplit("/", 1)[-1]).unlink(missing_ok=True)

    def upload_file(self, file: UploadFile, kind: str) -> UploadedMedia:
        return self.upload_files([(file, kind)])[0]

    def upload_files(self, files: list[tuple[UploadFile, str]]) -> list[UploadedMedia]:
        """
        All or nothing: every file is validated and staged before any reaches the media store,
        and a failure part-way removes what was already staged or stored.
        """
        staged = []
        try:
            for file, kind in files:
                staged.append((self.stage(file, kind), kind))
        except Exception:
            for path, _ in staged:
                path.unlink(missing_ok=True)
            raise

        stored = []
        try:
            for path, kind in staged:
                stored.append(self.upload(path, kind))
        except Exception:
            for media in stored:
                self.remove(media)
            for path, _ in staged[len(stored) + 1:]:
                path.unlink(missing_ok=True)
            raise
        return stored


def get_media_uploader() -> MediaUploader:
    """FastAPI dependency; tests override it with a tmp-dir uploader."""
    settings = get_settings()
    return MediaUploader(
        media_root=media_dir(settings.media_root, "media"),
        temp_dir=media_dir(settings.temp_upload_dir, "tmp"),
        url_prefix=settings.media_url_prefix,
        probe=lambda path: probe_duration(path, settings.ffprobe_timeout_seconds),
    )
