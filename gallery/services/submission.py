"""Visitor photo submissions: validate, upload the blob, create a pending record."""
import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.config import settings
from gallery.models.photo import Photo, PhotoStatus
from gallery.services.storage import BlobStore, StorageError
from gallery.utils.exceptions import PersistenceError, ValidationFailed

logger = logging.getLogger(__name__)

SUBMISSIONS_PREFIX = "submissions/"
DEFAULT_EXTENSION = "jpg"

CITY_STATE_RE = re.compile(r"^[^,]+,\s*[A-Za-z]{2,}$")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


@dataclass
class Submission:
    title: str
    location: str
    filename: str | None = None
    content_type: str | None = None
    data: bytes | None = None
    tags: list[str] = field(default_factory=list)
    consent: bool = False


def is_city_state(value: str) -> bool:
    return bool(CITY_STATE_RE.match(value.strip()))


def validate_submission(submission: Submission, max_bytes: int | None = None) -> None:
    """Raise ValidationFailed for the first failing check, in form order."""
    limit = max_bytes if max_bytes is not None else settings.max_upload_bytes

    if not submission.title.strip():
        raise ValidationFailed("Photo name is required.")
    location = submission.location.strip()
    if not location:
        raise ValidationFailed("Location is required (City, State).")
    if not is_city_state(location):
        raise ValidationFailed("Please use the format: City, ST (example: Austin, TX).")
    if submission.data is None:
        raise ValidationFailed("Pick a photo first.")
    if not submission.consent:
        raise ValidationFailed("Please agree to the submission terms.")
    if len(submission.data) > limit:
        raise ValidationFailed(f"Please upload an image under {limit // (1024 * 1024)}MB.")
    if not (submission.content_type or "").startswith("image/"):
        raise ValidationFailed("That file doesn't look like an image.")


def sanitize_extension(filename: str | None) -> str:
    ext = (filename or "").rsplit(".", 1)[-1]
    return _NON_ALNUM_RE.sub("", ext.lower()) or DEFAULT_EXTENSION


def build_storage_key(filename: str | None) -> str:
    return f"{SUBMISSIONS_PREFIX}{uuid.uuid4()}.{sanitize_extension(filename)}"


def normalize_tags(tags: list[str]) -> list[str]:
    seen: list[str] = []
    for tag in tags:
        name = tag.strip()
        if name and name not in seen:
            seen.append(name)
    return seen


async def submit_photo(db: AsyncSession, store: BlobStore, submission: Submission) -> Photo:
    validate_submission(submission)

    key = build_storage_key(submission.filename)
    try:
        await store.upload(key, submission.data, submission.content_type)
    except StorageError as e:
        raise PersistenceError(f"Upload failed: {e}") from e

    photo = Photo(
        id=str(uuid.uuid4()),
        title=submission.title.strip(),
        location=submission.location.strip(),
        image_path=key,
        status=PhotoStatus.PENDING.value,
        like_count=0,
        tags=normalize_tags(submission.tags),
        created_at=datetime.now(timezone.utc).isoformat(),
    )
    db.add(photo)
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        # The uploaded blob stays behind; see the orphan report for reconciliation.
        logger.error("Photo insert failed after upload, orphaned blob %s: %s", key, e)
        raise PersistenceError(f"Database insert failed: {e}") from e

    logger.info("Photo %s submitted for review (%s)", photo.id, key)
    return photo
