"""Anonymous likes.

A like is a row keyed by (photo_id, anon_fingerprint); the primary key is what
stops a visitor from counting twice. ``photos.like_count`` is a denormalized
copy of the number of rows and is bumped in the same transaction with a single
``UPDATE ... SET like_count = like_count + 1``, so concurrent likes from
different processes never overwrite each other's increment.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import insert, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.models.like import Like
from gallery.models.photo import Photo
from gallery.utils.exceptions import PhotoNotFound, ValidationFailed

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing photo_id or anon_fingerprint"


@dataclass(frozen=True)
class LikeResult:
    incremented: bool
    like_count: int


async def like_photo(db: AsyncSession, photo_id: str | None, anon_fingerprint: str | None) -> LikeResult:
    if not photo_id or not anon_fingerprint:
        raise ValidationFailed(MISSING_FIELDS_MESSAGE)

    try:
        await db.execute(
            insert(Like).values(
                photo_id=photo_id,
                anon_fingerprint=anon_fingerprint,
                created_at=datetime.now(timezone.utc).isoformat(),
            )
        )
    except IntegrityError as e:
        await db.rollback()
        return await _resolve_conflict(db, photo_id, anon_fingerprint, e)

    result = await db.execute(
        update(Photo)
        .where(Photo.id == photo_id)
        .values(like_count=Photo.like_count + 1)
        .returning(Photo.like_count)
    )
    new_count = result.scalar_one_or_none()
    if new_count is None:
        # Only reachable when the backend does not enforce the foreign key.
        await db.rollback()
        raise PhotoNotFound(photo_id)

    await db.commit()
    logger.info("Photo %s liked, like_count=%d", photo_id, new_count)
    return LikeResult(incremented=True, like_count=new_count)


async def _resolve_conflict(
    db: AsyncSession, photo_id: str, anon_fingerprint: str, error: IntegrityError
) -> LikeResult:
    """Tell an already-liked pair apart from a like on a missing photo."""
    existing = await db.get(Like, (photo_id, anon_fingerprint))
    if existing is not None:
        photo = await db.get(Photo, photo_id)
        current = photo.like_count if photo is not None else 0
        logger.debug("Photo %s already liked by %s", photo_id, anon_fingerprint)
        return LikeResult(incremented=False, like_count=current)

    if await db.get(Photo, photo_id) is None:
        raise PhotoNotFound(photo_id) from error
    raise error
