import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.models.photo import Photo, PhotoStatus
from gallery.services.storage import BlobStore
from gallery.services.submission import SUBMISSIONS_PREFIX
from gallery.utils.exceptions import NotAuthenticated, PersistenceError, PhotoNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminIdentity:
    email: str
    session_id: str


def _require_admin(admin: AdminIdentity | None) -> AdminIdentity:
    if admin is None:
        raise NotAuthenticated()
    return admin


async def list_pending(db: AsyncSession, admin: AdminIdentity | None) -> list[Photo]:
    """Return the whole review queue, newest first."""
    _require_admin(admin)
    result = await db.execute(
        select(Photo)
        .where(Photo.status == PhotoStatus.PENDING.value)
        .order_by(Photo.created_at.desc())
    )
    return list(result.scalars().all())


async def set_status(
    db: AsyncSession, admin: AdminIdentity | None, photo_id: str, status: PhotoStatus
) -> Photo:
    admin = _require_admin(admin)

    photo = await db.get(Photo, photo_id)
    if photo is None:
        raise PhotoNotFound(photo_id)

    previous = photo.status
    photo.status = status.value
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise PersistenceError(str(e)) from e

    logger.info("Photo %s %s -> %s by %s", photo_id, previous, status.value, admin.email)
    return photo


async def approve(db: AsyncSession, admin: AdminIdentity | None, photo_id: str) -> Photo:
    return await set_status(db, admin, photo_id, PhotoStatus.APPROVED)


async def reject(db: AsyncSession, admin: AdminIdentity | None, photo_id: str) -> Photo:
    return await set_status(db, admin, photo_id, PhotoStatus.REJECTED)


async def find_orphaned_blobs(
    db: AsyncSession, admin: AdminIdentity | None, store: BlobStore
) -> list[str]:
    """Blob keys under the submissions prefix that no photo record points at.

    These are left behind when a record insert fails after the upload
    succeeded. Nothing is deleted here; an operator decides what to do.
    """
    _require_admin(admin)
    keys = await store.list_keys(SUBMISSIONS_PREFIX)
    if not keys:
        return []
    result = await db.execute(select(Photo.image_path))
    referenced = set(result.scalars().all())
    return [k for k in keys if k not in referenced]
