from enum import Enum

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.models.photo import Photo, PhotoStatus
from gallery.schemas.photo import PhotoResponse
from gallery.services.storage import BlobStore
from gallery.utils.exceptions import ValidationFailed


class SortMode(str, Enum):
    NEWEST = "newest"
    LIKES = "likes"


async def list_approved(db: AsyncSession) -> list[Photo]:
    result = await db.execute(select(Photo).where(Photo.status == PhotoStatus.APPROVED.value))
    return list(result.scalars().all())


def sort_photos(photos: list[Photo], mode: SortMode | str = SortMode.NEWEST) -> list[Photo]:
    """Return a new list ordered for display; the input is left untouched."""
    try:
        mode = SortMode(mode)
    except ValueError:
        raise ValidationFailed(f"Unknown sort mode: {mode}") from None

    # Python's sort is stable: ordering by recency first makes it the tie-breaker for likes.
    ordered = sorted(photos, key=lambda p: p.created_at, reverse=True)
    if mode is SortMode.LIKES:
        ordered.sort(key=lambda p: p.like_count or 0, reverse=True)
    return ordered


def serialize_photo(photo: Photo, store: BlobStore) -> dict:
    data = PhotoResponse.model_validate(photo).model_dump()
    data["public_url"] = store.public_url(photo.image_path)
    return data
