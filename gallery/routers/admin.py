from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.database import get_db
from gallery.dependencies import get_optional_admin, get_storage
from gallery.services import moderation
from gallery.services.gallery import serialize_photo
from gallery.services.moderation import AdminIdentity
from gallery.services.storage import BlobStore
from gallery.utils.response import success_response

router = APIRouter(prefix="/admin", tags=["admin"])


async def _queue(db: AsyncSession, admin: AdminIdentity | None, store: BlobStore) -> list[dict]:
    return [serialize_photo(p, store) for p in await moderation.list_pending(db, admin)]


@router.get("/photos/pending")
async def get_pending(
    db: AsyncSession = Depends(get_db),
    admin: AdminIdentity | None = Depends(get_optional_admin),
    store: BlobStore = Depends(get_storage),
):
    return success_response(data=await _queue(db, admin, store))


@router.post("/photos/{photo_id}/approve")
async def approve_photo(
    photo_id: str,
    db: AsyncSession = Depends(get_db),
    admin: AdminIdentity | None = Depends(get_optional_admin),
    store: BlobStore = Depends(get_storage),
):
    photo = await moderation.approve(db, admin, photo_id)
    return success_response(data={
        "photo": serialize_photo(photo, store),
        "pending": await _queue(db, admin, store),
    })


@router.post("/photos/{photo_id}/reject")
async def reject_photo(
    photo_id: str,
    db: AsyncSession = Depends(get_db),
    admin: AdminIdentity | None = Depends(get_optional_admin),
    store: BlobStore = Depends(get_storage),
):
    photo = await moderation.reject(db, admin, photo_id)
    return success_response(data={
        "photo": serialize_photo(photo, store),
        "pending": await _queue(db, admin, store),
    })


@router.get("/storage/orphans")
async def get_orphaned_blobs(
    db: AsyncSession = Depends(get_db),
    admin: AdminIdentity | None = Depends(get_optional_admin),
    store: BlobStore = Depends(get_storage),
):
    keys = await moderation.find_orphaned_blobs(db, admin, store)
    return success_response(data=keys)
