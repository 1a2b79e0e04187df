from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.config import settings
from gallery.database import get_db, get_read_db
from gallery.dependencies import get_storage
from gallery.services.gallery import SortMode, list_approved, serialize_photo, sort_photos
from gallery.services.storage import BlobStore
from gallery.services.submission import Submission, submit_photo
from gallery.utils.response import success_response

router = APIRouter(prefix="/photos", tags=["photos"])


@router.post("", status_code=201)
async def create_submission(
    title: str = Form(default=""),
    location: str = Form(default=""),
    tags: list[str] = Form(default=[]),
    consent: bool = Form(default=False),
    file: UploadFile | None = File(default=None),
    db: AsyncSession = Depends(get_db),
    store: BlobStore = Depends(get_storage),
):
    submission = Submission(title=title, location=location, tags=tags, consent=consent)
    if file is not None and file.filename:
        submission.filename = file.filename
        submission.content_type = file.content_type
        # One byte past the limit is enough for the size check to fail.
        submission.data = await file.read(settings.max_upload_bytes + 1)

    photo = await submit_photo(db, store, submission)
    return success_response(
        data=serialize_photo(photo, store),
        message="Your photo is in the review queue.",
    )


@router.get("")
async def get_gallery(
    sort: str = SortMode.NEWEST.value,
    db: AsyncSession = Depends(get_read_db),
    store: BlobStore = Depends(get_storage),
):
    photos = sort_photos(await list_approved(db), sort)
    return success_response(data=[serialize_photo(p, store) for p in photos])
