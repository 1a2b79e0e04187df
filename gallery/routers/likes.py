import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.database import get_db
from gallery.schemas.like import LikeRequest
from gallery.services.likes import MISSING_FIELDS_MESSAGE, like_photo
from gallery.utils.exceptions import AppException
from gallery.utils.response import like_error, like_ok

logger = logging.getLogger(__name__)

INVALID_FIELDS_MESSAGE = "photo_id and anon_fingerprint must be strings"

router = APIRouter(tags=["likes"])


@router.post("/like")
async def like(request: Request, db: AsyncSession = Depends(get_db)):
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse(status_code=400, content=like_error(MISSING_FIELDS_MESSAGE))
    if not isinstance(body, dict):
        return JSONResponse(status_code=400, content=like_error(MISSING_FIELDS_MESSAGE))

    try:
        payload = LikeRequest.model_validate(body)
    except ValidationError:
        return JSONResponse(status_code=400, content=like_error(INVALID_FIELDS_MESSAGE))

    try:
        result = await like_photo(db, payload.photo_id, payload.anon_fingerprint)
    except AppException as e:
        return JSONResponse(status_code=e.status_code, content=like_error(e.message))
    except SQLAlchemyError as e:
        logger.exception("Like failed for photo %s", payload.photo_id)
        return JSONResponse(status_code=500, content=like_error(str(e)))
    except Exception as e:
        logger.exception("Unhandled error liking photo %s", payload.photo_id)
        return JSONResponse(status_code=500, content=like_error(str(e) or "Unknown error"))

    return like_ok(result.incremented, result.like_count)
