from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.database import get_read_db
from gallery.services.tags import list_tags
from gallery.utils.response import success_response

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("")
async def get_tags(db: AsyncSession = Depends(get_read_db)):
    return success_response(data=await list_tags(db))
