import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.models.tag import Tag
from gallery.schemas.tag import TagResponse

logger = logging.getLogger(__name__)

DEFAULT_TAGS = ["working", "rings", "veiny", "manicured", "minimal", "tattooed"]


def default_tags() -> list[dict]:
    return [{"id": f"local_{i}", "name": name} for i, name in enumerate(DEFAULT_TAGS)]


async def list_tags(db: AsyncSession) -> list[dict]:
    """Tags offered on the submission form, falling back to the built-in set."""
    try:
        result = await db.execute(select(Tag).order_by(Tag.name))
        tags = result.scalars().all()
    except SQLAlchemyError as e:
        logger.warning("Could not load tags, using defaults: %s", e)
        return default_tags()

    if not tags:
        return default_tags()
    return [TagResponse.model_validate(t).model_dump() for t in tags]
