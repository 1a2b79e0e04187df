import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.models.tag import Tag
from gallery.services.tags import DEFAULT_TAGS


SEED_TAGS = [
    {"id": str(uuid.uuid5(uuid.NAMESPACE_DNS, f"tag-{name}")), "name": name}
    for name in DEFAULT_TAGS
]


async def seed_data(session: AsyncSession) -> None:
    result = await session.execute(select(Tag).limit(1))
    if result.scalars().first() is not None:
        return

    for t in SEED_TAGS:
        session.add(Tag(**t))

    await session.commit()
