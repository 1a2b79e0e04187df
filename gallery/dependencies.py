from fastapi import Depends, Header, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.config import settings
from gallery.database import get_db
from gallery.services.auth_service import AuthService
from gallery.services.moderation import AdminIdentity
from gallery.services.storage import BlobStore, get_blob_store
from gallery.utils.exceptions import NotAuthenticated

_bearer = HTTPBearer(auto_error=False)


async def verify_api_key(x_api_key: str = Header(default="")) -> None:
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise HTTPException(status_code=403, detail="Invalid or missing API key")


def get_storage() -> BlobStore:
    return get_blob_store()


async def get_optional_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: AsyncSession = Depends(get_db),
) -> AdminIdentity | None:
    token = credentials.credentials if credentials else None
    return await AuthService.resolve_session(db, token)


async def get_current_admin(
    admin: AdminIdentity | None = Depends(get_optional_admin),
) -> AdminIdentity:
    if admin is None:
        raise NotAuthenticated()
    return admin
