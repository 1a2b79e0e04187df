from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.database import get_db
from gallery.dependencies import get_current_admin, get_optional_admin
from gallery.schemas.auth import MagicLinkRequest, SessionInfo, SessionToken
from gallery.services.auth_service import AuthService
from gallery.services.moderation import AdminIdentity
from gallery.utils.response import success_response

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/magic-link", status_code=202)
async def request_magic_link(request: MagicLinkRequest):
    AuthService.send_magic_link(request.email)
    return success_response(message="Check your email for a sign-in link")


@router.get("/callback")
async def magic_link_callback(token: str, db: AsyncSession = Depends(get_db)):
    access_token, email = await AuthService.exchange_magic_token(db, token)
    return success_response(
        data=SessionToken(access_token=access_token, email=email).model_dump()
    )


@router.get("/session")
async def get_session(admin: AdminIdentity | None = Depends(get_optional_admin)):
    if admin is None:
        return success_response(data=None)
    return success_response(data=SessionInfo(email=admin.email).model_dump())


@router.post("/sign-out")
async def sign_out(
    admin: AdminIdentity = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    await AuthService.sign_out(db, admin)
    return success_response(message="Signed out")
