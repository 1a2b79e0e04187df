"""Passwordless admin sign-in.

A sign-in link carries a short-lived signed token. Following it creates an
``AdminSession`` row and returns a session token; the row is what sign-out
revokes, and its unique ``link_jti`` makes every link single-use.
"""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable
from urllib.parse import urlencode

from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.config import settings
from gallery.models.admin_session import AdminSession
from gallery.services.moderation import AdminIdentity
from gallery.utils.exceptions import AppException, NotAuthenticated

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
MAGIC_TOKEN_TYPE = "magic"
SESSION_TOKEN_TYPE = "session"
CALLBACK_PATH = "/api/v1/auth/callback"

LinkSender = Callable[[str, str], None]


def log_link_sender(email: str, link: str) -> None:
    """Default delivery: write the link to the log for the operator to forward."""
    logger.info("Sign-in link for %s: %s", email, link)


_link_sender: LinkSender = log_link_sender


def set_link_sender(sender: LinkSender) -> LinkSender:
    """Swap the link delivery function, returning the previous one."""
    global _link_sender
    previous = _link_sender
    _link_sender = sender
    return previous


class AuthService:

    @staticmethod
    def _encode(claims: dict, ttl: timedelta) -> str:
        to_encode = claims.copy()
        to_encode["exp"] = datetime.now(timezone.utc) + ttl
        return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)

    @staticmethod
    def _decode(token: str, token_type: str) -> dict | None:
        try:
            payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        except JWTError:
            return None
        if payload.get("typ") != token_type or not payload.get("sub"):
            return None
        return payload

    @staticmethod
    def is_allowed(email: str) -> bool:
        allowed = [e.lower() for e in settings.admin_emails]
        return not allowed or email.lower() in allowed

    @staticmethod
    def create_magic_token(email: str) -> str:
        return AuthService._encode(
            {"sub": email, "typ": MAGIC_TOKEN_TYPE, "jti": str(uuid.uuid4())},
            timedelta(minutes=settings.magic_link_ttl_minutes),
        )

    @staticmethod
    def build_magic_link(token: str) -> str:
        base = settings.public_base_url.rstrip("/")
        return f"{base}{CALLBACK_PATH}?{urlencode({'token': token})}"

    @staticmethod
    def send_magic_link(email: str) -> None:
        if not AuthService.is_allowed(email):
            raise AppException("This email is not allowed to moderate", status_code=403)
        link = AuthService.build_magic_link(AuthService.create_magic_token(email))
        _link_sender(email, link)

    @staticmethod
    async def exchange_magic_token(db: AsyncSession, token: str) -> tuple[str, str]:
        """Turn a sign-in link token into a session token. Returns (token, email)."""
        payload = AuthService._decode(token, MAGIC_TOKEN_TYPE)
        if payload is None or not payload.get("jti"):
            raise NotAuthenticated("Invalid or expired sign-in link")

        email = payload["sub"]
        if not AuthService.is_allowed(email):
            raise AppException("This email is not allowed to moderate", status_code=403)

        session = AdminSession(
            id=str(uuid.uuid4()),
            email=email,
            link_jti=payload["jti"],
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        db.add(session)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise AppException("This sign-in link has already been used", status_code=400)

        logger.info("Admin session %s started for %s", session.id, email)
        access_token = AuthService._encode(
            {"sub": email, "typ": SESSION_TOKEN_TYPE, "sid": session.id},
            timedelta(minutes=settings.session_ttl_minutes),
        )
        return access_token, email

    @staticmethod
    async def resolve_session(db: AsyncSession, token: str | None) -> AdminIdentity | None:
        if not token:
            return None
        payload = AuthService._decode(token, SESSION_TOKEN_TYPE)
        if payload is None or not payload.get("sid"):
            return None

        session = await db.get(AdminSession, payload["sid"])
        if session is None or session.revoked_at is not None or session.email != payload["sub"]:
            return None
        return AdminIdentity(email=session.email, session_id=session.id)

    @staticmethod
    async def sign_out(db: AsyncSession, identity: AdminIdentity) -> None:
        session = await db.get(AdminSession, identity.session_id)
        if session is None or session.revoked_at is not None:
            return
        session.revoked_at = datetime.now(timezone.utc).isoformat()
        await db.commit()
        logger.info("Admin session %s signed out", identity.session_id)
