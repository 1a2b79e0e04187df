from pydantic import BaseModel, EmailStr


class MagicLinkRequest(BaseModel):
    email: EmailStr


class SessionToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    email: str


class SessionInfo(BaseModel):
    email: str
