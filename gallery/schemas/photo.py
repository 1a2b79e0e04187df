from pydantic import BaseModel


class PhotoResponse(BaseModel):
    id: str
    title: str | None = None
    location: str | None = None
    image_path: str
    status: str
    like_count: int
    tags: list[str] = []
    created_at: str

    model_config = {"from_attributes": True}
