from pydantic import BaseModel


class TagResponse(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}
