from pydantic import BaseModel


class LikeRequest(BaseModel):
    photo_id: str | None = None
    anon_fingerprint: str | None = None

    # Clients may send numeric ids; they are matched as strings.
    model_config = {"coerce_numbers_to_str": True}
