from pydantic import BaseModel


class Credentials(BaseModel):
    # Presence is checked by the handlers so missing fields map to a 400
    username: str | None = None
    password: str | None = None


class UserIdentity(BaseModel):
    id: int
    username: str

    model_config = {
        "from_attributes": True,
    }
