from pydantic import BaseModel, ConfigDict


class Token(BaseModel):
    token: str


class UserResponse(BaseModel):
    id: str
    email: str

    model_config = ConfigDict(from_attributes=True)
