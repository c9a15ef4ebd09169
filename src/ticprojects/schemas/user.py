from pydantic import BaseModel, EmailStr, Field


class UserRead(BaseModel):
    """Public identity fields. The password hash is never part of it."""

    id: int
    name: str = Field(validation_alias="username")
    email: EmailStr

    model_config = {"from_attributes": True, "populate_by_name": True}
