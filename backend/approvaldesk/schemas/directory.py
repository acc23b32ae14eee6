from pydantic import BaseModel, EmailStr, Field


class UserRead(BaseModel):
    id: int
    username: str
    full_name: str
    email: str | None

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    full_name: str = Field(min_length=1, max_length=200)
    email: EmailStr | None = None


class RequestTypeRead(BaseModel):
    id: int
    name: str
    description: str | None

    model_config = {"from_attributes": True}


class RequestTypeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=500)
