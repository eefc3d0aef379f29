from datetime import datetime

from pydantic import EmailStr, Field, model_validator

from snapformapi.models.base import CamelModel


class User(CamelModel):
    id: int | None = None
    email: str
    name: str | None = None
    password_hash: str | None = Field(default=None, exclude=True)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserIn(CamelModel):
    email: str
    password: str


class UserRegisterIn(UserIn):
    email: EmailStr
    name: str | None = None
    password: str = Field(min_length=8)


class ProfileUpdateIn(CamelModel):
    name: str = Field(min_length=2)
    email: EmailStr


class PasswordChangeIn(CamelModel):
    current_password: str = Field(min_length=8)
    new_password: str = Field(min_length=8)
    confirm_password: str = Field(min_length=8)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class Token(CamelModel):
    access_token: str
    token_type: str = "bearer"
