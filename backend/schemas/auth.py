from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import Optional


class UserType(str, Enum):
    ADMIN = "admin"
    MULTIPLE = "multiple"  # reseller holding several lines
    SINGLE = "single"      # one line, identified by mobile number


class LoginRequest(BaseModel):
    user_type: UserType
    username: str = Field(..., min_length=1, max_length=100)
    password: Optional[str] = Field(None, max_length=200)

    @field_validator('username')
    @classmethod
    def strip_username(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('username must not be blank')
        return v


class Principal(BaseModel):
    """The authenticated caller, as carried in the access token."""
    user_type: UserType
    username: str  # login name, or mobile number for single-line users
    display_name: str

    @property
    def is_admin(self) -> bool:
        return self.user_type == UserType.ADMIN


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
    user_type: UserType
    display_name: str
