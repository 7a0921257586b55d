"""
Pydantic models for user data.

Defines the closed set of roles, the registration payload and the
public representation of a user.  Passwords and verification tokens
never leave the service except for the token returned once at
registration, which the client uses to build the verification e-mail.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Roles a user may hold.  Unknown values are rejected at the API boundary."""

    BASE_USER = "base_user"
    ORGANIZER = "organizer"
    ADMINISTRATOR = "administrator"


EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class UserBase(BaseModel):
    """Fields shared by every user representation.

    Accounts created through Google sign-in carry empty ``gender`` and
    ``notification_preference`` values, so the read side does not
    constrain them.
    """

    username: str = Field(..., example="mario_rossi")
    name: str = Field(..., example="Mario Rossi")
    email: str = Field(..., example="mario@example.com")
    gender: str = Field("", example="M")
    notification_preference: str = Field("", example="email")
    role: Role = Field(..., example=Role.BASE_USER)
    profile_picture: str = Field("", example="https://res.cloudinary.com/demo/image/upload/avatar.jpg")


class UserCreate(UserBase):
    """Schema for registering a user.

    ``verification_token`` may be supplied by the client (which then
    e-mails the verification link itself); when omitted the service
    generates one.
    """

    username: str = Field(..., min_length=1, example="mario_rossi")
    name: str = Field(..., min_length=1, example="Mario Rossi")
    email: str = Field(..., pattern=EMAIL_PATTERN, example="mario@example.com")
    gender: str = Field(..., min_length=1, example="M")
    notification_preference: str = Field(..., min_length=1, example="email")
    password: str = Field(..., min_length=1, example="strongpassword")
    verification_token: Optional[str] = Field(None, description="One-time account verification token")


class UserRead(UserBase):
    """Schema for reading a user from the API."""

    id: str
    registered_at: datetime
    verified: bool

    model_config = {
        "from_attributes": True,
    }


class UserRegistered(UserRead):
    """Returned once by the registration endpoint."""

    verification_token: str


class UsernameUpdate(BaseModel):
    username: str = Field(..., min_length=1)


class UserProfile(BaseModel):
    """A user together with the posts they created today."""

    user: UserRead
    posts: List["PostRead"]


from .post import PostRead  # noqa: E402

UserProfile.model_rebuild()
