"""Request and response bodies of the authentication endpoints."""

from pydantic import BaseModel, Field

from .user import Role


class LoginRequest(BaseModel):
    username: str
    password: str


class GoogleLoginRequest(BaseModel):
    google_token: str = Field(..., min_length=1, description="Google ID token obtained by the frontend")


class AuthResponse(BaseModel):
    success: bool = True
    message: str = "Authentication success"
    token: str
    id: str
    username: str
    role: Role
    profile_picture: str = ""
