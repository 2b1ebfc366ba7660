"""Admin authentication schemas."""
from pydantic import BaseModel, Field


class AuthRequest(BaseModel):
    """Body of a call to the admin auth endpoint.

    Which fields are required depends on ``action``; the service checks them
    so that each action can report its own message.
    """

    action: str
    username: str | None = None
    password: str | None = None
    new_password: str | None = Field(None, alias="newPassword")
    session_token: str | None = Field(None, alias="sessionToken")

    class Config:
        populate_by_name = True


class LoginResponse(BaseModel):
    """Successful login."""

    success: bool = True
    session_token: str = Field(..., serialization_alias="sessionToken")
    expires_at: str = Field(..., serialization_alias="expiresAt")
    message: str = "Login successful"


class InitStatusResponse(BaseModel):
    needs_init: bool = Field(..., serialization_alias="needsInit")


class SessionStatusResponse(BaseModel):
    valid: bool


class SuccessResponse(BaseModel):
    """Generic success response."""

    success: bool = True
    message: str | None = None
