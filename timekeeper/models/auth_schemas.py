"""Pydantic schemas for authentication."""

from pydantic import BaseModel, EmailStr, Field


class UserRegister(BaseModel):
    """User registration request."""

    email: EmailStr
    password: str = Field(..., min_length=6)
    displayName: str | None = None


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr
    password: str


class Token(BaseModel):
    """JWT token response."""

    accessToken: str
    tokenType: str = "bearer"
    userId: str


class UserResponse(BaseModel):
    """User data response."""

    id: str
    email: str
    displayName: str | None = None
    createdAt: str


class AuthenticatedUser(BaseModel):
    """Client-side identity signal handed to the store."""

    id: str
    email: str | None = None
    accessToken: str
