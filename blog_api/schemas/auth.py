"""Pydantic schemas for authentication API."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CredentialsRequest(BaseModel):
    """Email and password, as sent to register and login.

    Both fields accept any JSON value. Registration reports missing or
    non-string fields as validation errors and login treats them as bad
    credentials, so neither endpoint answers with a parser error.
    """

    email: Any = Field(None, description="Email address (case-insensitive)")
    password: Any = Field(None, description="Password (minimum 6 characters)")


class TokenResponse(BaseModel):
    """Response with a session token."""

    token: str


class UserResponse(BaseModel):
    """Public user information. Never includes the hash or timestamps."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str


class SessionResponse(BaseModel):
    """Response after logging in through the session endpoint."""

    token: str
    user: UserResponse


class SessionStatusResponse(BaseModel):
    """Who-am-I response for an authenticated caller."""

    user: UserResponse
    authenticated: bool = True


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
