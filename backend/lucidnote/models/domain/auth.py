"""Auth domain models."""

from datetime import datetime

from pydantic import BaseModel


class Credentials(BaseModel):
    """Email/password pair for sign-up and sign-in."""
    email: str
    password: str


class Session(BaseModel):
    """An authenticated session; the access token is sent as a bearer token."""
    access_token: str
    user_id: str
    email: str
    expires_at: datetime


class Profile(BaseModel):
    id: str
    email: str
    created_at: datetime
