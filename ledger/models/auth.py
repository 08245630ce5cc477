"""
Account Models

Profiles and sessions returned by the credential store. Password
material never appears on these models; it stays inside the store.
"""

from datetime import date, datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Profile(BaseModel):
    """A registered user as seen by the rest of the application."""
    model_config = ConfigDict(str_strip_whitespace=True)
    
    id: str = Field(
        default_factory=lambda: uuid4().hex,
        description="Opaque user id"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=120,
        description="Display name"
    )
    email: str = Field(
        ...,
        min_length=3,
        max_length=254,
        pattern=r"^[^@\s]+@[^@\s]+$",
        description="Login e-mail (stored lower-case)"
    )
    birth_date: date
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class AuthSession(BaseModel):
    """An authenticated profile plus its session token."""
    
    user: Profile
    token: str = Field(..., min_length=1)
