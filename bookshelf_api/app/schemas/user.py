"""
Pydantic models for user data.

Defines schemas for registering users, logging in and reading user
information.  Request fields are optional at the schema level so that a
missing field reaches the service, which reports it with a single
readable ``ValidationError`` message.  ``UserRead`` never includes the
password hash.
"""

from typing import Optional

from pydantic import Field

from .common import CamelModel


class UserCreate(CamelModel):
    """Schema for registering a user."""

    username: Optional[str] = Field(None, examples=["bilbo"])
    email: Optional[str] = Field(None, examples=["bilbo@shire.me"])
    password: Optional[str] = Field(None, examples=["strongpassword"])


class UserLogin(CamelModel):
    email: Optional[str] = Field(None, examples=["bilbo@shire.me"])
    password: Optional[str] = Field(None, examples=["strongpassword"])


class UserRead(CamelModel):
    """Schema for reading a user from the API."""

    id: int
    username: str
    email: str
    created_at: Optional[str] = None


class Token(CamelModel):
    token: str
