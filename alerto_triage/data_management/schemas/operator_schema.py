"""Operators (users) and caller identities.

Authentication is handled upstream; the pipeline only receives an already
resolved ``CallerIdentity`` (or ``None`` for an anonymous call).
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    USER = "user"
    REPORTER = "reporter"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @property
    def is_admin(self) -> bool:
        return self in (Role.ADMIN, Role.SUPER_ADMIN)


class Operator(BaseModel):
    user_id: str = Field(...)
    name: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    role: Role = Field(default=Role.USER)

    @property
    def is_admin(self) -> bool:
        return self.role.is_admin


class CallerIdentity(BaseModel):
    """Authenticated caller of an inbound request."""

    user_id: str = Field(..., min_length=1)
    role: Role = Field(default=Role.USER)

    @property
    def is_admin(self) -> bool:
        return self.role.is_admin
