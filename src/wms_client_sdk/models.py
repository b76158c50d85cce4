from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class StatusMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: str
    message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status.lower() == "success"


class LoginResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool
    message: str | None = None
    is_authenticated: bool | None = None


class SessionUser(BaseModel):
    model_config = ConfigDict(extra="allow")

    is_authenticated: bool = False
    id: int | str | None = None
    username: str | None = None
    email: str | None = None
    full_name: str | None = None
    groups: List[str] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or "anonymous"
