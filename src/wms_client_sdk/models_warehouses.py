from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Warehouse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    address: str | None = None


class WarehouseCreateRequest(BaseModel):
    name: str
    address: str | None = None


class WarehouseUpdateRequest(BaseModel):
    name: str | None = None
    address: str | None = None
