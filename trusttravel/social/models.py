from __future__ import annotations

from pydantic import BaseModel, Field


class ConnectionRequest(BaseModel):
    source_user: str = Field(..., min_length=1)
    target_user: str = Field(..., min_length=1)
    trust_level: float = Field(default=1.0, gt=0.0, le=1.0)

