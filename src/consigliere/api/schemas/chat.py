from __future__ import annotations

from typing import Any, Dict, Literal

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    query: str = Field(..., max_length=500)


class ChatResponse(BaseModel):
    response: str
    query_type: Literal["player", "team", "trade"]
    data: Dict[str, Any] = Field(default_factory=dict)
