"""
Pydantic models for stored records and request/response validation.
"""
from typing import List, Optional
from pydantic import BaseModel, Field


class Paste(BaseModel):
    """A stored paste. Time fields are integer milliseconds since epoch."""
    id: str = Field(..., description="8-character lowercase alphanumeric identifier")
    name: str = Field(..., description="Display name")
    content: str = Field(..., description="Paste text content")
    language: str = Field(..., description="Language tag, e.g. text or python")
    created_at: int = Field(..., description="Creation time (ms since epoch)")
    expires_at: int = Field(..., description="Expiry time (ms since epoch)")

    def is_live(self, now_ms: int) -> bool:
        return now_ms < self.expires_at


class PasteCreate(BaseModel):
    """Schema for creating a new paste."""
    # Emptiness is checked by the repository so it surfaces as a 400, not a 422.
    content: str = Field(..., description="Text content (required, non-empty)")
    language: Optional[str] = Field(None, description="Language tag, defaults to text")
    name: Optional[str] = Field(None, description="Display name, generated if omitted")


class PasteList(BaseModel):
    """Schema for the recent pastes listing."""
    pastes: List[Paste] = Field(default_factory=list, description="Newest first")


class ErrorResponse(BaseModel):
    """Schema for error bodies."""
    detail: str


class HealthCheck(BaseModel):
    """Schema for health check response."""
    ok: bool = Field(..., description="Is the application healthy?")
