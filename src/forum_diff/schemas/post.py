# src/forum_diff/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostUpdate(BaseModel):
    """Schema for editing a post's content."""

    content: str = Field(..., min_length=1, max_length=65535, description="New post content")


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    user_id: int | None
    content: str
    created_at: datetime
    edited_at: datetime | None = None
    edited_user_id: int | None = None

    model_config = ConfigDict(from_attributes=True)
