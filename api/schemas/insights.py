"""
Pydantic schemas for AI insight endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class InsightsRequest(BaseModel):
    question: str | None = Field(None, description="Optional question about the dataset")
    search: str = Field(default="", description="Restrict the sample to projects matching this text")
    stage: str | None = Field(None, description="Restrict the sample to one canonical stage")


class InsightsResponse(BaseModel):
    text: str
    available: bool = Field(description="False when no OpenAI API key is configured")
    sample_size: int = Field(description="Records sent as context")
