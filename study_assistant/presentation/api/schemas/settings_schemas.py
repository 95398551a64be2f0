"""Pydantic schemas for generation settings endpoints."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

SupportedModel = Literal["gpt-4", "gpt-4-turbo-preview", "gpt-3.5-turbo"]


class OpenAIConfigureRequest(BaseModel):
    api_key: str = Field(..., min_length=1)
    model: Optional[SupportedModel] = None
    temperature: Optional[float] = Field(None, ge=0, le=2)
    max_tokens: Optional[int] = Field(None, ge=1)


class OpenAIConfigurationResponse(BaseModel):
    configured: bool
    model: str
    temperature: float
    max_tokens: int
    api_key_preview: Optional[str] = None


class OpenAITestRequest(BaseModel):
    api_key: Optional[str] = None


class OpenAITestResponse(BaseModel):
    success: bool
    message: str
