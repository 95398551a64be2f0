"""Pydantic schemas for API key endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CreateApiKeyRequest(BaseModel):
    """Request schema for creating an API key."""

    name: str = Field(..., min_length=1)
    organization_id: Optional[str] = None


class UpdateApiKeyRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None


class ApiKeyUsageResponse(BaseModel):
    requests: int
    tokens: int
    cost: float


class ApiKeyResponse(BaseModel):
    """Response schema for API key data with the secret masked."""

    id: str
    name: str
    key_preview: str
    project_id: str
    organization_id: Optional[str]
    created_at: datetime
    last_used: Optional[datetime]
    is_active: bool
    usage: ApiKeyUsageResponse


class CreateApiKeyResponse(ApiKeyResponse):
    """Response schema for a freshly created key, the only time the secret is returned."""

    key: str
    message: str = "API key created successfully. Save this key securely, it won't be shown again."


class ListApiKeysResponse(BaseModel):
    """Response schema for listing API keys."""

    items: list[ApiKeyResponse]
    count: int


class DailyUsageResponse(BaseModel):
    date: str
    requests: int
    tokens: int
    cost: float


class UsageStatsResponse(BaseModel):
    total_requests: int
    total_tokens: int
    total_cost: float
    total_cost_display: str
    total_tokens_display: str
    daily_usage: list[DailyUsageResponse]


class ApiKeyCheckRequest(BaseModel):
    api_key: str


class ApiKeyCheckResponse(BaseModel):
    valid: bool
