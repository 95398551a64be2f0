"""Pydantic schemas for subscription API endpoints."""

from datetime import datetime

from pydantic import BaseModel


class SubscriptionResponse(BaseModel):
    """Response schema for subscription data."""

    id: str
    plan_id: str
    plan_name: str
    status: str
    expiry_date: datetime
    auto_renew: bool
    is_active: bool


class ListSubscriptionsResponse(BaseModel):
    items: list[SubscriptionResponse]
    count: int


class PlanResponse(BaseModel):
    """Response schema for available plans."""

    plan_id: str
    plan_name: str
    duration_months: int
