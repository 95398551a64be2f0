"""Domain models for the study assistant application."""

from .api_key import ApiKey, ApiKeyUsage, DailyUsage, UsageStats
from .generation import (
    ChatMessage,
    ChatReply,
    GatewayConfig,
    PlagiarismReport,
    TokenUsage,
)
from .payment import PaymentData, PaymentResult
from .subscription import Subscription, SubscriptionStatus, observed_status

__all__ = [
    "ApiKey",
    "ApiKeyUsage",
    "ChatMessage",
    "ChatReply",
    "DailyUsage",
    "GatewayConfig",
    "PaymentData",
    "PaymentResult",
    "PlagiarismReport",
    "Subscription",
    "SubscriptionStatus",
    "TokenUsage",
    "UsageStats",
    "observed_status",
]
