"""API key domain model for the mock key-management area."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(slots=True)
class ApiKeyUsage:
    requests: int = 0
    tokens: int = 0
    cost: float = 0.0


@dataclass(slots=True)
class ApiKey:
    """
    ApiKey record kept in the local key store.

    Attributes:
        id: Unique identifier
        name: Display name
        api_key: Plaintext secret; mask it before display
        project_id: Owning project
        organization_id: Optional owning organization
        created_at: Creation timestamp
        last_used: Last time the key was used, if ever
        is_active: Whether the key is enabled
        usage: Snapshot of the most recently queried usage window
    """

    id: str
    name: str
    api_key: str
    project_id: str
    created_at: datetime
    organization_id: Optional[str] = None
    last_used: Optional[datetime] = None
    is_active: bool = True
    usage: ApiKeyUsage = field(default_factory=ApiKeyUsage)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "apiKey": self.api_key,
            "projectId": self.project_id,
            "organizationId": self.organization_id,
            "createdAt": self.created_at.isoformat(),
            "lastUsed": self.last_used.isoformat() if self.last_used else None,
            "isActive": self.is_active,
            "usage": {
                "requests": self.usage.requests,
                "tokens": self.usage.tokens,
                "cost": self.usage.cost,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiKey":
        usage = data.get("usage") or {}
        last_used = data.get("lastUsed")
        return cls(
            id=data["id"],
            name=data["name"],
            api_key=data["apiKey"],
            project_id=data["projectId"],
            organization_id=data.get("organizationId"),
            created_at=_parse_timestamp(data["createdAt"]),
            last_used=_parse_timestamp(last_used) if last_used else None,
            is_active=bool(data.get("isActive", True)),
            usage=ApiKeyUsage(
                requests=int(usage.get("requests", 0)),
                tokens=int(usage.get("tokens", 0)),
                cost=float(usage.get("cost", 0.0)),
            ),
        )


@dataclass(slots=True)
class DailyUsage:
    date: str
    requests: int
    tokens: int
    cost: float


@dataclass(slots=True)
class UsageStats:
    total_requests: int
    total_tokens: int
    total_cost: float
    daily_usage: List[DailyUsage]


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
