"""Gateway configuration and chat value objects for text generation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional


@dataclass(slots=True)
class GatewayConfig:
    api_key: str
    model: str = "gpt-4"
    temperature: float = 0.7
    max_tokens: int = 2000

    def merged(self, **changes: Any) -> "GatewayConfig":
        return replace(self, **{key: value for key, value in changes.items() if value is not None})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "apiKey": self.api_key,
            "model": self.model,
            "temperature": self.temperature,
            "maxTokens": self.max_tokens,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GatewayConfig":
        return cls(
            api_key=data["apiKey"],
            model=data.get("model") or "gpt-4",
            temperature=float(data.get("temperature", 0.7)),
            max_tokens=int(data.get("maxTokens", 2000)),
        )


@dataclass(slots=True)
class ChatMessage:
    role: str
    content: str


@dataclass(slots=True)
class TokenUsage:
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass(slots=True)
class ChatReply:
    content: str
    usage: Optional[TokenUsage] = None


@dataclass(slots=True)
class PlagiarismReport:
    """Uniqueness score is a random placeholder, not derived from the text."""

    uniqueness_score: int
    report: str
