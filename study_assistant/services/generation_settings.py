"""Persisted configuration and lifecycle of the text generation gateway."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from ..domain.models.generation import GatewayConfig
from ..domain.ports.persistence import KeyValueStore
from .api_key_service import mask_api_key
from .text_generation import TextGenerationGateway

logger = logging.getLogger(__name__)

GatewayFactory = Callable[[GatewayConfig], TextGenerationGateway]


class GatewayNotConfiguredError(RuntimeError):
    def __init__(self) -> None:
        super().__init__("OpenAI service not initialized. Please provide API key.")


class GenerationSettingsService:
    """Owns the single TextGenerationGateway built from stored or env settings."""

    SETTING_SLOT = "openai_config"

    def __init__(
        self,
        store: KeyValueStore,
        defaults: GatewayConfig,
        *,
        gateway_factory: Optional[GatewayFactory] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self._store = store
        self._defaults = defaults
        self._factory = gateway_factory or (
            lambda config: TextGenerationGateway(config, base_url=base_url)
        )
        self._gateway: Optional[TextGenerationGateway] = None

    def initialize(self) -> None:
        """Build the gateway from the stored record, falling back to env defaults."""
        stored = self._store.get(self.SETTING_SLOT)
        config: Optional[GatewayConfig] = None
        if isinstance(stored, dict) and stored.get("apiKey"):
            try:
                config = GatewayConfig.from_dict(stored)
            except (KeyError, TypeError, ValueError) as exc:
                logger.error("Stored OpenAI configuration is invalid, ignoring it: %s", exc)
        if config is None and self._defaults.api_key:
            config = self._defaults
        if config is not None:
            self._gateway = self._factory(config)
            logger.info("Text generation gateway ready with model %s", config.model)

    @property
    def configured(self) -> bool:
        return self._gateway is not None

    def gateway(self) -> TextGenerationGateway:
        if self._gateway is None:
            raise GatewayNotConfiguredError()
        return self._gateway

    def get_configuration(self) -> Dict[str, Any]:
        config = self._gateway.config if self._gateway else self._defaults
        return {
            "configured": self.configured,
            "model": config.model,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
            "api_key_preview": mask_api_key(config.api_key) if self._gateway else None,
        }

    async def configure(
        self,
        api_key: str,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> GatewayConfig:
        """Persist a new configuration and rebuild the gateway with it."""
        api_key = api_key.strip()
        if not api_key:
            raise ValueError("Введите API ключ")
        base = self._gateway.config if self._gateway else self._defaults
        config = base.merged(
            api_key=api_key, model=model, temperature=temperature, max_tokens=max_tokens
        )
        self._store.set(self.SETTING_SLOT, config.to_dict())
        await self._replace_gateway(self._factory(config))
        logger.info("OpenAI configuration saved (model %s)", config.model)
        return config

    async def clear(self) -> None:
        """Forget the stored configuration and tear the gateway down."""
        self._store.delete(self.SETTING_SLOT)
        await self._replace_gateway(None)
        logger.info("OpenAI configuration cleared")

    async def test_connection(self, api_key: Optional[str] = None) -> bool:
        """Check a candidate key, or the active one when none is given."""
        if api_key is None:
            return await self.gateway().test_connection()
        probe = self._factory(self._defaults.merged(api_key=api_key.strip()))
        try:
            return await probe.test_connection()
        finally:
            await probe.aclose()

    async def aclose(self) -> None:
        await self._replace_gateway(None)

    async def _replace_gateway(self, gateway: Optional[TextGenerationGateway]) -> None:
        previous, self._gateway = self._gateway, gateway
        if previous is not None:
            await previous.aclose()
