from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..domain.models.generation import GatewayConfig
from ..infrastructure.persistence.sqlite import SQLiteKeyValueStore
from ..infrastructure.repositories.api_key_repository import ApiKeyRepository
from ..infrastructure.repositories.subscription_repository import SubscriptionRepository
from ..presentation.api.routers import api_keys as api_keys_router
from ..presentation.api.routers import generation as generation_router
from ..presentation.api.routers import payments as payments_router
from ..presentation.api.routers import settings as settings_router
from ..presentation.api.routers import subscriptions as subscriptions_router
from ..services.api_key_service import ApiKeyService
from ..services.generation_settings import GenerationSettingsService
from ..services.payment_service import PaymentService
from ..services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="Study Assistant", lifespan=_create_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(payments_router.router)
    app.include_router(subscriptions_router.router)
    app.include_router(api_keys_router.router)
    app.include_router(generation_router.router)
    app.include_router(settings_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        container: ApplicationContainer = app.state.container  # type: ignore[attr-defined]
        return {"ok": True, "generation_configured": container.generation_settings.configured}

    return app


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        store = SQLiteKeyValueStore(settings.database_path)
        subscription_service = SubscriptionService(SubscriptionRepository(store))
        payment_service = PaymentService(
            subscription_service,
            processing_delay=settings.payment_processing_delay,
            success_rate=settings.payment_success_rate,
        )
        api_key_service = ApiKeyService(
            ApiKeyRepository(store),
            latency_scale=settings.api_key_latency_scale,
            failure_rate=settings.api_key_failure_rate,
        )
        generation_settings = GenerationSettingsService(
            store,
            GatewayConfig(
                api_key=settings.openai_api_key or "",
                model=settings.openai_model,
                temperature=settings.openai_temperature,
                max_tokens=settings.openai_max_tokens,
            ),
            base_url=settings.openai_base_url,
        )
        generation_settings.initialize()

        app.state.container = ApplicationContainer(  # type: ignore[attr-defined]
            settings=settings,
            store=store,
            subscription_service=subscription_service,
            payment_service=payment_service,
            api_key_service=api_key_service,
            generation_settings=generation_settings,
        )
        logger.info("Study assistant started with store at %s", settings.database_path)

        try:
            yield
        finally:
            await generation_settings.aclose()
            store.close()

    return lifespan
