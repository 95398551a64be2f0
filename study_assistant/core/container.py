from dataclasses import dataclass

from .config import Settings
from ..domain.ports.persistence import KeyValueStore
from ..services.api_key_service import ApiKeyService
from ..services.generation_settings import GenerationSettingsService
from ..services.payment_service import PaymentService
from ..services.subscription_service import SubscriptionService


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    store: KeyValueStore
    subscription_service: SubscriptionService
    payment_service: PaymentService
    api_key_service: ApiKeyService
    generation_settings: GenerationSettingsService
