from fastapi import Depends, HTTPException, Request, status

from .container import ApplicationContainer
from ..services.generation_settings import GatewayNotConfiguredError


def get_container(request: Request) -> ApplicationContainer:
    container = getattr(request.app.state, "container", None)
    if not container:
        raise RuntimeError("Application container not initialised.")
    return container


def get_subscription_service(container: ApplicationContainer = Depends(get_container)):
    return container.subscription_service


def get_payment_service(container: ApplicationContainer = Depends(get_container)):
    return container.payment_service


def get_api_key_service(container: ApplicationContainer = Depends(get_container)):
    return container.api_key_service


def get_generation_settings(container: ApplicationContainer = Depends(get_container)):
    return container.generation_settings


def get_text_gateway(container: ApplicationContainer = Depends(get_container)):
    try:
        return container.generation_settings.gateway()
    except GatewayNotConfiguredError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
