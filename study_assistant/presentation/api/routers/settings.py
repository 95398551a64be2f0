"""API router for text generation settings."""

from fastapi import APIRouter, Depends, HTTPException, status

from ....core.dependencies import get_generation_settings
from ....services.generation_settings import GatewayNotConfiguredError, GenerationSettingsService
from ..schemas.settings_schemas import (
    OpenAIConfigurationResponse,
    OpenAIConfigureRequest,
    OpenAITestRequest,
    OpenAITestResponse,
)

router = APIRouter(prefix="/api/settings/openai", tags=["Generation Settings"])


@router.get("", response_model=OpenAIConfigurationResponse)
async def get_configuration(
    settings_service: GenerationSettingsService = Depends(get_generation_settings),
) -> OpenAIConfigurationResponse:
    return OpenAIConfigurationResponse(**settings_service.get_configuration())


@router.put("", response_model=OpenAIConfigurationResponse)
async def configure(
    payload: OpenAIConfigureRequest,
    settings_service: GenerationSettingsService = Depends(get_generation_settings),
) -> OpenAIConfigurationResponse:
    """Save the OpenAI key and generation parameters."""
    try:
        await settings_service.configure(
            api_key=payload.api_key,
            model=payload.model,
            temperature=payload.temperature,
            max_tokens=payload.max_tokens,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return OpenAIConfigurationResponse(**settings_service.get_configuration())


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_configuration(
    settings_service: GenerationSettingsService = Depends(get_generation_settings),
) -> None:
    await settings_service.clear()


@router.post("/test", response_model=OpenAITestResponse)
async def test_connection(
    payload: OpenAITestRequest,
    settings_service: GenerationSettingsService = Depends(get_generation_settings),
) -> OpenAITestResponse:
    """Check the given key, or the saved one, against the model listing endpoint."""
    if payload.api_key is not None and not payload.api_key.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Введите API ключ")
    try:
        success = await settings_service.test_connection(payload.api_key)
    except GatewayNotConfiguredError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if success:
        return OpenAITestResponse(success=True, message="Подключение успешно")
    return OpenAITestResponse(
        success=False, message="Неверный API ключ или проблема с доступом"
    )
