"""API router for project API key management."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....core.dependencies import get_api_key_service
from ....domain.models.api_key import ApiKey
from ....services.api_key_service import (
    ApiKeyNotFoundError,
    ApiKeyService,
    ApiKeyServiceError,
    format_cost,
    format_tokens,
    mask_api_key,
)
from ..schemas.api_key_schemas import (
    ApiKeyCheckRequest,
    ApiKeyCheckResponse,
    ApiKeyResponse,
    ApiKeyUsageResponse,
    CreateApiKeyRequest,
    CreateApiKeyResponse,
    DailyUsageResponse,
    ListApiKeysResponse,
    UpdateApiKeyRequest,
    UsageStatsResponse,
)

router = APIRouter(prefix="/api", tags=["API Keys"])


def _to_response(api_key: ApiKey) -> ApiKeyResponse:
    return ApiKeyResponse(
        id=api_key.id,
        name=api_key.name,
        key_preview=mask_api_key(api_key.api_key),
        project_id=api_key.project_id,
        organization_id=api_key.organization_id,
        created_at=api_key.created_at,
        last_used=api_key.last_used,
        is_active=api_key.is_active,
        usage=ApiKeyUsageResponse(
            requests=api_key.usage.requests,
            tokens=api_key.usage.tokens,
            cost=api_key.usage.cost,
        ),
    )


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="API key not found")


@router.post(
    "/projects/{project_id}/api-keys",
    response_model=CreateApiKeyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_api_key(
    project_id: str,
    request: CreateApiKeyRequest,
    api_key_service: ApiKeyService = Depends(get_api_key_service),
) -> CreateApiKeyResponse:
    """Create a new API key."""
    try:
        api_key = await api_key_service.create(
            name=request.name,
            project_id=project_id,
            organization_id=request.organization_id,
        )
    except ApiKeyServiceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return CreateApiKeyResponse(**_to_response(api_key).model_dump(), key=api_key.api_key)


@router.get("/projects/{project_id}/api-keys", response_model=ListApiKeysResponse)
async def list_api_keys(
    project_id: str,
    api_key_service: ApiKeyService = Depends(get_api_key_service),
) -> ListApiKeysResponse:
    """List all API keys of a project."""
    items = [_to_response(api_key) for api_key in await api_key_service.list(project_id)]
    return ListApiKeysResponse(items=items, count=len(items))


@router.post("/api-keys/test", response_model=ApiKeyCheckResponse)
async def test_api_key(
    request: ApiKeyCheckRequest,
    api_key_service: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeyCheckResponse:
    return ApiKeyCheckResponse(valid=await api_key_service.test_api_key(request.api_key))


@router.get("/api-keys/{api_key_id}", response_model=ApiKeyResponse)
async def get_api_key(
    api_key_id: str,
    api_key_service: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeyResponse:
    api_key = await api_key_service.get(api_key_id)
    if api_key is None:
        raise _not_found()
    return _to_response(api_key)


@router.patch("/api-keys/{api_key_id}", response_model=ApiKeyResponse)
async def update_api_key(
    api_key_id: str,
    request: UpdateApiKeyRequest,
    api_key_service: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeyResponse:
    """Rename or enable/disable an API key."""
    try:
        api_key = await api_key_service.update(
            api_key_id, name=request.name, is_active=request.is_active
        )
    except ApiKeyNotFoundError as exc:
        raise _not_found() from exc
    return _to_response(api_key)


@router.delete("/api-keys/{api_key_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_api_key(
    api_key_id: str,
    api_key_service: ApiKeyService = Depends(get_api_key_service),
) -> None:
    """Delete an API key."""
    try:
        await api_key_service.delete(api_key_id)
    except ApiKeyNotFoundError as exc:
        raise _not_found() from exc


@router.get("/api-keys/{api_key_id}/usage", response_model=UsageStatsResponse)
async def get_usage_stats(
    api_key_id: str,
    days: int = Query(default=30, ge=1, le=365),
    api_key_service: ApiKeyService = Depends(get_api_key_service),
) -> UsageStatsResponse:
    try:
        stats = await api_key_service.get_usage_stats(api_key_id, days=days)
    except ApiKeyNotFoundError as exc:
        raise _not_found() from exc

    return UsageStatsResponse(
        total_requests=stats.total_requests,
        total_tokens=stats.total_tokens,
        total_cost=stats.total_cost,
        total_cost_display=format_cost(stats.total_cost),
        total_tokens_display=format_tokens(stats.total_tokens),
        daily_usage=[
            DailyUsageResponse(
                date=day.date,
                requests=day.requests,
                tokens=day.tokens,
                cost=day.cost,
            )
            for day in stats.daily_usage
        ],
    )
