from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from storage_gateway.dependencies import get_stats_service
from storage_gateway.schemas import StorageStatsReport
from storage_gateway.services import StatsService

router = APIRouter()


@router.get(
    "/stats",
    response_model=StorageStatsReport,
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "description": "A backend failed; the report is not produced.",
            "content": {"application/json": {"example": {"error": "An error occurred (AccessDenied)"}}},
        },
    },
)
async def get_storage_stats(service: StatsService = Depends(get_stats_service)) -> JSONResponse:
    """
    Counts of customers, images, queued messages and contracts.

    Recomputed on every call. The queue count is the backend's approximate
    figure.
    """
    report = await service.get_storage_stats()
    return JSONResponse(content=report.model_dump(mode="json", by_alias=True))
