from fastapi import APIRouter, Depends, Request, Response, status

from storage_gateway.dependencies import form_text, get_order_service, read_form
from storage_gateway.errors import RequestShapeError
from storage_gateway.schemas import DetailedFailure, UploadResult
from storage_gateway.services import OrderService

router = APIRouter()


@router.post(
    "/queue/messages",
    response_model=UploadResult,
    response_model_exclude_none=True,
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Missing or empty `message` field."},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "The queue rejected the message. No body."},
    },
)
async def send_queue_message(
    request: Request,
    service: OrderService = Depends(get_order_service),
) -> Response:
    """Send the form field `message` to the order queue as-is."""
    try:
        form = await read_form(request)
    except RequestShapeError as e:
        return DetailedFailure(str(e)).to_response()

    result = await service.send_order_message(form_text(form, "message"))
    return result.to_response()
