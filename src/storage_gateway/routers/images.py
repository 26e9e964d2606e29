from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from storage_gateway.dependencies import get_image_service, read_form, upload_request_from_form
from storage_gateway.errors import RequestShapeError
from storage_gateway.schemas import DetailedFailure, TargetKind, UploadResult
from storage_gateway.services import ImageService

router = APIRouter()

FAILURE_RESPONSE = {
    "description": "Validation or backend failure, with the reason in `message`.",
    "content": {"application/json": {"example": {"success": False, "message": "File size must be less than 10MB."}}},
}


@router.post(
    "/images",
    response_model=UploadResult,
    response_model_exclude_none=True,
    responses={status.HTTP_400_BAD_REQUEST: FAILURE_RESPONSE},
)
async def upload_image(
    request: Request,
    service: ImageService = Depends(get_image_service),
) -> Response:
    """
    Upload a product image from the multipart field `imageFile`.

    Accepts jpg, jpeg, png, gif, bmp and webp files up to 10 MiB. The stored
    key gets a random prefix, so files with the same name never overwrite each
    other.
    """
    try:
        form = await read_form(request)
    except RequestShapeError as e:
        return DetailedFailure(str(e)).to_response()

    try:
        upload = upload_request_from_form(form, "imageFile", TargetKind.IMAGE)
        result = await service.upload_image(upload)
    finally:
        await form.close()
    return result.to_response()


@router.get(
    "/images",
    response_model=List[str],
    responses={status.HTTP_400_BAD_REQUEST: FAILURE_RESPONSE},
)
async def get_images(service: ImageService = Depends(get_image_service)):
    """URLs of every stored image, in backend order."""
    result = await service.list_images()
    if isinstance(result, DetailedFailure):
        return result.to_response()
    return result
