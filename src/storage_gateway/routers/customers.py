from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request, Response, status

from storage_gateway.dependencies import form_text, get_customer_service, read_form
from storage_gateway.errors import RequestShapeError
from storage_gateway.schemas import OpaqueFailure, UploadResult
from storage_gateway.services import CustomerService

router = APIRouter()

SERVER_ERROR_RESPONSE = {"description": "Request or backend failure. No body."}


@router.post(
    "/customers",
    response_model=UploadResult,
    response_model_exclude_none=True,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: SERVER_ERROR_RESPONSE},
)
async def add_customer(
    request: Request,
    service: CustomerService = Depends(get_customer_service),
) -> Response:
    """Add a customer from the form fields `name`, `email` and `phone`. No deduplication."""
    try:
        form = await read_form(request)
    except RequestShapeError:
        return OpaqueFailure().to_response()

    result = await service.add_customer(
        name=form_text(form, "name"),
        email=form_text(form, "email"),
        phone=form_text(form, "phone"),
    )
    return result.to_response()


@router.get(
    "/customers",
    response_model=List[Dict[str, Any]],
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: SERVER_ERROR_RESPONSE},
)
async def get_customers(service: CustomerService = Depends(get_customer_service)):
    """Every customer record, in backend query order."""
    result = await service.list_customers()
    if isinstance(result, OpaqueFailure):
        return result.to_response()
    return result
