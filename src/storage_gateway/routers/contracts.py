from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from storage_gateway.dependencies import get_contract_service, read_form, upload_request_from_form
from storage_gateway.errors import RequestShapeError
from storage_gateway.schemas import DetailedFailure, TargetKind, UploadResult
from storage_gateway.services import ContractService

router = APIRouter()


@router.post(
    "/contracts",
    response_model=UploadResult,
    response_model_exclude_none=True,
    responses={status.HTTP_400_BAD_REQUEST: {"description": "Validation or backend failure."}},
)
async def upload_contract(
    request: Request,
    service: ContractService = Depends(get_contract_service),
) -> Response:
    """
    Upload a contract from the multipart field `contractFile`.

    NOTE: contracts keep their original name, so uploading a file with an
    existing name replaces the stored contract.
    """
    try:
        form = await read_form(request)
    except RequestShapeError as e:
        return DetailedFailure(str(e)).to_response()

    try:
        upload = upload_request_from_form(form, "contractFile", TargetKind.DOCUMENT)
        result = await service.upload_contract(upload)
    finally:
        await form.close()
    return result.to_response()


@router.get(
    "/contracts",
    response_model=List[str],
    responses={status.HTTP_400_BAD_REQUEST: {"description": "Backend failure."}},
)
async def get_contracts(service: ContractService = Depends(get_contract_service)):
    """File names in the contract share; sub-directories are left out."""
    result = await service.list_contracts()
    if isinstance(result, DetailedFailure):
        return result.to_response()
    return result
