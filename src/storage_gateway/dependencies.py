"""FastAPI dependencies: services built from the collaborators on ``app.state``."""

import os
from typing import BinaryIO, Optional

from fastapi import Depends, Request
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from storage_gateway.adapters import Backends
from storage_gateway.errors import RequestShapeError
from storage_gateway.schemas import TargetKind, UploadRequest
from storage_gateway.services import (
    ContractService,
    CustomerService,
    ImageService,
    OrderService,
    StatsService,
)

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def get_backends(request: Request) -> Backends:
    return request.app.state.backends


def get_image_service(backends: Backends = Depends(get_backends)) -> ImageService:
    return ImageService(backends.images)


def get_contract_service(backends: Backends = Depends(get_backends)) -> ContractService:
    return ContractService(backends.contracts)


def get_order_service(backends: Backends = Depends(get_backends)) -> OrderService:
    return OrderService(backends.orders)


def get_customer_service(backends: Backends = Depends(get_backends)) -> CustomerService:
    return CustomerService(backends.customers)


def get_stats_service(backends: Backends = Depends(get_backends)) -> StatsService:
    return StatsService(backends)


async def read_form(request: Request) -> FormData:
    """Parse the request body as form data. Raises RequestShapeError for any other content type or an unparseable body."""
    content_type = request.headers.get("content-type", "")
    if content_type.split(";")[0].strip().lower() not in FORM_CONTENT_TYPES:
        raise RequestShapeError("Invalid content type. Expected form data.")
    try:
        return await request.form()
    except HTTPException as e:
        raise RequestShapeError(f"Malformed form data: {e.detail}") from e
    except MultiPartException as e:
        raise RequestShapeError(f"Malformed form data: {e.message}") from e


def _stream_length(stream: BinaryIO) -> int:
    stream.seek(0, os.SEEK_END)
    length = stream.tell()
    stream.seek(0)
    return length


def upload_request_from_form(form: FormData, field: str, kind: TargetKind) -> UploadRequest:
    """Turn a multipart file field into an UploadRequest; a missing field yields an empty request."""
    item = form.get(field)
    if not isinstance(item, UploadFile):
        return UploadRequest(file_name="", stream=None, declared_length=0, target_kind=kind)

    length: Optional[int] = item.size
    if length is None:
        length = _stream_length(item.file)
    item.file.seek(0)

    return UploadRequest(
        file_name=item.filename or "",
        stream=item.file,
        declared_length=length,
        target_kind=kind,
        content_type=item.content_type,
    )


def form_text(form: FormData, field: str) -> Optional[str]:
    value = form.get(field)
    return value if isinstance(value, str) else None
