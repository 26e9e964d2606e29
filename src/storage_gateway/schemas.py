####################################
# --- Request/response schemas --- #
####################################

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, BinaryIO, Dict, List, Optional, Union

from fastapi import status
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field


class TargetKind(str, Enum):
    """Media type of an upload; selects the validation policy."""
    IMAGE = "image"
    DOCUMENT = "document"


@dataclass
class UploadRequest:
    """A file received from a multipart form, ready for validation."""
    file_name: str
    stream: Optional[BinaryIO]
    declared_length: int
    target_kind: TargetKind
    content_type: Optional[str] = None


class UploadResult(BaseModel):
    """Uniform response of the upload, queue and customer write operations."""
    success: bool
    message: str = Field(description="A message about the operation.")
    url: Optional[str] = Field(
        default=None,
        description="Locator of the stored item. Only object-store uploads have one.",
        json_schema_extra={"example": "http://localhost:5000/product-images/3f1c..._shoe.png"},
    )

    model_config = ConfigDict(frozen=True)

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=self.model_dump(exclude_none=True),
        )


class CustomerProfile(BaseModel):
    """A customer record as stored in the customer table."""
    partition_key: str = Field(alias="PartitionKey")
    row_key: str = Field(alias="RowKey")
    name: str = Field(alias="Name")
    email: str = Field(alias="Email")
    phone: str = Field(alias="Phone")
    timestamp: Optional[datetime] = Field(default=None, alias="Timestamp")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "partitionKey": "customers",
                "rowKey": "6a1f3f0e-2a5b-4a53-9f0e-0c6c1d9b8b41",
                "name": "Jane Doe",
                "email": "jane@example.com",
                "phone": "+27 82 555 0100",
                "timestamp": "2024-01-01T12:34:56Z",
            }
        },
    )

    def to_entity(self) -> Dict[str, Any]:
        """Backend representation, keyed by the stored attribute names."""
        entity = self.model_dump(by_alias=True, exclude_none=True)
        if self.timestamp is not None:
            entity["Timestamp"] = self.timestamp.isoformat()
        return entity

    def to_public(self) -> Dict[str, Any]:
        """JSON shape returned by `GET /api/customers`."""
        return {
            "partitionKey": self.partition_key,
            "rowKey": self.row_key,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


class StorageStatsReport(BaseModel):
    """Response model for `GET /api/stats`."""
    customer_count: int = Field(serialization_alias="customerCount")
    image_count: int = Field(serialization_alias="imageCount")
    queue_message_count: int = Field(serialization_alias="queueMessageCount")
    contract_count: int = Field(serialization_alias="contractCount")
    generated_at: datetime = Field(serialization_alias="generatedAt")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "customerCount": 3,
                "imageCount": 2,
                "queueMessageCount": 5,
                "contractCount": 1,
                "generatedAt": "2024-01-01T00:00:00Z",
            }
        },
    )


class ShareEntry(BaseModel):
    """One entry of a file share directory listing."""
    name: str
    is_directory: bool = False


class QueueProperties(BaseModel):
    """Queue metadata reported by the backend."""
    approximate_message_count: int = Field(ge=0)


@dataclass(frozen=True)
class DetailedFailure:
    """Client error that carries the failure text back to the caller."""
    message: str
    status_code: int = status.HTTP_400_BAD_REQUEST

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content={"success": False, "message": self.message},
        )


@dataclass(frozen=True)
class OpaqueFailure:
    """Server error reported by status code only; the detail stays in the logs."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_response(self) -> Response:
        return Response(status_code=self.status_code)


Failure = Union[DetailedFailure, OpaqueFailure]
ListResult = Union[List[str], DetailedFailure]
