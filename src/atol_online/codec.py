"""JSON wire codec for ATOL Online requests and responses."""

from __future__ import annotations

from enum import Enum

from pydantic import ValidationError

from .errors import WireFormatError
from .models.request import OPERATION_REQUEST_TYPES, OperationRequest
from .models.response import OperationResponse, TokenResponse


class ResponseShape(Enum):
    """Body layouts the service answers with.

    Each value lists the top-level keys the layout may carry.
    """

    OPERATION = frozenset({"uuid", "timestamp", "status", "error"})
    CHECK_STATUS = frozenset(
        {
            "uuid",
            "timestamp",
            "status",
            "error",
            "payload",
            "group_code",
            "daemon_code",
            "device_code",
            "external_id",
            "callback_url",
        }
    )

    @property
    def fields(self) -> frozenset[str]:
        return self.value


def serialize(request: OperationRequest) -> str:
    """Return the compact JSON body for an operation request.

    Unset fields are omitted and amounts are written as numbers.
    """
    if not isinstance(request, OPERATION_REQUEST_TYPES):
        raise TypeError(f"Unsupported operation request: {type(request).__name__}")
    return request.model_dump_json(exclude_none=True)


def deserialize(text: str | bytes, shape: ResponseShape) -> OperationResponse:
    """Parse a response body against ``shape``.

    Raises:
        WireFormatError: If the body is not JSON or does not match the shape
    """
    try:
        return OperationResponse.model_validate_json(
            text, context={"allowed_fields": shape.fields}
        )
    except ValidationError as exc:
        raise WireFormatError(
            f"Body does not match the {shape.name.lower()} response shape"
        ) from exc


def deserialize_token(text: str | bytes) -> TokenResponse:
    try:
        return TokenResponse.model_validate_json(text)
    except ValidationError as exc:
        raise WireFormatError("Body does not match the token response shape") from exc
