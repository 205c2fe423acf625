"""Response models for ATOL Online v4 operation and report endpoints."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator

from .request import TIMESTAMP_FORMAT

TIMESTAMP_PATTERN = r"^[0-9]{2}\.[0-9]{2}\.[0-9]{4} [0-9]{2}:[0-9]{2}:[0-9]{2}$"


class ResponseStatus(StrEnum):
    """Processing state as reported by the service."""

    WAIT = "wait"
    DONE = "done"
    SUCCESS = "success"
    FAIL = "fail"


class ServiceError(BaseModel):
    """Error block of a failed operation.

    ``text`` is kept verbatim, including placeholders such as ``{0}``.
    """

    error_id: str | None = None
    code: int
    type: str
    text: str


class ReceiptPayload(BaseModel):
    """Fiscal attributes of a registered receipt."""

    total: Decimal | None = None
    fns_site: str | None = None
    fn_number: str | None = None
    shift_number: int | None = None
    receipt_datetime: str | None = None
    fiscal_receipt_number: int | None = None
    fiscal_document_number: int | None = None
    ecr_registration_number: str | None = None
    fiscal_document_attribute: int | None = None


class OperationResponse(BaseModel):
    """Result of submitting an operation or checking its status.

    Unknown keys are rejected. When validated with an ``allowed_fields``
    context, keys outside that set are rejected too.
    """

    model_config = ConfigDict(extra="forbid")

    uuid: str | None = None
    timestamp: str = Field(pattern=TIMESTAMP_PATTERN)
    status: ResponseStatus
    error: ServiceError | None = None
    payload: ReceiptPayload | None = None
    group_code: str | None = None
    daemon_code: str | None = None
    device_code: str | None = None
    external_id: str | None = None
    callback_url: str | None = None

    @model_validator(mode="before")
    @classmethod
    def restrict_to_shape(cls, data: Any, info: ValidationInfo) -> Any:
        allowed = (info.context or {}).get("allowed_fields")
        if allowed is None or not isinstance(data, dict):
            return data
        unexpected = sorted(set(data) - set(allowed))
        if unexpected:
            raise ValueError(f"unexpected fields for this response shape: {', '.join(unexpected)}")
        return data

    @property
    def issued_at(self) -> datetime:
        return datetime.strptime(self.timestamp, TIMESTAMP_FORMAT)

    @property
    def is_failed(self) -> bool:
        return self.status is ResponseStatus.FAIL

    @property
    def is_pending(self) -> bool:
        return self.status is ResponseStatus.WAIT


class TokenResponse(BaseModel):
    """Body returned by the ``getToken`` endpoint."""

    token: str | None = None
    error: ServiceError | None = None
    timestamp: str | None = None
