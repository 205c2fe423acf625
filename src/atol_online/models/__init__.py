"""Typed request and response models for the ATOL Online v4 API."""

from .request import (
    OPERATION_REQUEST_TYPES,
    TIMESTAMP_FORMAT,
    ClientRequest,
    CompanyRequest,
    CorrectionInfoRequest,
    CorrectionReceiptRequest,
    CorrectionRequest,
    CorrectionType,
    ItemRequest,
    OperationRequest,
    PaymentMethod,
    PaymentObject,
    PaymentReceiptRequest,
    PaymentRequest,
    PaymentType,
    ReceiptRequest,
    ServiceRequest,
    Sno,
    VatRequest,
    VatType,
)
from .response import (
    OperationResponse,
    ReceiptPayload,
    ResponseStatus,
    ServiceError,
    TokenResponse,
)

__all__ = [
    "OPERATION_REQUEST_TYPES",
    "TIMESTAMP_FORMAT",
    "ClientRequest",
    "CompanyRequest",
    "CorrectionInfoRequest",
    "CorrectionReceiptRequest",
    "CorrectionRequest",
    "CorrectionType",
    "ItemRequest",
    "OperationRequest",
    "OperationResponse",
    "PaymentMethod",
    "PaymentObject",
    "PaymentReceiptRequest",
    "PaymentRequest",
    "PaymentType",
    "ReceiptPayload",
    "ReceiptRequest",
    "ResponseStatus",
    "ServiceError",
    "ServiceRequest",
    "Sno",
    "TokenResponse",
    "VatRequest",
    "VatType",
]
