"""Request models for ATOL Online v4 receipt operations.

Field declaration order is the order fields are written to the wire. Every
optional field defaults to ``None`` and is left out of the serialized body
while unset.
"""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from enum import IntEnum, StrEnum
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

TIMESTAMP_FORMAT = "%d.%m.%Y %H:%M:%S"

_PLAIN_NUMBER = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")


def _amount_to_text(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float | Decimal):
        return format(Decimal(str(value)), "f")
    return value


def _amount_to_number(value: str) -> int | float | str:
    """Write plain decimal text as a JSON number, anything else unchanged.

    Text a float cannot hold exactly is written unchanged as well.
    """
    if _PLAIN_NUMBER.fullmatch(value) is None:
        return value
    number = Decimal(value)
    if number == number.to_integral_value():
        return int(number)
    as_float = float(number)
    if Decimal(repr(as_float)) != number:
        return value
    return as_float


# Amounts are kept as text so callers control rounding; the service expects numbers.
Amount = Annotated[str, BeforeValidator(_amount_to_text), PlainSerializer(_amount_to_number)]


def current_timestamp() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


class Sno(StrEnum):
    """Taxation system of the selling company."""

    OSN = "osn"
    USN_INCOME = "usn_income"
    USN_INCOME_OUTCOME = "usn_income_outcome"
    ENVD = "envd"
    ESN = "esn"
    PATENT = "patent"


class VatType(StrEnum):
    NONE = "none"
    VAT0 = "vat0"
    VAT10 = "vat10"
    VAT18 = "vat18"
    VAT20 = "vat20"
    VAT110 = "vat110"
    VAT118 = "vat118"
    VAT120 = "vat120"


class PaymentMethod(StrEnum):
    FULL_PREPAYMENT = "full_prepayment"
    PREPAYMENT = "prepayment"
    ADVANCE = "advance"
    FULL_PAYMENT = "full_payment"
    PARTIAL_PAYMENT = "partial_payment"
    CREDIT = "credit"
    CREDIT_PAYMENT = "credit_payment"


class PaymentObject(StrEnum):
    COMMODITY = "commodity"
    EXCISE = "excise"
    JOB = "job"
    SERVICE = "service"
    GAMBLING_BET = "gambling_bet"
    GAMBLING_PRIZE = "gambling_prize"
    LOTTERY = "lottery"
    LOTTERY_PRIZE = "lottery_prize"
    INTELLECTUAL_ACTIVITY = "intellectual_activity"
    PAYMENT = "payment"
    AGENT_COMMISSION = "agent_commission"
    COMPOSITE = "composite"
    ANOTHER = "another"


class PaymentType(IntEnum):
    """Settlement type code: 0 cash, 1 electronic, 2 prepayment, 3 credit, 4 other."""

    CASH = 0
    ELECTRONIC = 1
    PREPAID = 2
    CREDIT = 3
    OTHER = 4


class CorrectionType(StrEnum):
    SELF = "self"
    INSTRUCTION = "instruction"


class _WireModel(BaseModel):
    model_config = ConfigDict(validate_assignment=True)


class ServiceRequest(_WireModel):
    callback_url: str | None = Field(None, description="URL notified when processing completes")


class ClientRequest(_WireModel):
    email: str | None = None
    phone: str | None = None
    name: str | None = None
    inn: str | None = None


class CompanyRequest(_WireModel):
    email: str | None = None
    sno: Sno | None = None
    inn: str | None = None
    payment_address: str | None = None


class VatRequest(_WireModel):
    type: VatType | None = None
    sum: Amount | None = None


class PaymentRequest(_WireModel):
    type: PaymentType | None = None
    sum: Amount | None = None


class ItemRequest(_WireModel):
    name: str | None = Field(None, max_length=128)
    price: Amount | None = None
    quantity: Amount | None = None
    sum: Amount | None = None
    measurement_unit: str | None = None
    payment_method: PaymentMethod | None = None
    payment_object: PaymentObject | None = None
    vat: VatRequest | None = None


class ReceiptRequest(_WireModel):
    client: ClientRequest | None = None
    company: CompanyRequest | None = None
    items: list[ItemRequest] | None = None
    payments: list[PaymentRequest] | None = None
    vats: list[VatRequest] | None = None
    total: Amount | None = None


class CorrectionInfoRequest(_WireModel):
    type: CorrectionType | None = None
    base_date: str | None = Field(None, description="Date of the corrected document, dd.mm.yyyy")
    base_number: str | None = None


class CorrectionRequest(_WireModel):
    company: CompanyRequest | None = None
    correction_info: CorrectionInfoRequest | None = None
    payments: list[PaymentRequest] | None = None
    vats: list[VatRequest] | None = None


class PaymentReceiptRequest(_WireModel):
    """Body of a sell, sell_refund, buy or buy_refund operation."""

    kind: ClassVar[str] = "payment_receipt"

    external_id: str | None = Field(None, description="Caller-assigned operation identifier")
    receipt: ReceiptRequest | None = None
    timestamp: str = Field(default_factory=current_timestamp)
    service: ServiceRequest | None = None


class CorrectionReceiptRequest(_WireModel):
    """Body of a sell_correction or buy_correction operation."""

    kind: ClassVar[str] = "correction_receipt"

    external_id: str | None = Field(None, description="Caller-assigned operation identifier")
    correction: CorrectionRequest | None = None
    timestamp: str = Field(default_factory=current_timestamp)
    service: ServiceRequest | None = None


OperationRequest = PaymentReceiptRequest | CorrectionReceiptRequest

OPERATION_REQUEST_TYPES: tuple[type[BaseModel], ...] = (
    PaymentReceiptRequest,
    CorrectionReceiptRequest,
)
