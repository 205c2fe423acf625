"""HTTP client for ATOL Online v4 receipt operations."""

from __future__ import annotations

import json
import time
from enum import StrEnum

import httpx
from loguru import logger

from .classifier import classify, classify_token
from .codec import ResponseShape, serialize
from .configuration import ConfigurationInterface
from .errors import AuthenticationError
from .models.request import CorrectionReceiptRequest, OperationRequest, PaymentReceiptRequest
from .models.response import OperationResponse


class Operation(StrEnum):
    SELL = "sell"
    SELL_REFUND = "sell_refund"
    BUY = "buy"
    BUY_REFUND = "buy_refund"
    SELL_CORRECTION = "sell_correction"
    BUY_CORRECTION = "buy_correction"


_REQUEST_TYPES: dict[Operation, type[OperationRequest]] = {
    Operation.SELL: PaymentReceiptRequest,
    Operation.SELL_REFUND: PaymentReceiptRequest,
    Operation.BUY: PaymentReceiptRequest,
    Operation.BUY_REFUND: PaymentReceiptRequest,
    Operation.SELL_CORRECTION: CorrectionReceiptRequest,
    Operation.BUY_CORRECTION: CorrectionReceiptRequest,
}


class AtolOnlineApi:
    """Register receipts and poll their status for one cash-register group."""

    TOKEN_HEADER = "Token"
    JSON_HEADERS = {"Content-Type": "application/json; charset=utf-8"}

    def __init__(self, client: httpx.Client, connection: ConfigurationInterface) -> None:
        self._client = client
        self._connection = connection
        self._token: tuple[float, str] | None = None

    @property
    def connection(self) -> ConfigurationInterface:
        return self._connection

    def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        body: str | None = None,
    ) -> str:
        """Issue one request and return the raw body, whatever the status code."""
        logger.debug(f"ATOL Online request: {method} {url}")
        response = self._client.request(
            method,
            url,
            headers=headers,
            content=body,
            timeout=self._connection.timeout_seconds,
        )
        logger.debug(f"ATOL Online response status: {response.status_code}")
        return response.text

    def get_token(self) -> str:
        """Return a cached auth token, requesting a new one once it expires."""
        now = time.monotonic()
        cached = self._token
        if cached and now - cached[0] < self._connection.token_ttl_seconds:
            return cached[1]

        if not self._connection.login or not self._connection.password:
            raise ValueError("ATOL Online connection requires both login and password.")

        body = json.dumps(
            {"login": self._connection.login, "pass": self._connection.password},
            ensure_ascii=False,
            separators=(",", ":"),
        )
        raw = self.send("POST", f"{self._connection.api_url}getToken", self.JSON_HEADERS, body)
        response = classify_token(raw)

        if not response.token:
            error = response.error
            raise AuthenticationError(
                error.code if error else None,
                error.text if error else "token missing from response",
            )

        logger.info("Obtained ATOL Online auth token")
        self._token = (now, response.token)
        return response.token

    def clear_token(self) -> None:
        self._token = None

    def sell(self, request: PaymentReceiptRequest) -> OperationResponse:
        return self.register(Operation.SELL, request)

    def sell_refund(self, request: PaymentReceiptRequest) -> OperationResponse:
        return self.register(Operation.SELL_REFUND, request)

    def buy(self, request: PaymentReceiptRequest) -> OperationResponse:
        return self.register(Operation.BUY, request)

    def buy_refund(self, request: PaymentReceiptRequest) -> OperationResponse:
        return self.register(Operation.BUY_REFUND, request)

    def sell_correction(self, request: CorrectionReceiptRequest) -> OperationResponse:
        return self.register(Operation.SELL_CORRECTION, request)

    def buy_correction(self, request: CorrectionReceiptRequest) -> OperationResponse:
        return self.register(Operation.BUY_CORRECTION, request)

    def register(self, operation: Operation, request: OperationRequest) -> OperationResponse:
        """Submit ``request`` as ``operation`` and return the service's answer."""
        expected = _REQUEST_TYPES[operation]
        if not isinstance(request, expected):
            raise TypeError(
                f"Operation {operation.value} expects {expected.__name__}, "
                f"got {type(request).__name__}"
            )

        url = f"{self._connection.api_url}{self._group_code()}/{operation.value}"
        raw = self.send("POST", url, self._auth_headers(), serialize(request))
        response = classify(raw, ResponseShape.OPERATION)
        logger.info(
            f"ATOL Online {operation.value}: external_id={request.external_id}, "
            f"uuid={response.uuid}, status={response.status.value}"
        )
        return response

    def check_status(self, uuid: str) -> OperationResponse:
        """Fetch the processing report of a previously registered operation."""
        url = f"{self._connection.api_url}{self._group_code()}/report/{uuid}"
        raw = self.send("GET", url, self._auth_headers())
        return classify(raw, ResponseShape.CHECK_STATUS)

    def _group_code(self) -> str:
        if not self._connection.group_code:
            raise ValueError("ATOL Online connection requires a group_code.")
        return self._connection.group_code

    def _auth_headers(self) -> dict[str, str]:
        return {**self.JSON_HEADERS, self.TOKEN_HEADER: self.get_token()}
