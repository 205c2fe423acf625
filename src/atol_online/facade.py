"""Single entry point to the ATOL Online client."""

from __future__ import annotations

import threading

import httpx
from loguru import logger

from .api import AtolOnlineApi
from .classifier import classify
from .codec import ResponseShape, serialize
from .configuration import ConfigurationInterface, Connection
from .errors import ApiNotCreatedError
from .models.request import OperationRequest
from .models.response import OperationResponse


class AtolOnline:
    """Serialize requests, classify responses and hold one API client.

    The client cache has a single slot: the first `create_api()` call builds
    the client and every later call returns it, whatever arguments it gets.
    """

    def __init__(self) -> None:
        self._api: AtolOnlineApi | None = None
        self._lock = threading.Lock()

    def create_configuration(self) -> Connection:
        return Connection()

    def serialize_operation_request(self, request: OperationRequest) -> str:
        return serialize(request)

    def deserialize_operation_response(self, response: str | bytes) -> OperationResponse:
        """Parse the answer to a registered operation.

        Raises:
            InvalidResponseError: If the body is not an operation response
        """
        return classify(response, ResponseShape.OPERATION)

    def deserialize_check_status_response(self, response: str | bytes) -> OperationResponse:
        """Parse the answer to a status report request.

        Raises:
            InvalidResponseError: If the body is not a status report
        """
        return classify(response, ResponseShape.CHECK_STATUS)

    def create_api(
        self, client: httpx.Client, connection: ConfigurationInterface
    ) -> AtolOnlineApi:
        with self._lock:
            if self._api is None:
                logger.debug(f"Creating ATOL Online API client for {connection.api_url}")
                self._api = AtolOnlineApi(client, connection)
            return self._api

    def get_api(self) -> AtolOnlineApi:
        if self._api is None:
            raise ApiNotCreatedError("create_api() must be called before get_api().")
        return self._api
