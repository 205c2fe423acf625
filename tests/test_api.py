"""Tests for the ATOL Online HTTP client."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator

import httpx
import pytest
import respx

from atol_online import api as api_module
from atol_online.api import AtolOnlineApi, Operation
from atol_online.configuration import TEST_URL, Connection
from atol_online.errors import AuthenticationError, InvalidResponseError
from atol_online.models import (
    CorrectionReceiptRequest,
    PaymentReceiptRequest,
    ReceiptRequest,
    ResponseStatus,
)

TOKEN = "fj45u923j59ju42395iu9423i59243u0"


@pytest.fixture
def connection() -> Connection:
    return Connection(
        login="v4-online-atol-ru",
        password="iGFFuihss",
        group_code="v4-online-atol-ru_4179",
        test_mode=True,
    )


@pytest.fixture
def http_client() -> Iterator[httpx.Client]:
    with httpx.Client() as client:
        yield client


@pytest.fixture
def api(http_client: httpx.Client, connection: Connection) -> AtolOnlineApi:
    return AtolOnlineApi(http_client, connection)


@pytest.fixture
def router() -> Iterator[respx.MockRouter]:
    with respx.mock(assert_all_called=False) as mock_router:
        yield mock_router


@pytest.fixture
def token_route(router: respx.MockRouter, load_fixture: Callable[[str], str]) -> respx.Route:
    return router.post(f"{TEST_URL}getToken").mock(
        return_value=httpx.Response(200, text=load_fixture("token_response_v4.json"))
    )


def _receipt() -> PaymentReceiptRequest:
    return PaymentReceiptRequest(
        external_id="17052917561851307",
        timestamp="29.05.2017 17:56:18",
        receipt=ReceiptRequest(total="300"),
    )


class TestGetToken:
    """Tests for token retrieval and caching."""

    def test_requests_token_with_credentials(
        self, api: AtolOnlineApi, token_route: respx.Route
    ) -> None:
        """Given valid credentials, when `get_token()` runs, then it posts login and pass."""
        assert api.get_token() == TOKEN

        request = token_route.calls.last.request
        assert json.loads(request.content) == {"login": "v4-online-atol-ru", "pass": "iGFFuihss"}
        assert request.headers["Content-Type"].startswith("application/json")

    def test_token_is_cached(self, api: AtolOnlineApi, token_route: respx.Route) -> None:
        """Given a fetched token, when it is requested again, then no new call is made."""
        api.get_token()
        api.get_token()

        assert token_route.call_count == 1

    def test_token_expires(
        self, api: AtolOnlineApi, token_route: respx.Route, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Given a token older than its lifetime, then a fresh one is requested."""
        now = [1_000.0]
        monkeypatch.setattr(api_module.time, "monotonic", lambda: now[0])

        api.get_token()
        now[0] += 86_400 + 1
        api.get_token()

        assert token_route.call_count == 2

    def test_clear_token(self, api: AtolOnlineApi, token_route: respx.Route) -> None:
        """Given a cleared token, then the next call requests a new one."""
        api.get_token()
        api.clear_token()
        api.get_token()

        assert token_route.call_count == 2

    def test_rejected_credentials(
        self,
        api: AtolOnlineApi,
        router: respx.MockRouter,
        load_fixture: Callable[[str], str],
    ) -> None:
        """Given an error from `getToken`, then `AuthenticationError` carries its code."""
        router.post(f"{TEST_URL}getToken").mock(
            return_value=httpx.Response(401, text=load_fixture("token_error_response_v4.json"))
        )

        with pytest.raises(AuthenticationError) as exc_info:
            api.get_token()

        assert exc_info.value.code == 12
        assert exc_info.value.text == "Неверный логин или пароль"

    def test_requires_credentials(self, http_client: httpx.Client) -> None:
        """Given a connection without a password, then `ValueError` is raised."""
        api = AtolOnlineApi(http_client, Connection(login="user", group_code="g"))

        with pytest.raises(ValueError, match="login and password"):
            api.get_token()


class TestOperations:
    """Tests for receipt registration and status reports."""

    def test_sell(
        self,
        api: AtolOnlineApi,
        router: respx.MockRouter,
        token_route: respx.Route,
        load_fixture: Callable[[str], str],
    ) -> None:
        """Given a receipt, when `sell()` runs, then it posts the serialized body with the
        token header and parses the answer."""
        sell_route = router.post(f"{TEST_URL}v4-online-atol-ru_4179/sell").mock(
            return_value=httpx.Response(200, text=load_fixture("success_response_v4_1.json"))
        )

        response = api.sell(_receipt())

        request = sell_route.calls.last.request
        assert request.headers["Token"] == TOKEN
        assert request.content == (
            b'{"external_id":"17052917561851307","receipt":{"total":300},'
            b'"timestamp":"29.05.2017 17:56:18"}'
        )
        assert response.status is ResponseStatus.WAIT
        assert response.uuid == "6b4c1c77-6c0f-4d5a-9a4b-6a4a3a1b8f01"

    @pytest.mark.parametrize(
        "operation", [Operation.SELL_REFUND, Operation.BUY, Operation.BUY_REFUND]
    )
    def test_payment_operations_use_their_path(
        self,
        api: AtolOnlineApi,
        router: respx.MockRouter,
        token_route: respx.Route,
        load_fixture: Callable[[str], str],
        operation: Operation,
    ) -> None:
        """Given a payment operation, then the request goes to its own endpoint."""
        route = router.post(f"{TEST_URL}v4-online-atol-ru_4179/{operation.value}").mock(
            return_value=httpx.Response(200, text=load_fixture("success_response_v4_2.json"))
        )

        getattr(api, operation.value)(_receipt())

        assert route.called

    def test_sell_correction(
        self,
        api: AtolOnlineApi,
        router: respx.MockRouter,
        token_route: respx.Route,
        load_fixture: Callable[[str], str],
    ) -> None:
        """Given a correction receipt, then it is posted to `sell_correction`."""
        route = router.post(f"{TEST_URL}v4-online-atol-ru_4179/sell_correction").mock(
            return_value=httpx.Response(200, text=load_fixture("success_response_v4_1.json"))
        )

        api.sell_correction(CorrectionReceiptRequest(external_id="c1", timestamp="1"))

        assert route.called

    def test_operation_rejects_other_variant(
        self, api: AtolOnlineApi, token_route: respx.Route
    ) -> None:
        """Given a correction receipt, when sent as a sale, then `TypeError` is raised
        before any request."""
        with pytest.raises(TypeError, match="PaymentReceiptRequest"):
            api.register(Operation.SELL, CorrectionReceiptRequest(external_id="c1"))

        assert not token_route.called

    def test_failed_operation_is_returned(
        self,
        api: AtolOnlineApi,
        router: respx.MockRouter,
        token_route: respx.Route,
        load_fixture: Callable[[str], str],
    ) -> None:
        """Given a service error with a 400 status, then the parsed failure is returned."""
        router.post(f"{TEST_URL}v4-online-atol-ru_4179/sell").mock(
            return_value=httpx.Response(400, text=load_fixture("error_response_v4.json"))
        )

        response = api.sell(_receipt())

        assert response.is_failed
        assert response.error is not None
        assert response.error.code == 30

    def test_gateway_page(
        self, api: AtolOnlineApi, router: respx.MockRouter, token_route: respx.Route
    ) -> None:
        """Given a proxy error page, then `InvalidResponseError` carries its status."""
        router.post(f"{TEST_URL}v4-online-atol-ru_4179/sell").mock(
            return_value=httpx.Response(
                504,
                text="<html><head><title>504 Gateway Time-out</title></head></html>",
            )
        )

        with pytest.raises(InvalidResponseError) as exc_info:
            api.sell(_receipt())

        assert exc_info.value.code_error == 504
        assert exc_info.value.message_error == "Gateway Time-out"

    def test_check_status(
        self,
        api: AtolOnlineApi,
        router: respx.MockRouter,
        token_route: respx.Route,
        load_fixture: Callable[[str], str],
    ) -> None:
        """Given a registered uuid, when `check_status()` runs, then the report is fetched
        and parsed."""
        uuid = "a7c3d6a4-3f1d-4ab1-8d2e-0f5a1c2b3d4e"
        route = router.get(f"{TEST_URL}v4-online-atol-ru_4179/report/{uuid}").mock(
            return_value=httpx.Response(200, text=load_fixture("report_response_v4.json"))
        )

        response = api.check_status(uuid)

        assert route.calls.last.request.headers["Token"] == TOKEN
        assert response.status is ResponseStatus.DONE
        assert response.payload is not None
        assert response.payload.fiscal_document_attribute == 3449555941

    def test_requires_group_code(self, http_client: httpx.Client) -> None:
        """Given a connection without a group code, then `ValueError` is raised."""
        api = AtolOnlineApi(http_client, Connection(login="user", password="secret"))

        with pytest.raises(ValueError, match="group_code"):
            api.check_status("uuid")

    def test_network_errors_propagate(
        self, api: AtolOnlineApi, router: respx.MockRouter, token_route: respx.Route
    ) -> None:
        """Given a connection failure, then the transport error is not wrapped."""
        router.post(f"{TEST_URL}v4-online-atol-ru_4179/sell").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        with pytest.raises(httpx.ConnectError):
            api.sell(_receipt())
