"""Error types raised by the ATOL Online client."""

from __future__ import annotations


class AtolOnlineError(Exception):
    """Base class for every error raised by this package."""


class WireFormatError(AtolOnlineError, ValueError):
    """A body does not conform to the expected wire shape.

    Raised by the codec and always converted into `InvalidResponseError`
    before it reaches a caller of the facade.
    """


class InvalidResponseError(AtolOnlineError):
    """The service returned something that is not a valid response.

    Attributes:
        response: Raw body as received from the transport
        code_error: Status code extracted from a gateway error page, if any
        message_error: Status text extracted from a gateway error page, if any
    """

    def __init__(
        self,
        response: str,
        code_error: int | None = None,
        message_error: str | None = None,
    ) -> None:
        self.response = response
        self.code_error = code_error
        self.message_error = message_error
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.code_error is not None:
            return f"Invalid ATOL Online response: {self.code_error} {self.message_error}"
        return "Invalid ATOL Online response"


class AuthenticationError(AtolOnlineError):
    """The token endpoint refused the configured credentials."""

    def __init__(self, code: int | None, text: str) -> None:
        self.code = code
        self.text = text
        super().__init__(f"ATOL Online authentication failed ({code}): {text}")


class ApiNotCreatedError(AtolOnlineError, RuntimeError):
    """`get_api()` was called before `create_api()`."""
