"""Classify raw response bodies as service payloads or foreign failures.

A body that does not parse as a service response usually comes from an
intermediary such as a reverse proxy answering with an HTML error page. For
those bodies the status code and text are recovered from the page ``<title>``
when it reads like ``"502 Bad Gateway"``.
"""

from __future__ import annotations

import re

from loguru import logger
from lxml import etree
from lxml import html as lxml_html

from .codec import ResponseShape, deserialize, deserialize_token
from .errors import InvalidResponseError, WireFormatError
from .models.response import OperationResponse, TokenResponse

_STATUS_TITLE = re.compile(r"([0-9]+) (\S.*)", re.DOTALL)


def _as_text(body: str | bytes) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


def extract_gateway_error(body: str | bytes) -> tuple[int | None, str | None]:
    """Return ``(code, message)`` parsed from an HTML page title.

    Both values are ``None`` unless the page has a ``<title>`` made of ASCII
    digits, one space, and text that starts with a non-space character.
    """
    text = _as_text(body)
    if not text.strip():
        return None, None

    try:
        root = lxml_html.fromstring(text.encode("utf-8"))
    except (etree.LxmlError, ValueError):
        return None, None

    title = next(root.iter("title"), None)
    if title is None:
        return None, None

    match = _STATUS_TITLE.fullmatch(title.text_content().strip())
    if match is None:
        return None, None
    return int(match.group(1)), match.group(2)


def create_invalid_response_error(
    body: str | bytes, previous: BaseException | None = None
) -> InvalidResponseError:
    """Build the failure for an unparseable body, chained to ``previous``."""
    code, message = extract_gateway_error(body)
    error = InvalidResponseError(_as_text(body), code_error=code, message_error=message)
    error.__cause__ = previous
    return error


def classify(body: str | bytes, shape: ResponseShape) -> OperationResponse:
    """Return the parsed response or raise `InvalidResponseError`."""
    try:
        return deserialize(body, shape)
    except WireFormatError as exc:
        error = create_invalid_response_error(body, exc)
        logger.warning(
            f"Discarding malformed {shape.name.lower()} response "
            f"(gateway code={error.code_error}, message={error.message_error})"
        )
        raise error from exc


def classify_token(body: str | bytes) -> TokenResponse:
    try:
        return deserialize_token(body)
    except WireFormatError as exc:
        error = create_invalid_response_error(body, exc)
        logger.warning(
            f"Discarding malformed token response "
            f"(gateway code={error.code_error}, message={error.message_error})"
        )
        raise error from exc
