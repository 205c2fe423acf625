"""ATOL Online fiscal receipt client."""

from .api import AtolOnlineApi, Operation
from .classifier import extract_gateway_error
from .codec import ResponseShape
from .configuration import ConfigurationInterface, Connection
from .errors import (
    ApiNotCreatedError,
    AtolOnlineError,
    AuthenticationError,
    InvalidResponseError,
    WireFormatError,
)
from .facade import AtolOnline

__all__ = [
    "ApiNotCreatedError",
    "AtolOnline",
    "AtolOnlineApi",
    "AtolOnlineError",
    "AuthenticationError",
    "ConfigurationInterface",
    "Connection",
    "InvalidResponseError",
    "Operation",
    "ResponseShape",
    "WireFormatError",
    "extract_gateway_error",
]
