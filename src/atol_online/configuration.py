"""Connection settings for the ATOL Online API."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from omegaconf import OmegaConf
from pydantic import BaseModel, ConfigDict, Field

from .models.request import Sno

PRODUCTION_URL = "https://online.atol.ru/possystem/v4/"
TEST_URL = "https://testonline.atol.ru/possystem/v4/"

CONFIG_PATH_ENV = "ATOL_ONLINE_CONFIG_PATH"
_KEY_PREFIX = "ATOL_"


@runtime_checkable
class ConfigurationInterface(Protocol):
    """What the API client needs to know about a connection."""

    login: str | None
    password: str | None
    group_code: str | None
    timeout_seconds: float
    token_ttl_seconds: int

    @property
    def api_url(self) -> str: ...


def _candidate_paths(raw: Path) -> tuple[Path, ...]:
    if raw.is_absolute():
        return (raw,)
    return (Path.cwd() / raw,)


def _resolve_config_location(path: Path | str, *, source: str) -> Path:
    raw = Path(path).expanduser()
    for candidate in _candidate_paths(raw):
        if candidate.is_file():
            return candidate.resolve()
    checked = "\n".join(str(candidate) for candidate in _candidate_paths(raw))
    raise FileNotFoundError(f"Config file not found for {source}: {raw}\nChecked:\n{checked}")


def _load_normalized_config(location: Path) -> dict[str, Any]:
    raw_config = OmegaConf.load(location)
    config = OmegaConf.to_container(raw_config, resolve=True)
    if not isinstance(config, dict):
        raise ValueError("ATOL Online config file must contain a mapping of settings.")

    normalized: dict[str, Any] = {}
    for key, value in config.items():
        name = str(key).upper()
        if name.startswith(_KEY_PREFIX):
            name = name[len(_KEY_PREFIX) :]
        normalized[name.lower()] = value
    return normalized


class Connection(BaseModel):
    """Credentials and endpoint of one ATOL Online cash-register group.

    A fresh instance is empty; fields can be assigned one by one and are
    validated on assignment.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    login: str | None = Field(None, description="Integrator login")
    password: str | None = Field(None, description="Integrator password")
    group_code: str | None = Field(None, description="Cash-register group code")
    inn: str | None = Field(None, description="Seller tax number")
    sno: Sno | None = Field(None, description="Seller taxation system")
    payment_address: str | None = Field(None, description="Place of settlement")
    company_email: str | None = None
    callback_url: str | None = None
    test_mode: bool = Field(False, description="Send operations to the test environment")
    base_url: str | None = Field(None, description="Override of the environment URL")
    timeout_seconds: float = Field(30.0, gt=0)
    token_ttl_seconds: int = Field(86_400, gt=0, description="Lifetime of an auth token")

    @property
    def api_url(self) -> str:
        if self.base_url:
            return self.base_url.rstrip("/") + "/"
        return TEST_URL if self.test_mode else PRODUCTION_URL

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> Connection:
        """Load a connection from YAML, ``conf/atol.yml`` by default.

        ``ATOL_ONLINE_CONFIG_PATH`` takes precedence over ``path``. Keys are
        case-insensitive and may carry an ``ATOL_`` prefix.
        """
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if env_path:
            location = _resolve_config_location(env_path, source=CONFIG_PATH_ENV)
        elif path is not None:
            location = _resolve_config_location(path, source="path")
        else:
            location = _resolve_config_location("conf/atol.yml", source="default")

        return cls(**_load_normalized_config(location))
