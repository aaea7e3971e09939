"""
Configuration management utilities for twitter_rest.

Nothing here reads the process environment implicitly: :class:`ConfigManager`
takes the mapping to read from (``os.environ`` by default) and the client only
ever sees the resulting :class:`ClientConfig` and :class:`TwitterCredentials`.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from twitter_rest.exceptions import ConfigurationError

ENV_VAR_MAP = {
    "api_key": "TWITTER_API_KEY",
    "api_secret": "TWITTER_API_SECRET",
    "access_token": "TWITTER_ACCESS_TOKEN",
    "access_token_secret": "TWITTER_ACCESS_TOKEN_SECRET",
    "bearer_token": "TWITTER_BEARER_TOKEN",
}

PROXY_ENV_VARS = ("HTTPS_PROXY", "HTTP_PROXY")
TLS_INSECURE_ENV_VAR = "TLS_INSECURE"


@dataclass(slots=True)
class TwitterCredentials:
    """Credential container supporting OAuth 1.0a user and app-only tokens."""

    api_key: str | None = None
    api_secret: str | None = None
    access_token: str | None = None
    access_token_secret: str | None = None
    bearer_token: str | None = None

    def is_empty(self) -> bool:
        return all(
            value in (None, "")
            for value in (
                self.api_key,
                self.api_secret,
                self.access_token,
                self.access_token_secret,
                self.bearer_token,
            )
        )

    def has_consumer_keys(self) -> bool:
        return bool(self.api_key and self.api_secret)

    def has_user_tokens(self) -> bool:
        return self.has_consumer_keys() and bool(
            self.access_token and self.access_token_secret
        )

    def merge(self, other: "TwitterCredentials") -> "TwitterCredentials":
        """Merge credential sets, preferring non-null values from ``other``."""

        return TwitterCredentials(
            api_key=other.api_key or self.api_key,
            api_secret=other.api_secret or self.api_secret,
            access_token=other.access_token or self.access_token,
            access_token_secret=other.access_token_secret or self.access_token_secret,
            bearer_token=other.bearer_token or self.bearer_token,
        )

    def to_dict(self) -> dict[str, str]:
        return {
            key: value
            for key, value in asdict(self).items()
            if isinstance(value, str) and value
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, str | None]) -> "TwitterCredentials":
        return cls(
            api_key=data.get("api_key"),
            api_secret=data.get("api_secret"),
            access_token=data.get("access_token"),
            access_token_secret=data.get("access_token_secret"),
            bearer_token=data.get("bearer_token"),
        )


class ClientConfig(BaseModel):
    """Transport settings handed to the client constructor."""

    host: str = "api.twitter.com"
    upload_host: str = "upload.twitter.com"
    proxy_url: str | None = None
    insecure_skip_verify: bool = False
    timeout: float | None = Field(default=30.0, gt=0)
    user_agent: str = "twitter-rest"

    model_config = ConfigDict(frozen=True)

    @field_validator("host", "upload_host")
    @classmethod
    def normalise_host(cls, value: str) -> str:
        host = value.strip()
        for scheme in ("https://", "http://"):
            if host.startswith(scheme):
                host = host[len(scheme) :]
        host = host.rstrip("/")
        if not host:
            raise ValueError("host must not be empty")
        return host

    @field_validator("proxy_url")
    @classmethod
    def empty_proxy_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @property
    def base_url(self) -> str:
        return f"https://{self.host}"

    @property
    def upload_url(self) -> str:
        return f"https://{self.upload_host}"


class ConfigManager:
    """Loads credentials and client settings from an explicit environment."""

    def __init__(self, *, env: Mapping[str, str] | None = None) -> None:
        self._env = env if env is not None else os.environ

    def load_credentials(self) -> TwitterCredentials:
        """
        Load credentials from the environment.

        Raises:
            ConfigurationError: when no credentials are available.
        """

        values: dict[str, str | None] = {
            field: self._env.get(env_name) for field, env_name in ENV_VAR_MAP.items()
        }
        credentials = TwitterCredentials.from_mapping(values)
        if credentials.is_empty():
            raise ConfigurationError("Twitter credentials are not configured.")
        return credentials

    def load_client_config(self, **overrides: object) -> ClientConfig:
        """Build a :class:`ClientConfig` from proxy/TLS variables (either case)."""

        settings: dict[str, object] = {
            "proxy_url": self._first_of(PROXY_ENV_VARS),
            "insecure_skip_verify": bool(self._first_of((TLS_INSECURE_ENV_VAR,))),
        }
        settings.update(overrides)
        return ClientConfig(**settings)

    def _first_of(self, names: tuple[str, ...]) -> str | None:
        for name in names:
            value = self._env.get(name.upper()) or self._env.get(name.lower())
            if value:
                return value
        return None
