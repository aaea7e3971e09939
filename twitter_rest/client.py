"""
Twitter REST client: signs requests, sends them and hands back APIResponses.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping
from urllib.parse import quote

import requests
from requests.auth import AuthBase, HTTPBasicAuth

from twitter_rest.auth import bearer_signer, user_signer
from twitter_rest.config import ClientConfig, TwitterCredentials
from twitter_rest.conversions import string_value
from twitter_rest.exceptions import AuthenticationError, ConfigurationError, TransportError
from twitter_rest.response import APIResponse

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth2/token"


def build_session(config: ClientConfig) -> requests.Session:
    """Create a session whose proxy and TLS settings come only from ``config``."""

    session = requests.Session()
    session.trust_env = False
    session.headers["User-Agent"] = config.user_agent
    # APIResponse only knows how to inflate gzip
    session.headers["Accept-Encoding"] = "gzip"
    if config.proxy_url:
        session.proxies = {"http": config.proxy_url, "https": config.proxy_url}
    session.verify = not config.insecure_skip_verify
    if config.insecure_skip_verify:
        logger.warning("SSL cert verification disabled")
    return session


class TwitterClient:
    """
    Sends signed requests to the Twitter REST API.

    User-context (OAuth 1.0a) signing is used while user tokens are set;
    otherwise requests carry an app-only bearer token, fetched on first use
    when none was supplied.
    """

    def __init__(
        self,
        credentials: TwitterCredentials,
        config: ClientConfig | None = None,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._credentials = replace(credentials)
        self._session = session or build_session(self.config)
        self._user_auth: AuthBase | None = (
            user_signer(credentials) if credentials.has_user_tokens() else None
        )
        self._app_token: str | None = credentials.bearer_token or None

    # -- credentials ------------------------------------------------------

    def set_user(self, access_token: str | None, access_token_secret: str | None) -> None:
        """Switch user credentials; ``None`` falls back to app-only auth."""

        self._credentials.access_token = access_token
        self._credentials.access_token_secret = access_token_secret
        self._user_auth = (
            user_signer(self._credentials) if self._credentials.has_user_tokens() else None
        )

    def set_app_token(self, token: str) -> None:
        self._app_token = token

    def get_app_token(self) -> str:
        """Return the current app-only token or ``""``."""

        return self._app_token or ""

    def fetch_app_token(self) -> str:
        """
        Request a new app-only bearer token and store it.

        Raises:
            ConfigurationError: consumer key/secret are missing.
            AuthenticationError: the token endpoint answered with another token type.
            ClassifiedError: the token endpoint returned an error response.
        """

        if not self._credentials.has_consumer_keys():
            raise ConfigurationError("API key and secret are required for app-only auth.")

        auth = HTTPBasicAuth(
            quote(self._credentials.api_key or "", safe=""),
            quote(self._credentials.api_secret or "", safe=""),
        )
        response = self._send(
            "POST",
            self._absolute_url(TOKEN_PATH),
            auth=auth,
            data="grant_type=client_credentials",
            headers={"Content-Type": "application/x-www-form-urlencoded;charset=UTF-8"},
        )
        payload = response.parse()
        if not isinstance(payload, dict):
            raise AuthenticationError("Token endpoint returned no token.")

        token_type = string_value(payload, "token_type")
        if token_type != "bearer":
            raise AuthenticationError(f"Got invalid token type: {token_type}")

        self.set_app_token(string_value(payload, "access_token"))
        return self.get_app_token()

    def signer(self) -> AuthBase:
        """Return the signer for the next request, fetching an app token if needed."""

        if self._user_auth is not None:
            return self._user_auth
        if not self._app_token:
            self.fetch_app_token()
        return bearer_signer(self.get_app_token())

    # -- requests -----------------------------------------------------------

    def send_request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        data: Any = None,
        files: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> APIResponse:
        """
        Sign and send a request. Relative paths are resolved against the API host.

        The returned response has not been read yet; call ``parse`` (or
        ``read_body``) on it exactly once.

        Raises:
            TransportError: the request could not be sent.
        """

        return self._send(
            method,
            self._absolute_url(path),
            auth=self.signer(),
            params=params,
            data=data,
            files=files,
            headers=headers,
        )

    def get(self, path: str, **kwargs: Any) -> APIResponse:
        return self.send_request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> APIResponse:
        return self.send_request("POST", path, **kwargs)

    def close(self) -> None:
        self._session.close()

    def _send(self, method: str, url: str, *, auth: AuthBase, **kwargs: Any) -> APIResponse:
        try:
            response = self._session.request(
                method,
                url,
                auth=auth,
                timeout=self.config.timeout,
                stream=True,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Could not send request: {exc}") from exc

        logger.debug("%s %s -> %s", method, response.url, response.status_code)
        return APIResponse.from_requests(response)

    def _absolute_url(self, path: str) -> str:
        if path.startswith("http"):
            return path
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.config.base_url}{path}"
