"""
Request signers built on tweepy's auth handlers.

A signer is a :class:`requests.auth.AuthBase`: given a prepared request it sets
the ``Authorization`` header. Signature computation, nonces and timestamps are
tweepy's (and requests-oauthlib's) business.
"""

from __future__ import annotations

import tweepy
from requests.auth import AuthBase

from twitter_rest.config import TwitterCredentials
from twitter_rest.exceptions import AuthenticationError, ConfigurationError


def user_signer(credentials: TwitterCredentials) -> AuthBase:
    """OAuth 1.0a user-context signer (HMAC-SHA1)."""

    if not credentials.has_user_tokens():
        raise ConfigurationError("API key, secret, access token and secret are required.")

    try:
        handler = tweepy.OAuth1UserHandler(
            credentials.api_key,
            credentials.api_secret,
            credentials.access_token,
            credentials.access_token_secret,
        )
        return handler.apply_auth()
    except tweepy.errors.TweepyException as exc:
        raise AuthenticationError(f"Could not build OAuth 1.0a signer: {exc}") from exc


def bearer_signer(token: str) -> AuthBase:
    """App-only signer for an already issued bearer token."""

    if not token:
        raise ConfigurationError("A bearer token is required for app-only auth.")
    return tweepy.OAuth2BearerHandler(token)
