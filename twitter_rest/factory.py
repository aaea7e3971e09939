"""
Factory for creating Twitter client instances with proper initialization.
"""

from __future__ import annotations

from twitter_rest.client import TwitterClient
from twitter_rest.config import ClientConfig, ConfigManager, TwitterCredentials
from twitter_rest.exceptions import ConfigurationError


class TwitterClientFactory:
    """Factory for creating properly initialized Twitter API clients."""

    @staticmethod
    def create_from_config(config_manager: ConfigManager) -> TwitterClient:
        """
        Create a TwitterClient from environment-backed configuration.

        Args:
            config_manager: ConfigManager reading credentials and proxy/TLS settings

        Returns:
            TwitterClient configured for user-context or app-only auth

        Raises:
            ConfigurationError: If credentials are missing or invalid
        """
        credentials = config_manager.load_credentials()
        config = config_manager.load_client_config()
        return TwitterClientFactory.create_from_credentials(credentials, config)

    @staticmethod
    def create_from_credentials(
        credentials: TwitterCredentials,
        config: ClientConfig | None = None,
    ) -> TwitterClient:
        """
        Create TwitterClient directly from credentials.

        A bearer token alone is enough for app-only calls; otherwise the
        consumer key and secret are required (user tokens optional).

        Raises:
            ConfigurationError: If required credentials are missing
        """
        if not credentials.bearer_token and not credentials.has_consumer_keys():
            raise ConfigurationError("API key and secret (or a bearer token) are required")

        if bool(credentials.access_token) != bool(credentials.access_token_secret):
            raise ConfigurationError("Access token and secret must be provided together")

        return TwitterClient(credentials, config)
