"""
Client library for the Twitter REST API.

Requests are signed with tweepy's auth handlers and sent through requests;
responses are decoded by a single-pass JSON decoder into plain Python values
and read through tolerant typed views.
"""

from twitter_rest.client import TwitterClient
from twitter_rest.config import ClientConfig, ConfigManager, TwitterCredentials
from twitter_rest.decoder import decode, unmarshal
from twitter_rest.exceptions import (
    ApiResponseError,
    ClassifiedError,
    DecodeError,
    MissingPaginationCursor,
    RateLimitExceeded,
    ResponseError,
    TransportError,
    TwitterRestError,
)
from twitter_rest.factory import TwitterClientFactory
from twitter_rest.models import (
    CursoredLists,
    ErrorList,
    FieldError,
    Lists,
    MediaResponse,
    SearchResults,
    Timeline,
    Tweet,
    TwitterList,
    User,
)
from twitter_rest.response import APIResponse

__all__ = [
    "APIResponse",
    "ApiResponseError",
    "ClassifiedError",
    "ClientConfig",
    "ConfigManager",
    "CursoredLists",
    "DecodeError",
    "ErrorList",
    "FieldError",
    "Lists",
    "MediaResponse",
    "MissingPaginationCursor",
    "RateLimitExceeded",
    "ResponseError",
    "SearchResults",
    "Timeline",
    "TransportError",
    "Tweet",
    "TwitterClient",
    "TwitterClientFactory",
    "TwitterCredentials",
    "TwitterList",
    "TwitterRestError",
    "User",
    "decode",
    "unmarshal",
]
