"""
Typed, read-only views over decoded Twitter payloads.

A view wraps the dict (or list) the decoder produced without copying it, so it
is only as alive as that container. Accessors never trust the payload: a
missing or mistyped field yields the fallback of the matching reader in
:mod:`twitter_rest.conversions` (``""``, ``0``, ``False``, empty collection,
:data:`~twitter_rest.conversions.ZERO_TIME`).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, Iterator, Mapping, Sequence, TypeVar, overload
from urllib.parse import parse_qs

from twitter_rest.conversions import (
    array_value,
    bool_value,
    id_value,
    int32_value,
    int64_value,
    map_value,
    string_value,
    time_value,
)
from twitter_rest.exceptions import MissingPaginationCursor
from twitter_rest.values import Array, Map


class MapView(Mapping[str, Any]):
    """Base class: a read-only projection of a decoded map."""

    __slots__ = ("raw",)

    def __init__(self, raw: Map | MapView | None = None) -> None:
        if isinstance(raw, MapView):
            raw = raw.raw
        self.raw: Map = raw if isinstance(raw, dict) else {}

    def __getitem__(self, key: str) -> Any:
        return self.raw[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.raw)

    def __len__(self) -> int:
        return len(self.raw)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.raw!r})"


V = TypeVar("V", bound=MapView)


class ArrayView(Sequence[V], Generic[V]):
    """Base class: a read-only projection of a decoded list of maps."""

    __slots__ = ("raw",)

    item_type: type[MapView] = MapView

    def __init__(self, raw: Array | None = None) -> None:
        self.raw: Array = raw if isinstance(raw, list) else []

    @overload
    def __getitem__(self, index: int) -> V: ...

    @overload
    def __getitem__(self, index: slice) -> list[V]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self.item_type(item) for item in self.raw[index]]  # type: ignore[misc]
        return self.item_type(self.raw[index])

    def __len__(self) -> int:
        return len(self.raw)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.raw!r})"


def _views(items: Array, view: type[V]) -> list[V]:
    return [view(item) for item in items if isinstance(item, dict)]


def _indices(m: Mapping[str, Any]) -> list[int]:
    return [
        value
        for value in array_value(m, "indices")
        if isinstance(value, int) and not isinstance(value, bool)
    ]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class FieldError(MapView):
    """One entry of the ``errors`` array."""

    __slots__ = ()

    @property
    def code(self) -> int:
        value = self.raw.get("code")
        if isinstance(value, str):
            # numeric string form
            text = value.strip()
            return int(text) if text.isascii() and text.isdigit() else 0
        return int64_value(self.raw, "code")

    @property
    def message(self) -> str:
        return string_value(self.raw, "message")

    def __str__(self) -> str:
        return f"Error {self.code}: {self.message}"


class ErrorList(MapView):
    """The API's structured error payload: ``{"errors": [...]}``."""

    __slots__ = ()

    @staticmethod
    def matches(value: Any) -> bool:
        """Return True when ``value`` has the structured error shape."""

        return isinstance(value, dict) and isinstance(value.get("errors"), list)

    def errors(self) -> list[FieldError]:
        return _views(array_value(self.raw, "errors"), FieldError)

    def message(self) -> str:
        return "".join(f"{error}. " for error in self.errors())

    def __str__(self) -> str:
        return self.message()


# ---------------------------------------------------------------------------
# Users and tweets
# ---------------------------------------------------------------------------


class User(MapView):
    """It's a user!"""

    __slots__ = ()

    @property
    def id(self) -> int:
        return id_value(self.raw)

    @property
    def id_str(self) -> str:
        return string_value(self.raw, "id_str")

    @property
    def name(self) -> str:
        return string_value(self.raw, "name")

    @property
    def screen_name(self) -> str:
        return string_value(self.raw, "screen_name")

    @property
    def description(self) -> str:
        return string_value(self.raw, "description")

    @property
    def location(self) -> str:
        return string_value(self.raw, "location")

    @property
    def url(self) -> str:
        return string_value(self.raw, "url")

    @property
    def protected(self) -> bool:
        return bool_value(self.raw, "protected")

    @property
    def verified(self) -> bool:
        return bool_value(self.raw, "verified")

    @property
    def followers_count(self) -> int:
        return int64_value(self.raw, "followers_count")

    @property
    def friends_count(self) -> int:
        return int64_value(self.raw, "friends_count")

    @property
    def statuses_count(self) -> int:
        return int64_value(self.raw, "statuses_count")

    @property
    def created_at(self) -> datetime:
        return time_value(self.raw, "created_at")


class Hashtag(MapView):
    __slots__ = ()

    @property
    def text(self) -> str:
        return string_value(self.raw, "text")

    @property
    def indices(self) -> list[int]:
        return _indices(self.raw)


class Url(MapView):
    __slots__ = ()

    @property
    def url(self) -> str:
        return string_value(self.raw, "url")

    @property
    def expanded_url(self) -> str:
        return string_value(self.raw, "expanded_url")

    @property
    def display_url(self) -> str:
        return string_value(self.raw, "display_url")

    @property
    def indices(self) -> list[int]:
        return _indices(self.raw)


class UserMention(MapView):
    __slots__ = ()

    @property
    def id(self) -> int:
        return id_value(self.raw)

    @property
    def id_str(self) -> str:
        return string_value(self.raw, "id_str")

    @property
    def screen_name(self) -> str:
        return string_value(self.raw, "screen_name")

    @property
    def name(self) -> str:
        return string_value(self.raw, "name")

    @property
    def indices(self) -> list[int]:
        return _indices(self.raw)


class MediaSize(MapView):
    __slots__ = ()

    @property
    def width(self) -> int:
        return int32_value(self.raw, "w")

    @property
    def height(self) -> int:
        return int32_value(self.raw, "h")

    @property
    def resize(self) -> str:
        return string_value(self.raw, "resize")


class Media(MapView):
    """A photo/video entity attached to a tweet."""

    __slots__ = ()

    @property
    def id(self) -> int:
        return id_value(self.raw)

    @property
    def id_str(self) -> str:
        return string_value(self.raw, "id_str")

    @property
    def type(self) -> str:
        return string_value(self.raw, "type")

    @property
    def url(self) -> str:
        return string_value(self.raw, "url")

    @property
    def display_url(self) -> str:
        return string_value(self.raw, "display_url")

    @property
    def expanded_url(self) -> str:
        return string_value(self.raw, "expanded_url")

    @property
    def media_url(self) -> str:
        return string_value(self.raw, "media_url")

    @property
    def media_url_https(self) -> str:
        return string_value(self.raw, "media_url_https")

    @property
    def indices(self) -> list[int]:
        return _indices(self.raw)

    def sizes(self) -> dict[str, MediaSize]:
        return {
            name: MediaSize(size)
            for name, size in map_value(self.raw, "sizes").items()
            if isinstance(size, dict)
        }


class Entities(MapView):
    __slots__ = ()

    def hashtags(self) -> list[Hashtag]:
        return _views(array_value(self.raw, "hashtags"), Hashtag)

    def urls(self) -> list[Url]:
        return _views(array_value(self.raw, "urls"), Url)

    def user_mentions(self) -> list[UserMention]:
        return _views(array_value(self.raw, "user_mentions"), UserMention)

    def media(self) -> list[Media]:
        return _views(array_value(self.raw, "media"), Media)


class Tweet(MapView):
    """It's a Tweet! (Adorably referred to by the API as a "status".)"""

    __slots__ = ()

    @property
    def id(self) -> int:
        return id_value(self.raw)

    @property
    def id_str(self) -> str:
        return string_value(self.raw, "id_str")

    @property
    def text(self) -> str:
        return string_value(self.raw, "text")

    @property
    def full_text(self) -> str:
        return string_value(self.raw, "full_text")

    @property
    def language(self) -> str:
        return string_value(self.raw, "lang")

    @property
    def source(self) -> str:
        return string_value(self.raw, "source")

    @property
    def created_at(self) -> datetime:
        return time_value(self.raw, "created_at")

    @property
    def retweet_count(self) -> int:
        return int64_value(self.raw, "retweet_count")

    @property
    def favorite_count(self) -> int:
        return int64_value(self.raw, "favorite_count")

    @property
    def truncated(self) -> bool:
        return bool_value(self.raw, "truncated")

    @property
    def in_reply_to_status_id_str(self) -> str:
        return string_value(self.raw, "in_reply_to_status_id_str")

    @property
    def in_reply_to_screen_name(self) -> str:
        return string_value(self.raw, "in_reply_to_screen_name")

    def user(self) -> User:
        return User(map_value(self.raw, "user"))

    def entities(self) -> Entities:
        return Entities(map_value(self.raw, "entities"))

    def is_retweet(self) -> bool:
        return isinstance(self.raw.get("retweeted_status"), dict)

    def retweeted_status(self) -> Tweet:
        return Tweet(map_value(self.raw, "retweeted_status"))


class Timeline(ArrayView[Tweet]):
    """It's a less structured list of Tweets!"""

    __slots__ = ()

    item_type = Tweet


class SearchResults(MapView):
    """It's a structured list of Tweets!"""

    __slots__ = ()

    def statuses(self) -> list[Tweet]:
        return _views(array_value(self.raw, "statuses"), Tweet)

    def search_metadata(self) -> Map:
        return map_value(self.raw, "search_metadata")

    def next_query(self) -> dict[str, list[str]]:
        """
        Return the query parameters of the next page of results.

        Raises:
            MissingPaginationCursor: when ``search_metadata.next_results`` is
                absent, not a string, or empty.
        """

        cursor = self.search_metadata().get("next_results")
        if not isinstance(cursor, str):
            raise MissingPaginationCursor(
                f"Could not get next_results from search: {cursor!r}"
            )
        if cursor.startswith("?"):
            cursor = cursor[1:]
        if not cursor:
            raise MissingPaginationCursor("Search returned an empty next_results.")
        return parse_qs(cursor, keep_blank_values=True)


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------


class TwitterList(MapView):
    """A List!"""

    __slots__ = ()

    @property
    def id(self) -> int:
        return id_value(self.raw)

    @property
    def id_str(self) -> str:
        return string_value(self.raw, "id_str")

    @property
    def name(self) -> str:
        return string_value(self.raw, "name")

    @property
    def slug(self) -> str:
        return string_value(self.raw, "slug")

    @property
    def full_name(self) -> str:
        return string_value(self.raw, "full_name")

    @property
    def description(self) -> str:
        return string_value(self.raw, "description")

    @property
    def mode(self) -> str:
        return string_value(self.raw, "mode")

    @property
    def subscriber_count(self) -> int:
        return int64_value(self.raw, "subscriber_count")

    @property
    def member_count(self) -> int:
        return int64_value(self.raw, "member_count")

    def user(self) -> User:
        return User(map_value(self.raw, "user"))


class Lists(ArrayView[TwitterList]):
    """It's a less structured list of Lists!"""

    __slots__ = ()

    item_type = TwitterList


class CursoredLists(MapView):
    """It's a cursored list of Lists!"""

    __slots__ = ()

    @property
    def next_cursor_str(self) -> str:
        return string_value(self.raw, "next_cursor_str")

    @property
    def previous_cursor_str(self) -> str:
        return string_value(self.raw, "previous_cursor_str")

    def has_next(self) -> bool:
        return self.next_cursor_str not in ("", "0")

    def lists(self) -> Lists:
        return Lists(array_value(self.raw, "lists"))


# ---------------------------------------------------------------------------
# Media uploads
# ---------------------------------------------------------------------------


class VideoUpload(MapView):
    """Nested response structure for video uploads."""

    __slots__ = ()

    @property
    def type(self) -> str:
        return string_value(self.raw, "video_type")


class MediaResponse(MapView):
    """Response for media upload requests."""

    __slots__ = ()

    @property
    def media_id(self) -> int:
        return int64_value(self.raw, "media_id")

    @property
    def media_id_string(self) -> str:
        return string_value(self.raw, "media_id_string")

    @property
    def size(self) -> int:
        return int64_value(self.raw, "size")

    @property
    def expires_after_secs(self) -> int:
        return int32_value(self.raw, "expires_after_secs")

    def video(self) -> VideoUpload:
        return VideoUpload(map_value(self.raw, "video"))


__all__ = [
    "ArrayView",
    "CursoredLists",
    "Entities",
    "ErrorList",
    "FieldError",
    "Hashtag",
    "Lists",
    "MapView",
    "Media",
    "MediaResponse",
    "MediaSize",
    "SearchResults",
    "Timeline",
    "Tweet",
    "TwitterList",
    "Url",
    "User",
    "UserMention",
    "VideoUpload",
]
