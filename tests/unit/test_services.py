from __future__ import annotations

import io
from typing import Any

import pytest

from twitter_rest.config import ClientConfig
from twitter_rest.exceptions import MissingPaginationCursor, RateLimitExceeded
from twitter_rest.response import APIResponse
from twitter_rest.services._params import compact
from twitter_rest.services.list_service import FIRST_CURSOR, OWNERSHIPS_PATH, ListService
from twitter_rest.services.search_service import SEARCH_PATH, SearchService
from twitter_rest.services.timeline_service import (
    HOME_TIMELINE_PATH,
    MEDIA_UPLOAD_PATH,
    SHOW_PATH,
    UPDATE_PATH,
    USER_TIMELINE_PATH,
    TimelineService,
)

from tests.payloads import (
    LISTS_LAST_PAGE,
    LISTS_PAGE,
    MEDIA_UPLOAD,
    RATE_LIMIT_HEADERS,
    SEARCH_LAST_PAGE,
    SEARCH_PAGE,
    TWEET_JSON,
    as_bytes,
)


class StubClient:
    """Answers send_request calls from a queue of canned responses."""

    def __init__(
        self, *replies: bytes | tuple[int, bytes, dict], config: ClientConfig | None = None
    ) -> None:
        self.config = config or ClientConfig()
        self.replies = list(replies)
        self.calls: list[dict[str, Any]] = []

    def send_request(self, method: str, path: str, **kwargs: Any) -> APIResponse:
        self.calls.append({"method": method, "path": path, **kwargs})
        reply = self.replies.pop(0)
        if isinstance(reply, tuple):
            status, body, headers = reply
        else:
            status, body, headers = 200, reply, {}
        return APIResponse(status, headers, io.BytesIO(body))


def test_compact_drops_none_and_renders_bools() -> None:
    assert compact(a=None, b=True, c=False, d=0, e="x") == {
        "b": "true",
        "c": "false",
        "d": 0,
        "e": "x",
    }


# ============================================================================
# TimelineService
# ============================================================================


def test_user_timeline() -> None:
    client = StubClient(b'[{"id_str":"1","text":"one"},{"id_str":"2","text":"two"}]')
    service = TimelineService(client)

    timeline = service.user_timeline(screen_name="kurrik", count=2, trim_user=True)

    assert [tweet.id for tweet in timeline] == [1, 2]
    assert client.calls[0]["method"] == "GET"
    assert client.calls[0]["path"] == USER_TIMELINE_PATH
    assert client.calls[0]["params"] == {"screen_name": "kurrik", "count": 2, "trim_user": "true"}


def test_home_timeline() -> None:
    client = StubClient(b"[]")

    timeline = TimelineService(client).home_timeline(count=5)

    assert len(timeline) == 0
    assert client.calls[0]["path"] == HOME_TIMELINE_PATH
    assert client.calls[0]["params"] == {"count": 5}


def test_get_tweet() -> None:
    client = StubClient(TWEET_JSON)

    tweet = TimelineService(client).get_tweet("248876316206714880")

    assert tweet.id == 248876316206714880
    assert client.calls[0]["path"] == SHOW_PATH
    assert client.calls[0]["params"] == {"id": "248876316206714880"}


def test_update_status() -> None:
    client = StubClient(b'{"id_str":"99","text":"hello"}')

    tweet = TimelineService(client).update_status(
        "hello", in_reply_to="42", media_ids=["1", "2"]
    )

    assert tweet.id == 99
    call = client.calls[0]
    assert call["method"] == "POST"
    assert call["path"] == UPDATE_PATH
    assert call["data"] == {"status": "hello", "in_reply_to_status_id": "42", "media_ids": "1,2"}


def test_update_status_text_only() -> None:
    client = StubClient(b"{}")

    TimelineService(client).update_status("plain")

    assert client.calls[0]["data"] == {"status": "plain"}


def test_upload_media() -> None:
    client = StubClient(as_bytes(MEDIA_UPLOAD))
    image = io.BytesIO(b"\x89PNG")

    media = TimelineService(client).upload_media(image, filename="kitten.png")

    assert media.media_id_string == "710511363345354753"
    call = client.calls[0]
    assert call["path"] == f"https://upload.twitter.com{MEDIA_UPLOAD_PATH}"
    assert call["files"] == {"media": ("kitten.png", image)}
    assert call["data"] == {}


def test_upload_media_uses_configured_upload_host() -> None:
    config = ClientConfig(upload_host="https://upload.example.test/")
    client = StubClient(as_bytes(MEDIA_UPLOAD), as_bytes(MEDIA_UPLOAD), config=config)

    TimelineService(client).upload_media(io.BytesIO(b"gif"), media_category="tweet_gif")
    TimelineService(client, upload_base_url="http://localhost:8080").upload_media(
        io.BytesIO(b"gif")
    )

    assert [call["path"] for call in client.calls] == [
        f"https://upload.example.test{MEDIA_UPLOAD_PATH}",
        f"http://localhost:8080{MEDIA_UPLOAD_PATH}",
    ]
    assert client.calls[0]["data"] == {"media_category": "tweet_gif"}


# ============================================================================
# SearchService
# ============================================================================


def test_search() -> None:
    client = StubClient(as_bytes(SEARCH_PAGE))

    results = SearchService(client).search("golang", result_type="recent", count=2)

    assert len(results.statuses()) == 2
    assert client.calls[0]["path"] == SEARCH_PATH
    assert client.calls[0]["params"] == {"q": "golang", "result_type": "recent", "count": 2}


def test_next_page_uses_next_results() -> None:
    client = StubClient(as_bytes(SEARCH_PAGE), as_bytes(SEARCH_LAST_PAGE))
    service = SearchService(client)

    page = service.next_page(service.search("golang"))

    assert page.statuses()[0].id == 100
    assert client.calls[1]["params"] == {
        "max_id": ["110"],
        "q": ["golang"],
        "include_entities": ["1"],
    }


def test_next_page_on_last_page() -> None:
    client = StubClient(as_bytes(SEARCH_LAST_PAGE))
    service = SearchService(client)

    with pytest.raises(MissingPaginationCursor):
        service.next_page(service.search("golang"))


def test_iter_pages_follows_cursor() -> None:
    client = StubClient(as_bytes(SEARCH_PAGE), as_bytes(SEARCH_LAST_PAGE))

    pages = list(SearchService(client).iter_pages("golang"))

    assert [len(page.statuses()) for page in pages] == [2, 1]
    assert len(client.calls) == 2


def test_iter_pages_max_pages() -> None:
    client = StubClient(as_bytes(SEARCH_PAGE), as_bytes(SEARCH_PAGE))

    pages = list(SearchService(client).iter_pages("golang", max_pages=1))

    assert len(pages) == 1
    assert len(client.calls) == 1


def test_iter_pages_propagates_rate_limit() -> None:
    client = StubClient(as_bytes(SEARCH_PAGE), (429, b"", RATE_LIMIT_HEADERS))
    pages = SearchService(client).iter_pages("golang")

    assert next(pages).statuses()[0].id == 111
    with pytest.raises(RateLimitExceeded) as exc:
        next(pages)

    assert exc.value.limit == 180


# ============================================================================
# ListService
# ============================================================================


def test_ownerships() -> None:
    client = StubClient(as_bytes(LISTS_PAGE))

    page = ListService(client).ownerships(screen_name="twitterapi", count=1)

    assert page.lists()[0].name == "Twitter API"
    assert client.calls[0]["path"] == OWNERSHIPS_PATH
    assert client.calls[0]["params"] == {
        "screen_name": "twitterapi",
        "count": 1,
        "cursor": FIRST_CURSOR,
    }


def test_iter_ownerships_follows_cursor() -> None:
    client = StubClient(as_bytes(LISTS_PAGE), as_bytes(LISTS_LAST_PAGE))

    names = [item.name for item in ListService(client).iter_ownerships(screen_name="twitterapi")]

    assert names == ["Twitter API", "Developers"]
    assert [call["params"]["cursor"] for call in client.calls] == [
        FIRST_CURSOR,
        "1401037770457540712",
    ]
