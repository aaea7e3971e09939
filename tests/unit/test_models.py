"""
Unit tests for the typed payload views.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from twitter_rest.conversions import ZERO_TIME
from twitter_rest.decoder import decode
from twitter_rest.exceptions import MissingPaginationCursor
from twitter_rest.models import (
    CursoredLists,
    ErrorList,
    FieldError,
    Lists,
    Media,
    MediaResponse,
    SearchResults,
    Timeline,
    Tweet,
    TwitterList,
    User,
)

from tests.payloads import (
    LISTS_LAST_PAGE,
    LISTS_PAGE,
    MEDIA_UPLOAD,
    SEARCH_LAST_PAGE,
    SEARCH_PAGE,
    TWEET_JSON,
)


@pytest.fixture
def tweet() -> Tweet:
    return Tweet(decode(TWEET_JSON))


def test_tweet_fields(tweet: Tweet) -> None:
    assert tweet.id == 248876316206714880
    assert tweet.id_str == "248876316206714880"
    assert tweet.text == "@mynetx you can send me an email - jasoncosta@twitter.com."
    assert tweet.language == "en"
    assert tweet.source == "web"
    assert tweet.truncated is False
    assert tweet.retweet_count == 0
    assert tweet.in_reply_to_status_id_str == "248875708464640000"
    assert tweet.in_reply_to_screen_name == "mynetx"
    assert tweet.created_at == datetime(2012, 9, 20, 20, 8, 32, tzinfo=timezone.utc)


def test_tweet_user(tweet: Tweet) -> None:
    user = tweet.user()

    assert user.id == 14927800
    assert user.screen_name == "jasoncosta"
    assert user.name == "Jason Costa"
    assert user.url == "http://t.co/YCA3ZKY"
    assert user.followers_count == 9128
    assert user.verified is False
    assert user.created_at == datetime(2008, 5, 28, 0, 20, 15, tzinfo=timezone.utc)


def test_tweet_entities(tweet: Tweet) -> None:
    entities = tweet.entities()

    assert entities.hashtags() == []
    assert entities.media() == []
    mentions = entities.user_mentions()
    assert [mention.screen_name for mention in mentions] == ["mynetx"]
    assert mentions[0].id == 14648265
    assert mentions[0].indices == [0, 7]


def test_empty_view_uses_fallbacks() -> None:
    tweet = Tweet()

    assert tweet.id == 0
    assert tweet.text == ""
    assert tweet.truncated is False
    assert tweet.favorite_count == 0
    assert tweet.created_at == ZERO_TIME
    assert tweet.user().screen_name == ""
    assert tweet.entities().urls() == []
    assert tweet.is_retweet() is False
    assert tweet.retweeted_status().id == 0


def test_mistyped_fields_use_fallbacks() -> None:
    tweet = Tweet(
        {
            "id": "not a number",
            "text": ["a", "list"],
            "truncated": "yes",
            "retweet_count": None,
            "user": "jasoncosta",
            "entities": {"urls": "none", "hashtags": ["#go", {"text": "golang"}]},
            "created_at": 12345,
        }
    )

    assert tweet.id == 0
    assert tweet.text == ""
    assert tweet.truncated is False
    assert tweet.retweet_count == 0
    assert tweet.user().screen_name == ""
    assert tweet.entities().urls() == []
    assert [tag.text for tag in tweet.entities().hashtags()] == ["golang"]
    assert tweet.created_at == ZERO_TIME


def test_non_dict_raw_becomes_empty() -> None:
    assert len(User(["not", "a", "map"])) == 0  # type: ignore[arg-type]
    assert len(Timeline({"not": "a list"})) == 0  # type: ignore[arg-type]


def test_views_share_the_decoded_map() -> None:
    raw = {"text": "before"}
    tweet = Tweet(raw)

    raw["text"] = "after"

    assert tweet.text == "after"
    assert Tweet(tweet).raw is raw


def test_view_is_a_read_only_mapping(tweet: Tweet) -> None:
    assert tweet["lang"] == "en"
    assert "user" in tweet
    assert dict(tweet) == tweet.raw
    with pytest.raises(TypeError):
        tweet["lang"] = "fr"  # type: ignore[index]


def test_retweet() -> None:
    tweet = Tweet({"id_str": "2", "retweeted_status": {"id_str": "1", "text": "original"}})

    assert tweet.is_retweet()
    assert tweet.retweeted_status().text == "original"


def test_timeline_items_are_tweets() -> None:
    timeline = Timeline([{"id_str": "1", "text": "one"}, {"id_str": "2", "text": "two"}])

    assert len(timeline) == 2
    assert isinstance(timeline[0], Tweet)
    assert timeline[1].id == 2
    assert [item.text for item in timeline[:1]] == ["one"]
    assert [item.text for item in timeline] == ["one", "two"]


def test_media_entity_sizes() -> None:
    media = Media(
        {
            "id_str": "9",
            "type": "photo",
            "media_url_https": "https://pbs.twimg.com/media/x.png",
            "sizes": {
                "thumb": {"w": 150, "h": 150, "resize": "crop"},
                "large": {"w": 1024, "h": 768, "resize": "fit"},
                "broken": "nope",
            },
        }
    )

    sizes = media.sizes()

    assert media.type == "photo"
    assert set(sizes) == {"thumb", "large"}
    assert sizes["large"].width == 1024
    assert sizes["large"].height == 768
    assert sizes["thumb"].resize == "crop"


def test_search_results() -> None:
    results = SearchResults(SEARCH_PAGE)

    assert [status.text for status in results.statuses()] == [
        "first golang tweet",
        "second golang tweet",
    ]
    assert results.statuses()[1].user().screen_name == "kurrik"
    assert results.search_metadata()["max_id_str"] == "222"


def test_search_next_query() -> None:
    query = SearchResults(SEARCH_PAGE).next_query()

    assert query == {"max_id": ["110"], "q": ["golang"], "include_entities": ["1"]}


def test_search_next_query_keeps_blank_values() -> None:
    results = SearchResults({"search_metadata": {"next_results": "?max_id=5&q=&lang="}})

    assert results.next_query() == {"max_id": ["5"], "q": [""], "lang": [""]}


@pytest.mark.parametrize(
    "metadata",
    [
        {},
        {"next_results": None},
        {"next_results": 17},
        {"next_results": ""},
        {"next_results": "?"},
    ],
)
def test_search_without_cursor(metadata: dict) -> None:
    results = SearchResults({"search_metadata": metadata})

    with pytest.raises(MissingPaginationCursor):
        results.next_query()


def test_search_last_page_has_no_cursor() -> None:
    with pytest.raises(MissingPaginationCursor):
        SearchResults(SEARCH_LAST_PAGE).next_query()


def test_cursored_lists() -> None:
    page = CursoredLists(LISTS_PAGE)

    assert page.next_cursor_str == "1401037770457540712"
    assert page.previous_cursor_str == "0"
    assert page.has_next()

    lists = page.lists()
    assert isinstance(lists, Lists)
    assert isinstance(lists[0], TwitterList)
    assert lists[0].id == 574
    assert lists[0].slug == "twitter-api"
    assert lists[0].member_count == 12
    assert lists[0].user().screen_name == "twitterapi"


def test_cursored_lists_last_page() -> None:
    assert not CursoredLists(LISTS_LAST_PAGE).has_next()
    assert not CursoredLists({}).has_next()


def test_media_response() -> None:
    media = MediaResponse(MEDIA_UPLOAD)

    assert media.media_id == 710511363345354753
    assert media.media_id_string == "710511363345354753"
    assert media.size == 11065
    assert media.expires_after_secs == 86400
    assert media.video().type == ""


def test_media_response_video() -> None:
    media = MediaResponse({"media_id": 1, "video": {"video_type": "video/mp4"}})

    assert media.video().type == "video/mp4"


def test_error_list() -> None:
    errors = ErrorList(
        {
            "errors": [
                {"code": 187, "message": "Status is a duplicate"},
                {"message": "Rate limit exceeded", "code": 88.0},
                "garbage",
            ]
        }
    )

    entries = errors.errors()

    assert [entry.code for entry in entries] == [187, 88]
    assert str(entries[0]) == "Error 187: Status is a duplicate"
    assert errors.message() == (
        "Error 187: Status is a duplicate. Error 88: Rate limit exceeded. "
    )


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ({"errors": []}, True),
        ({"errors": [{"code": 1}]}, True),
        ({"errors": "nope"}, False),
        ({"error": []}, False),
        ([{"errors": []}], False),
        (None, False),
    ],
)
def test_error_list_matches(value: object, expected: bool) -> None:
    assert ErrorList.matches(value) is expected


def test_field_error_defaults() -> None:
    assert str(FieldError({})) == "Error 0: "


@pytest.mark.parametrize(
    ("code", "expected"),
    [("187", 187), (" 88 ", 88), ("-1", 0), ("abc", 0), ("", 0)],
)
def test_field_error_numeric_string_code(code: str, expected: int) -> None:
    errors = ErrorList(decode(b'{"errors":[{"code":"%s","message":"dup"}]}' % code.encode()))

    assert errors.errors()[0].code == expected
