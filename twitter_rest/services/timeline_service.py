"""
Tweet and timeline workflows built on top of the client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, BinaryIO, Iterable, Mapping, Protocol

from twitter_rest.config import ClientConfig
from twitter_rest.models import MediaResponse, Timeline, Tweet
from twitter_rest.response import APIResponse
from twitter_rest.services._params import compact

USER_TIMELINE_PATH = "/1.1/statuses/user_timeline.json"
HOME_TIMELINE_PATH = "/1.1/statuses/home_timeline.json"
SHOW_PATH = "/1.1/statuses/show.json"
UPDATE_PATH = "/1.1/statuses/update.json"
MEDIA_UPLOAD_PATH = "/1.1/media/upload.json"


class RequestClient(Protocol):
    """Protocol subset consumed by the services."""

    config: ClientConfig

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
        ...


@dataclass(slots=True)
class TimelineService:
    """Reads timelines and single tweets, posts status updates and media."""

    client: RequestClient
    upload_base_url: str | None = None

    def user_timeline(
        self,
        *,
        screen_name: str | None = None,
        user_id: str | None = None,
        count: int | None = None,
        max_id: str | None = None,
        since_id: str | None = None,
        **extra: Any,
    ) -> Timeline:
        params = compact(
            screen_name=screen_name,
            user_id=user_id,
            count=count,
            max_id=max_id,
            since_id=since_id,
            **extra,
        )
        timeline = Timeline()
        self.client.send_request("GET", USER_TIMELINE_PATH, params=params).parse(timeline)
        return timeline

    def home_timeline(self, *, count: int | None = None, **extra: Any) -> Timeline:
        timeline = Timeline()
        response = self.client.send_request(
            "GET", HOME_TIMELINE_PATH, params=compact(count=count, **extra)
        )
        response.parse(timeline)
        return timeline

    def get_tweet(self, tweet_id: str, **extra: Any) -> Tweet:
        tweet = Tweet()
        response = self.client.send_request(
            "GET", SHOW_PATH, params=compact(id=tweet_id, **extra)
        )
        response.parse(tweet)
        return tweet

    def update_status(
        self,
        text: str,
        *,
        in_reply_to: str | None = None,
        media_ids: Iterable[str] | None = None,
        **extra: Any,
    ) -> Tweet:
        payload = compact(
            status=text,
            in_reply_to_status_id=in_reply_to,
            media_ids=",".join(media_ids) if media_ids else None,
            **extra,
        )
        tweet = Tweet()
        self.client.send_request("POST", UPDATE_PATH, data=payload).parse(tweet)
        return tweet

    def upload_media(
        self,
        file: BinaryIO,
        *,
        filename: str = "media",
        media_category: str | None = None,
    ) -> MediaResponse:
        """
        Simple (non-chunked) upload; returns the ``media_id`` to attach.

        The request goes to ``upload_base_url`` when set, otherwise to the
        client's configured upload host.
        """

        base_url = self.upload_base_url or self.client.config.upload_url
        result = MediaResponse()
        response = self.client.send_request(
            "POST",
            f"{base_url}{MEDIA_UPLOAD_PATH}",
            data=compact(media_category=media_category),
            files={"media": (filename, file)},
        )
        response.parse(result)
        return result
