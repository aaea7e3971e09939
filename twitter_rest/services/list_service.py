"""
List workflows following ``next_cursor_str`` pagination.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

from twitter_rest.models import CursoredLists, TwitterList
from twitter_rest.services._params import compact
from twitter_rest.services.timeline_service import RequestClient

OWNERSHIPS_PATH = "/1.1/lists/ownerships.json"
FIRST_CURSOR = "-1"


@dataclass(slots=True)
class ListService:
    client: RequestClient

    def ownerships(
        self,
        *,
        screen_name: str | None = None,
        user_id: str | None = None,
        count: int | None = None,
        cursor: str = FIRST_CURSOR,
        **extra: Any,
    ) -> CursoredLists:
        params = compact(
            screen_name=screen_name,
            user_id=user_id,
            count=count,
            cursor=cursor,
            **extra,
        )
        page = CursoredLists()
        self.client.send_request("GET", OWNERSHIPS_PATH, params=params).parse(page)
        return page

    def iter_ownerships(self, **kwargs: Any) -> Iterator[TwitterList]:
        """Yield every owned list, one page at a time."""

        cursor = kwargs.pop("cursor", FIRST_CURSOR)
        while True:
            page = self.ownerships(cursor=cursor, **kwargs)
            yield from page.lists()
            if not page.has_next():
                return
            cursor = page.next_cursor_str
