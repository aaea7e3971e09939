"""
Search workflows, including cursoring through ``search_metadata.next_results``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Mapping

from twitter_rest.exceptions import MissingPaginationCursor
from twitter_rest.models import SearchResults
from twitter_rest.services._params import compact
from twitter_rest.services.timeline_service import RequestClient

SEARCH_PATH = "/1.1/search/tweets.json"


@dataclass(slots=True)
class SearchService:
    client: RequestClient

    def search(
        self,
        query: str,
        *,
        result_type: str | None = None,
        count: int | None = None,
        **extra: Any,
    ) -> SearchResults:
        params = compact(q=query, result_type=result_type, count=count, **extra)
        return self._fetch(params)

    def next_page(self, results: SearchResults) -> SearchResults:
        """
        Fetch the page after ``results``.

        Raises:
            MissingPaginationCursor: ``results`` is the last page.
        """

        return self._fetch(results.next_query())

    def iter_pages(
        self,
        query: str,
        *,
        max_pages: int | None = None,
        **kwargs: Any,
    ) -> Iterator[SearchResults]:
        """
        Yield result pages until the cursor runs out or ``max_pages`` is hit.

        Rate limit errors propagate; whether to wait and resume is up to the
        caller.
        """

        results = self.search(query, **kwargs)
        pages = 1
        while True:
            yield results
            if max_pages is not None and pages >= max_pages:
                return
            try:
                params = results.next_query()
            except MissingPaginationCursor:
                return
            results = self._fetch(params)
            pages += 1

    def _fetch(self, params: Mapping[str, Any]) -> SearchResults:
        results = SearchResults()
        self.client.send_request("GET", SEARCH_PATH, params=params).parse(results)
        return results
