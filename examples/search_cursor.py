#!/usr/bin/env python
"""
Example: Page through search results using twitter_rest.

This example demonstrates:
- Loading credentials from the environment
- Creating a client using the factory
- Following search_metadata.next_results from page to page
- Reading rate limit headers and waiting out a 429 on the caller's side

Usage:
    python examples/search_cursor.py --query golang
    python examples/search_cursor.py --query golang --result-type recent --max-pages 3

Requirements:
    Set environment variables:
    - TWITTER_BEARER_TOKEN, or TWITTER_API_KEY and TWITTER_API_SECRET
    - TWITTER_ACCESS_TOKEN / TWITTER_ACCESS_TOKEN_SECRET (optional, user context)
"""

from __future__ import annotations

import argparse
import sys
import time

from twitter_rest.config import ConfigManager
from twitter_rest.exceptions import (
    ClassifiedError,
    ConfigurationError,
    MissingPaginationCursor,
    RateLimitExceeded,
)
from twitter_rest.factory import TwitterClientFactory
from twitter_rest.models import SearchResults
from twitter_rest.rate_limit import compute_backoff
from twitter_rest.services.search_service import SEARCH_PATH

MIN_WAIT = 10.0


def main() -> int:
    """Main entry point for the example."""
    parser = argparse.ArgumentParser(description="Page through search results")
    parser.add_argument("--query", default="twitterapi", help="Search query")
    parser.add_argument("--result-type", help="mixed, recent or popular")
    parser.add_argument("--max-pages", type=int, default=5, help="Stop after this many pages")
    args = parser.parse_args()

    try:
        client = TwitterClientFactory.create_from_config(ConfigManager())
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        return 1

    params: dict[str, object] = {"q": args.query}
    if args.result_type:
        params["result_type"] = args.result_type
    pages = 0
    count = 1
    try:
        while pages < args.max_pages:
            response = client.get(SEARCH_PATH, params=params)
            results = SearchResults()
            try:
                response.parse(results)
            except RateLimitExceeded as e:
                delay = max((compute_backoff(e.rate_limit) or 0.0) + 1.0, MIN_WAIT)
                print(f"Rate limited. Reset at {e.reset_at}. Waiting for {delay:.0f}s")
                time.sleep(delay)
                continue
            except ClassifiedError as e:
                print(f"Problem parsing response: {e}")
                return 1

            pages += 1
            for tweet in results.statuses():
                user = tweet.user()
                print(f"{count}.) {tweet.text}")
                print(f"From {user.name} (@{user.screen_name}) at {tweet.created_at:%a, %d %b %Y %H:%M:%S %Z}\n")
                count += 1

            if response.has_rate_limit():
                print(f"Rate limit:           {response.rate_limit()}")
                print(f"Rate limit remaining: {response.rate_limit_remaining()}")
                print(f"Rate limit reset:     {response.rate_limit_reset()}")
            else:
                print("Could not parse rate limit from response.")

            try:
                params = results.next_query()
            except MissingPaginationCursor as e:
                print(f"No next query: {e}")
                break
    finally:
        client.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
