"""
Service layer modules compose requests, response parsing and typed views for
common endpoints (timelines, search, lists) on top of the client.
"""

__all__ = [
    "timeline_service",
    "search_service",
    "list_service",
]
