"""
Shared utilities for API routers.
"""

from fastapi import Response


def set_cache_headers(response: Response, cache_hit: bool) -> None:
    """Report whether the payload came from the cache."""
    response.headers["X-Cache"] = "HIT" if cache_hit else "MISS"
