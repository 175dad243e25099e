"""View cache helpers.

Views cache the data they render, keyed by their route path, so that a
mutation can mark a route stale by path alone. Only plain data goes in
the cache; per-session content such as CSRF tokens is rendered on every
request.
"""

from flask import current_app

from invoicing import cache


def view_cache_key(path: str) -> str:
    return f"view/{path}"


def cached_view_data(path: str, loader):
    """Return the cached data for ``path``, loading and storing it on a miss."""
    key = view_cache_key(path)
    data = cache.get(key)
    if data is None:
        data = loader()
        cache.set(key, data)
        current_app.logger.debug("Cached view data for %s", path)
    return data


def revalidate_path(path: str) -> None:
    """Drop the cached data of ``path`` so the next request rebuilds it."""
    cache.delete(view_cache_key(path))
    current_app.logger.debug("Revalidated %s", path)
