"""
Signal the downstream search indexer that the contents of a container changed.
"""

import logging

import httpx

from blobtree.config import get_settings
from blobtree.connections import http
from blobtree.objectstorage.errors import ReindexError


async def run_indexer() -> bool:
    """
    POST to the configured reindex url. Returns False if no url is configured, raises ReindexError if the call fails.
    """
    settings = get_settings()
    if not settings.reindex_url:
        logging.info("No reindex_url configured, skipping reindex")
        return False

    headers = {}
    if settings.reindex_api_key:
        headers["api-key"] = settings.reindex_api_key

    try:
        res = await http().post(settings.reindex_url, headers=headers)
        res.raise_for_status()
    except httpx.HTTPError as e:
        raise ReindexError(f"Could not trigger reindex at {settings.reindex_url}: {e}") from e

    logging.info(f"Triggered reindex at {settings.reindex_url}")
    return True
