"""Helpers for building provider request URLs."""

import logging
from typing import Mapping

import httpx


logger = logging.getLogger(__name__)


def _describe(params: Mapping[str, str]) -> str:
    return ";".join(f'"{key}":"{value}"' for key, value in params.items())


def build_url_with_query_string(params: Mapping[str, str], path: str = "") -> str:
    """
    Build a relative URL from a path and a set of query parameters.

    Keys and values are percent-encoded the way httpx encodes ``params=``. Parameters keep
    the iteration order of the mapping so the same input always yields the
    same URL.

    Args:
        params: Query string parameters (names to values)
        path: Optional path the query string is appended to

    Returns:
        ``path?key1=value1&key2=value2``, or just ``path`` if there are no parameters
    """
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Building url from path '%s' and query string parameters %s", path, _describe(params))

    if not params:
        return path

    result = f"{path}?{httpx.QueryParams(list(params.items()))}"

    logger.debug("Built url %s", result)

    return result
