"""Retrieval of remote metadata documents."""

from __future__ import annotations

import logging

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5


def fetch(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Return the body of ``url``.

    Raises:
        requests.HTTPError: for non-success responses.
    """

    logger.debug(f"GET {url}")
    resp = requests.get(url, timeout=timeout, headers={"Accept": "application/json"})
    resp.raise_for_status()
    return resp.text
