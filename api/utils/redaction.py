"""Helpers that keep capability values out of request logs."""
from __future__ import annotations

DOWNLOAD_PREFIX = "/api/v1/downloads/"
DOWNLOAD_REQUEST_PREFIX = "/api/v1/downloads/request/"


def redact_path(path: str) -> str:
    """Hide the token segment of download redemption paths."""
    if path.startswith(DOWNLOAD_PREFIX) and not path.startswith(DOWNLOAD_REQUEST_PREFIX):
        return DOWNLOAD_PREFIX + "***"
    return path
