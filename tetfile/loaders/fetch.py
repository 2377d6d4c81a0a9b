# tetfile/loaders/fetch.py
"""Retrieve mesh text from a URL or a local path."""

from __future__ import annotations

import asyncio
from pathlib import Path
from urllib.parse import unquote, urlparse

import requests

from tetfile import log
from tetfile.errors import FetchError


def is_http_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def local_path(source) -> Path:
    if isinstance(source, Path):
        return source
    parsed = urlparse(source)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(source)


def _get_http(url: str, timeout: float) -> str:
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise FetchError(url, str(e)) from e

    if response.status_code != 200:
        raise FetchError(url, response.reason or "unexpected status", response.status_code)
    return response.text


def read_text_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FetchError(str(path), str(e)) from e


async def fetch_text(source, timeout: float = 30.0) -> str:
    """
    Fetch the full text behind source.

    source may be an http(s) URL, a file:// URL or a filesystem path.
    The blocking work runs in a worker thread. Raises FetchError on a
    non-200 status, a transport failure or an unreadable file.
    """
    if not isinstance(source, Path) and is_http_url(source):
        log.debug(f"Fetching {source}")
        return await asyncio.to_thread(_get_http, source, timeout)

    path = local_path(source)
    log.debug(f"Reading {path}")
    return await asyncio.to_thread(read_text_file, path)
