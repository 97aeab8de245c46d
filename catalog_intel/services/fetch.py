from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

import httpx

from catalog_intel.services.normalize import FeedError

DEFAULT_HEADERS = {
    "User-Agent": "catalog-intel/1.0 (+prepare-data)",
    "Accept": "application/json",
}


def is_remote(source: Union[str, Path]) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


def fetch_state_remote(url: str, timeout: float = 25.0) -> Dict[str, Any]:
    with httpx.Client(timeout=timeout, headers=DEFAULT_HEADERS, follow_redirects=True) as client:
        r = client.get(url)

    if r.status_code != 200:
        raise FeedError(f"State feed returned HTTP {r.status_code}: {url}")

    ct = r.headers.get("content-type", "")
    try:
        data = r.json()
    except ValueError:
        raise FeedError(f"State feed did not return JSON (content-type {ct or 'unknown'}): {url}")

    return data


def read_state_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FeedError(f"State file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise FeedError(f"State file is not valid JSON: {path} ({e})")


def load_state(source: Union[str, Path], timeout: float = 25.0) -> Dict[str, Any]:
    """Load the raw state document from a local path or an http(s) URL."""
    if is_remote(source):
        return fetch_state_remote(str(source), timeout=timeout)
    return read_state_file(Path(source))
