from __future__ import annotations

from urllib.parse import quote

API_PREFIX = "/apis/v2"

OBJECTS = f"{API_PREFIX}/objects"
STATUS_OBJECTS = f"{API_PREFIX}/status/objects"


def object_item(name: str) -> str:
    return f"{OBJECTS}/{quote(name, safe='')}"


def status_object_item(name: str) -> str:
    return f"{STATUS_OBJECTS}/{quote(name, safe='')}"
