from __future__ import annotations

from typing import Any, Mapping

from egconsole.models import Status


def _status_value(entry: Any) -> Any:
    if isinstance(entry, Mapping):
        return entry.get("status")
    return None


def reshape_status(raw: Mapping[str, Any], object_name: str) -> Status:
    """
    Turn the management API status map into node name -> status.

    Keys look like `<prefix>/<object name>/<node path...>`. The prefix is always
    dropped and the next segment must be `object_name`; other entries belong to
    other objects sharing the response and are skipped. The node name is what
    remains after the object name, joined with `/`. When nothing remains the
    full original key is used so no entry ends up under an empty name.
    """
    result: Status = {}
    for key, entry in raw.items():
        parts = key.split("/")[1:]
        if not parts or parts[0] != object_name:
            continue
        node_name = "/".join(parts[1:])
        result[node_name or key] = _status_value(entry)
    return result
