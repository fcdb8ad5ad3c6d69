from __future__ import annotations

from typing import Any, Mapping


class EditIdentityError(ValueError):
    """An edit tried to change the kind or name of the object being replaced."""


def check_edit_identity(edited: Any, *, name: str, kind: str) -> None:
    if not isinstance(edited, Mapping) or edited.get("name") != name or edited.get("kind") != kind:
        raise EditIdentityError(f"edit must keep kind {kind!r} and name {name!r}")
