from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, PrivateAttr, field_validator

W = TypeVar("W", bound="WireModel")


class WireModel(BaseModel):
    """
    Base for everything decoded from the management API.

    Wire names are camelCase and kept as aliases; keys we do not model are kept
    as extras. Instances built with `from_wire` also keep a snapshot of the
    mapping they came from, and `to_wire` returns that snapshot unchanged.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    _raw: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    @classmethod
    def from_wire(cls: Type[W], raw: Mapping[str, Any]) -> W:
        obj = cls.model_validate(dict(raw))
        obj._raw = copy.deepcopy(dict(raw))
        return obj

    def to_wire(self) -> Dict[str, Any]:
        if self._raw is not None:
            return copy.deepcopy(self._raw)
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class ObjectKind(str, Enum):
    pipeline = "Pipeline"
    http_server = "HTTPServer"
    other = "other"

    @classmethod
    def parse(cls, kind: Any) -> "ObjectKind":
        # Exact, case-sensitive match; anything else is a generic controller.
        if kind == cls.pipeline.value:
            return cls.pipeline
        if kind == cls.http_server.value:
            return cls.http_server
        return cls.other


class EGObject(WireModel):
    """A managed object: identified by name within its kind, everything else free-form."""

    name: str = ""
    kind: str = ""

    @field_validator("name", "kind", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @property
    def object_kind(self) -> ObjectKind:
        return ObjectKind.parse(self.kind)


# Node name -> opaque status value reported by that node.
Status = Dict[str, Any]
