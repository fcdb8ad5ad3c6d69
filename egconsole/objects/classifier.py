from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field

from egconsole.models import EGObject, ObjectKind
from egconsole.objects.httpserver import HTTPServer
from egconsole.objects.pipeline import Pipeline


class Objects(BaseModel):
    """
    One fetch of the object list, split by kind.

    Buckets hold the objects exactly as fetched. `pipeline_views` and
    `http_server_views` build the typed shapes on demand and raise
    pydantic.ValidationError if an object does not fit its shape.
    """

    pipelines: List[EGObject] = Field(default_factory=list)
    http_servers: List[EGObject] = Field(default_factory=list)
    others: List[EGObject] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.pipelines) + len(self.http_servers) + len(self.others)

    def controllers(self, search: Optional[str] = None) -> List[EGObject]:
        """Generic objects whose name contains `search` (all of them when empty)."""
        if not search:
            return list(self.others)
        return [o for o in self.others if search in o.name]

    def find(self, name: str) -> Optional[EGObject]:
        for bucket in (self.pipelines, self.http_servers, self.others):
            for o in bucket:
                if o.name == name:
                    return o
        return None

    def pipeline_views(self) -> List[Pipeline]:
        return [Pipeline.from_wire(o.to_wire()) for o in self.pipelines]

    def http_server_views(self) -> List[HTTPServer]:
        return [HTTPServer.from_wire(o.to_wire()) for o in self.http_servers]


def classify_objects(items: Iterable[Mapping[str, Any]]) -> Objects:
    """
    Split raw objects into pipelines, HTTP servers and everything else.

    Single pass on the `kind` string; every item lands in exactly one bucket
    and keeps its relative order. Nothing beyond name and kind is inspected.
    """
    out = Objects()
    for raw in items:
        obj = EGObject.from_wire(raw)
        kind = ObjectKind.parse(raw.get("kind"))
        if kind is ObjectKind.pipeline:
            out.pipelines.append(obj)
        elif kind is ObjectKind.http_server:
            out.http_servers.append(obj)
        else:
            out.others.append(obj)
    return out
