from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field

from egconsole.models import EGObject, WireModel


class Filter(EGObject):
    """Filter spec; only name and kind are modeled, the rest is filter-specific config."""


class Resilience(EGObject):
    """Resilience policy (retry, circuit breaker, ...) referenced by filters."""


class FlowNode(WireModel):
    filter: Optional[str] = None
    alias: Optional[str] = None
    namespace: Optional[str] = None
    # filter result -> name of the flow node to jump to
    jump_if: Optional[Dict[str, str]] = Field(default=None, alias="jumpIf")


class Pipeline(EGObject):
    flow: Optional[List[FlowNode]] = None
    filters: Optional[List[Filter]] = None
    resilience: Optional[List[Resilience]] = None

    def filter_names(self) -> List[str]:
        """Filters in flow order, falling back to declaration order when no flow is given."""
        if self.flow:
            return [n.filter for n in self.flow if n.filter]
        return [f.name for f in self.filters or []]
