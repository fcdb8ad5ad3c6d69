from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence, Union

from pydantic import Field

from egconsole.models import EGObject, WireModel


class IPFilter(WireModel):
    block_by_default: Optional[bool] = Field(default=None, alias="blockByDefault")
    allow_ips: Optional[List[str]] = Field(default=None, alias="allowIPs")
    block_ips: Optional[List[str]] = Field(default=None, alias="blockIPs")


class Header(WireModel):
    """Header matcher: either an explicit list of values or a regexp."""

    key: Optional[str] = None
    values: Optional[List[str]] = None
    regexp: Optional[str] = None


# Query matchers share the header matcher shape.
Query = Header


class Host(WireModel):
    is_regexp: Optional[bool] = Field(default=None, alias="isRegexp")
    value: Optional[str] = None


class PathRule(WireModel):
    ip_filter: Optional[IPFilter] = Field(default=None, alias="ipFilter")
    path: Optional[str] = None
    path_prefix: Optional[str] = Field(default=None, alias="pathPrefix")
    path_regexp: Optional[str] = Field(default=None, alias="pathRegexp")
    rewrite_target: Optional[str] = Field(default=None, alias="rewriteTarget")
    methods: Optional[List[str]] = None
    backend: Optional[str] = None
    client_max_body_size: Optional[int] = Field(default=None, alias="clientMaxBodySize")
    headers: Optional[List[Header]] = None
    queries: Optional[List[Query]] = None
    match_all_header: Optional[bool] = Field(default=None, alias="matchAllHeader")
    match_all_query: Optional[bool] = Field(default=None, alias="matchAllQuery")

    def matcher(self) -> str:
        """Short human form of how this path matches, e.g. `prefix:/api`."""
        if self.path:
            return f"exact:{self.path}"
        if self.path_prefix:
            return f"prefix:{self.path_prefix}"
        if self.path_regexp:
            return f"regexp:{self.path_regexp}"
        return "any"


class Rule(WireModel):
    host: Optional[str] = None
    host_regexp: Optional[str] = Field(default=None, alias="hostRegexp")
    hosts: Optional[List[Host]] = None
    paths: Optional[List[PathRule]] = None
    ip_filter: Optional[IPFilter] = Field(default=None, alias="ipFilter")


class HTTPServer(EGObject):
    port: Optional[int] = None
    rules: Optional[List[Rule]] = None

    def backends(self) -> List[str]:
        """Pipelines referenced by this server's paths, first occurrence order, no duplicates."""
        out: List[str] = []
        for rule in self.rules or []:
            for p in rule.paths or []:
                if p.backend and p.backend not in out:
                    out.append(p.backend)
        return out


def _ip_list(ip_filter: Union[IPFilter, Mapping[str, Any]], attr: str, wire_key: str) -> Any:
    if isinstance(ip_filter, IPFilter):
        return getattr(ip_filter, attr)
    return ip_filter.get(wire_key)


def is_ip_filter_empty(ip_filter: Union[IPFilter, Mapping[str, Any], None]) -> bool:
    """
    True when there is nothing to show for an IP filter: no filter at all, or
    neither an allow list nor a block list with at least one entry.
    `blockByDefault` alone does not make a filter non-empty.
    """
    if ip_filter is None:
        return True
    if _ip_list(ip_filter, "allow_ips", "allowIPs"):
        return False
    if _ip_list(ip_filter, "block_ips", "blockIPs"):
        return False
    return True


def is_headers_empty(headers: Optional[Sequence[Any]]) -> bool:
    return headers is None or len(headers) == 0
