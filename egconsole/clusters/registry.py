from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ClusterSpec:
    name: str
    api_addresses: list[str]
    username: str | None = None
    password: str | None = None
    # Extra headers sent with every management API call (e.g. a bearer token).
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ClientInfo:
    """Everything needed to issue one management API call against a cluster."""

    url: str
    headers: Dict[str, str]
    auth: Optional[Tuple[str, str]] = None


def _str_list(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [v.strip().rstrip("/") for v in value if isinstance(v, str) and v.strip()]


def _str_dict(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items() if isinstance(k, str) and v is not None}


def parse_cluster_registry(clusters_json: str | None) -> List[ClusterSpec]:
    """
    Parse EGCONSOLE_CLUSTERS_JSON (list of dicts). Invalid entries are ignored.
    """
    if not clusters_json:
        return []
    try:
        raw = json.loads(clusters_json)
    except ValueError:
        return []
    if not isinstance(raw, list):
        return []

    out: List[ClusterSpec] = []
    for row in raw:
        if not isinstance(row, dict):
            continue
        name = row.get("name")
        if not isinstance(name, str) or not name.strip():
            continue
        addresses = _str_list(row.get("api_addresses"))
        if not addresses:
            continue
        out.append(
            ClusterSpec(
                name=name.strip(),
                api_addresses=addresses,
                username=row.get("username") if isinstance(row.get("username"), str) else None,
                password=row.get("password") if isinstance(row.get("password"), str) else None,
                headers=_str_dict(row.get("headers")),
            )
        )
    return out


def list_clusters(settings: Any) -> List[ClusterSpec]:
    """
    Configured clusters, else a single `default` cluster built from the
    single-address settings.
    """
    specs = parse_cluster_registry(getattr(settings, "clusters_json", None))
    if specs:
        return specs
    return [
        ClusterSpec(
            name="default",
            api_addresses=_str_list(getattr(settings, "api_address", None)),
            username=getattr(settings, "api_username", None),
            password=getattr(settings, "api_password", None),
        )
    ]


def get_cluster(settings: Any, name: str | None = None) -> ClusterSpec:
    wanted = name or getattr(settings, "default_cluster", None) or "default"
    for spec in list_clusters(settings):
        if spec.name == wanted:
            return spec
    raise KeyError(f"Cluster not found: {wanted}")


def get_client_info(cluster: ClusterSpec, path: str) -> ClientInfo:
    if not cluster.api_addresses:
        raise ValueError(f"Cluster {cluster.name} has no API address")
    headers = {"Accept": "application/json"}
    headers.update(cluster.headers)
    auth = (cluster.username, cluster.password) if cluster.username and cluster.password else None
    return ClientInfo(url=f"{cluster.api_addresses[0]}{path}", headers=headers, auth=auth)
