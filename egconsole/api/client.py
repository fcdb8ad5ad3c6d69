from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union

import httpx

from egconsole.api import urls
from egconsole.clusters.registry import ClientInfo, ClusterSpec, get_client_info, get_cluster
from egconsole.codec.yaml_json import yaml_to_json
from egconsole.models import EGObject, Status
from egconsole.objects.classifier import Objects, classify_objects
from egconsole.objects.status import reshape_status
from egconsole.settings import Settings


@dataclass(frozen=True)
class ObjectClient:
    """
    Thin async wrapper over the gateway management API for one cluster.

    Every call opens its own client, issues exactly one request and raises on
    any HTTP or network failure (no retries, no caching). YAML input is
    converted before the request, so a parse error never reaches the network.
    Designed to be mockable in tests (httpx transport override).
    """

    cluster: ClusterSpec
    timeout_s: float = 15.0
    transport: httpx.AsyncBaseTransport | None = None

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout_s, transport=self.transport)

    def _info(self, path: str) -> ClientInfo:
        return get_client_info(self.cluster, path)

    async def _send(self, method: str, path: str, *, json_body: str | None = None) -> httpx.Response:
        info = self._info(path)
        headers = dict(info.headers)
        if json_body is not None:
            headers["Content-Type"] = "application/json"
        async with self._client() as c:
            r = await c.request(method, info.url, headers=headers, content=json_body, auth=info.auth)
            r.raise_for_status()
        return r

    async def get_objects(self) -> Objects:
        r = await self._send("GET", urls.OBJECTS)
        data = r.json()
        return classify_objects(data or [])

    async def find_object(self, name: str) -> EGObject | None:
        objs = await self.get_objects()
        return objs.find(name)

    async def create_object(self, object_yaml: str) -> None:
        body = yaml_to_json(object_yaml)
        await self._send("POST", urls.OBJECTS, json_body=body)

    async def update_object(self, target: Union[EGObject, str], object_yaml: str) -> None:
        # Callers check that the edited YAML keeps the target's kind and name.
        name = target.name if isinstance(target, EGObject) else target
        body = yaml_to_json(object_yaml)
        await self._send("PUT", urls.object_item(name), json_body=body)

    async def delete_object(self, name: str) -> None:
        await self._send("DELETE", urls.object_item(name))

    async def get_object_status(self, name: str) -> Status:
        r = await self._send("GET", urls.status_object_item(name))
        data: Dict[str, Any] = r.json() or {}
        return reshape_status(data, name)


def client_for(
    cluster: str | None = None,
    *,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ObjectClient:
    """Resolve a cluster name through the registry and bind a client to it."""
    s = settings or Settings()
    return ObjectClient(cluster=get_cluster(s, cluster), timeout_s=s.request_timeout_s, transport=transport)


async def get_objects(cluster: str | None = None, *, settings: Settings | None = None) -> Objects:
    return await client_for(cluster, settings=settings).get_objects()


async def create_object(cluster: str | None, object_yaml: str, *, settings: Settings | None = None) -> None:
    await client_for(cluster, settings=settings).create_object(object_yaml)


async def update_object(
    cluster: str | None,
    target: Union[EGObject, str],
    object_yaml: str,
    *,
    settings: Settings | None = None,
) -> None:
    await client_for(cluster, settings=settings).update_object(target, object_yaml)


async def delete_object(cluster: str | None, name: str, *, settings: Settings | None = None) -> None:
    await client_for(cluster, settings=settings).delete_object(name)


async def get_object_status(cluster: str | None, name: str, *, settings: Settings | None = None) -> Status:
    return await client_for(cluster, settings=settings).get_object_status(name)
