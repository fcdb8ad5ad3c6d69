from __future__ import annotations

from typing import Any, Dict

import httpx
import yaml
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from egconsole.api.client import ObjectClient
from egconsole.clusters.registry import get_cluster, list_clusters
from egconsole.codec.yaml_json import dump_yaml, load_yaml
from egconsole.objects.edits import EditIdentityError, check_edit_identity
from egconsole.settings import Settings
from egconsole.telemetry.audit import AuditEvent, AuditLogger, tail_jsonl

router = APIRouter()

# Failures a management API call can end in.
_CALL_ERRORS = (KeyError, ValueError, yaml.YAMLError, httpx.HTTPError)


def create_app(settings: Settings | None = None, *, transport: httpx.AsyncBaseTransport | None = None) -> FastAPI:
    """
    App factory used by uvicorn and tests.

    `transport` overrides the httpx transport of every management API call,
    which is how tests fake the gateway.
    """
    s = settings or Settings()
    new_app = FastAPI(title="egconsole", version="0.1.0")
    new_app.state.settings = s
    new_app.state.transport = transport
    new_app.state.audit = AuditLogger(s.audit_log_path)
    new_app.include_router(router)
    return new_app


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def _audit(request: Request) -> AuditLogger:
    return request.app.state.audit


def _client(request: Request, cluster: str) -> ObjectClient:
    s = _settings(request)
    return ObjectClient(
        cluster=get_cluster(s, cluster),
        timeout_s=s.request_timeout_s,
        transport=request.app.state.transport,
    )


def _error(status_code: int, error: str, **extra: Any) -> JSONResponse:
    body: Dict[str, Any] = {"ok": False, "error": error}
    body.update(extra)
    return JSONResponse(body, status_code=status_code)


def _failure_response(e: Exception) -> JSONResponse:
    if isinstance(e, KeyError):
        return _error(404, "cluster_not_found", detail=str(e.args[0]) if e.args else "")
    if isinstance(e, (yaml.YAMLError, UnicodeDecodeError)):
        return _error(400, "invalid_yaml", detail=str(e))
    if isinstance(e, EditIdentityError):
        return _error(400, "edit_changed_name_or_kind", detail=str(e))
    if isinstance(e, httpx.HTTPStatusError):
        code = e.response.status_code
        return _error(code, f"upstream_http_{code}", detail=e.response.text[:1000])
    if isinstance(e, httpx.TransportError):
        return _error(502, "upstream_unreachable", detail=str(e))
    if isinstance(e, ValueError):
        # Undecodable JSON or an object that does not fit its shape.
        return _error(502, "upstream_invalid_payload", detail=str(e)[:1000])
    raise e


async def _yaml_body(request: Request) -> str:
    raw = await request.body()
    return raw.decode("utf-8")


def _identity(edited: Any) -> Dict[str, Any]:
    if not isinstance(edited, dict):
        return {}
    return {"name": edited.get("name"), "kind": edited.get("kind")}


@router.get("/health")
def health(request: Request) -> Dict[str, Any]:
    return {"ok": True, "version": "0.1.0"}


@router.get("/api/clusters")
def clusters(request: Request) -> JSONResponse:
    s = _settings(request)
    return JSONResponse(
        {
            "default": s.default_cluster,
            "clusters": [{"name": c.name, "api_addresses": c.api_addresses} for c in list_clusters(s)],
        }
    )


@router.get("/api/clusters/{cluster}/objects")
async def list_objects(request: Request, cluster: str) -> JSONResponse:
    try:
        objs = await _client(request, cluster).get_objects()
    except _CALL_ERRORS as e:
        return _failure_response(e)
    return JSONResponse(
        {
            "pipelines": [o.to_wire() for o in objs.pipelines],
            "httpServers": [o.to_wire() for o in objs.http_servers],
            "others": [o.to_wire() for o in objs.others],
        }
    )


@router.get("/api/clusters/{cluster}/controllers")
async def list_controllers(request: Request, cluster: str, search: str = "") -> JSONResponse:
    try:
        objs = await _client(request, cluster).get_objects()
    except _CALL_ERRORS as e:
        return _failure_response(e)
    return JSONResponse({"controllers": [{"name": o.name, "kind": o.kind} for o in objs.controllers(search)]})


@router.post("/api/clusters/{cluster}/objects")
async def create(request: Request, cluster: str) -> JSONResponse:
    ident: Dict[str, Any] = {}
    try:
        text = await _yaml_body(request)
        ident = _identity(load_yaml(text))
        await _client(request, cluster).create_object(text)
    except _CALL_ERRORS as e:
        _audit(request).record(AuditEvent.failed, cluster=cluster, action="create", error=str(e), **ident)
        return _failure_response(e)
    _audit(request).record(AuditEvent.created, cluster=cluster, **ident)
    return JSONResponse({"ok": True}, status_code=201)


@router.put("/api/clusters/{cluster}/objects/{name}")
async def update(request: Request, cluster: str, name: str, kind: str | None = None) -> JSONResponse:
    """
    Replace an object. The edited YAML must keep the object's name and kind;
    the kind is taken from `?kind=` or, when absent, from the current object.
    """
    try:
        text = await _yaml_body(request)
        edited = load_yaml(text)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        return _failure_response(e)
    if not isinstance(edited, dict):
        return _error(400, "invalid_yaml", detail="object must be a mapping")

    try:
        client = _client(request, cluster)
        if kind is None:
            current = await client.find_object(name)
            if current is None:
                return _error(404, "object_not_found", detail=name)
            kind = current.kind
        check_edit_identity(edited, name=name, kind=kind)
    except _CALL_ERRORS as e:
        return _failure_response(e)

    try:
        await client.update_object(name, text)
    except _CALL_ERRORS as e:
        _audit(request).record(AuditEvent.failed, cluster=cluster, action="update", name=name, kind=kind, error=str(e))
        return _failure_response(e)
    _audit(request).record(AuditEvent.updated, cluster=cluster, name=name, kind=kind)
    return JSONResponse({"ok": True})


@router.delete("/api/clusters/{cluster}/objects/{name}")
async def delete(request: Request, cluster: str, name: str) -> JSONResponse:
    try:
        await _client(request, cluster).delete_object(name)
    except _CALL_ERRORS as e:
        _audit(request).record(AuditEvent.failed, cluster=cluster, action="delete", name=name, error=str(e))
        return _failure_response(e)
    _audit(request).record(AuditEvent.deleted, cluster=cluster, name=name)
    return JSONResponse({"ok": True})


@router.get("/api/clusters/{cluster}/objects/{name}/status")
async def object_status(request: Request, cluster: str, name: str, format: str = "json"):
    try:
        status = await _client(request, cluster).get_object_status(name)
    except _CALL_ERRORS as e:
        return _failure_response(e)
    if format == "yaml":
        return PlainTextResponse(dump_yaml(status), media_type="application/yaml")
    return JSONResponse({"name": name, "status": status})


@router.get("/api/audit/recent")
def audit_recent(request: Request, n: int = 200) -> JSONResponse:
    s = _settings(request)
    records = [r.__dict__ for r in tail_jsonl(s.audit_log_path, max_lines=max(1, min(n, 2000)))]
    return JSONResponse({"records": records})


app = create_app()
