from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any, List, Optional

from egconsole.api.client import ObjectClient, client_for
from egconsole.codec.yaml_json import dump_yaml, load_yaml
from egconsole.objects.edits import check_edit_identity
from egconsole.settings import Settings


def _read_file(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


async def _run(client: ObjectClient, args: argparse.Namespace) -> Any:
    if args.command == "list":
        objs = await client.get_objects()
        return {
            "pipelines": [o.to_wire() for o in objs.pipelines],
            "httpServers": [o.to_wire() for o in objs.http_servers],
            "others": [o.to_wire() for o in objs.others],
        }
    if args.command == "controllers":
        objs = await client.get_objects()
        return [{"name": o.name, "kind": o.kind} for o in objs.controllers(args.search)]
    if args.command == "create":
        await client.create_object(_read_file(args.file))
        return None
    if args.command == "update":
        text = _read_file(args.file)
        edited = load_yaml(text)
        kind = args.kind
        if kind is None:
            current = await client.find_object(args.name)
            if current is None:
                raise KeyError(f"Object not found: {args.name}")
            kind = current.kind
        check_edit_identity(edited, name=args.name, kind=kind)
        await client.update_object(args.name, text)
        return None
    if args.command == "delete":
        await client.delete_object(args.name)
        return None
    if args.command == "status":
        return await client.get_object_status(args.name)
    raise ValueError(f"unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="egconsole", description="Manage gateway objects over the management API.")
    ap.add_argument("--cluster", default=None, help="cluster name (defaults to EGCONSOLE_DEFAULT_CLUSTER)")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="list all objects grouped by kind")
    p = sub.add_parser("controllers", help="list generic objects")
    p.add_argument("--search", default="")
    p = sub.add_parser("create", help="create an object from YAML")
    p.add_argument("-f", "--file", required=True, help="YAML file, or - for stdin")
    p = sub.add_parser("update", help="replace an object from YAML")
    p.add_argument("name")
    p.add_argument("-f", "--file", required=True, help="YAML file, or - for stdin")
    p.add_argument("--kind", default=None, help="expected kind (looked up from the cluster when omitted)")
    p = sub.add_parser("delete", help="delete an object")
    p.add_argument("name")
    p = sub.add_parser("status", help="show per-node status of an object")
    p.add_argument("name")
    p = sub.add_parser("serve", help="run the console JSON service")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8089)
    return ap


def main(argv: Optional[List[str]] = None, *, client: ObjectClient | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "serve":
        import uvicorn

        from egconsole.service.app import create_app

        uvicorn.run(create_app(Settings()), host=args.host, port=args.port)
        return 0
    c = client or client_for(args.cluster, settings=Settings())
    out = asyncio.run(_run(c, args))
    if out is not None:
        sys.stdout.write(dump_yaml(out))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
