from __future__ import annotations

import json
import os
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional


class AuditEvent(str, Enum):
    created = "object.created"
    updated = "object.updated"
    deleted = "object.deleted"
    failed = "object.failed"


@dataclass(frozen=True)
class AuditRecord:
    ts: str
    correlation_id: str
    actor: str
    event_type: str
    cluster: str
    action: str
    name: Optional[str] = None
    kind: Optional[str] = None
    error: Optional[str] = None


_ACTIONS = {
    AuditEvent.created: "create",
    AuditEvent.updated: "update",
    AuditEvent.deleted: "delete",
}


class AuditLogger:
    """
    Append-only JSONL trail of object mutations made through the console.

    One line per create/update/delete attempt. Failed attempts are recorded as
    `object.failed` with the action that was tried and a truncated error.
    """

    def __init__(self, path: str, *, actor: str = "egconsole"):
        self.path = path
        self.actor = actor

    def record(
        self,
        event: AuditEvent,
        *,
        cluster: str,
        name: Optional[str] = None,
        kind: Optional[str] = None,
        action: Optional[str] = None,
        error: Optional[str] = None,
    ) -> AuditRecord:
        rec = AuditRecord(
            ts=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            correlation_id=uuid.uuid4().hex,
            actor=self.actor,
            event_type=event.value,
            cluster=cluster,
            action=action or _ACTIONS.get(event, ""),
            name=name,
            kind=kind,
            error=error[:500] if error else None,
        )
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(asdict(rec), ensure_ascii=False) + "\n")
        return rec


def tail_jsonl(path: str, *, max_lines: int = 200) -> List[AuditRecord]:
    if not os.path.exists(path):
        return []
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        lines = f.read().splitlines()
    out: List[AuditRecord] = []
    for ln in lines[-max_lines:]:
        try:
            obj = json.loads(ln)
        except json.JSONDecodeError:
            continue
        if not isinstance(obj, dict):
            continue
        out.append(
            AuditRecord(
                ts=str(obj.get("ts", "")),
                correlation_id=str(obj.get("correlation_id", "")),
                actor=str(obj.get("actor", "")),
                event_type=str(obj.get("event_type", "")),
                cluster=str(obj.get("cluster", "")),
                action=str(obj.get("action", "")),
                name=obj.get("name"),
                kind=obj.get("kind"),
                error=obj.get("error"),
            )
        )
    return out
