from __future__ import annotations

import json
from pathlib import Path

from egconsole.telemetry.audit import AuditEvent, AuditLogger, tail_jsonl


def test_audit_logger_records_object_mutations(tmp_path: Path) -> None:
    path = tmp_path / "audit" / "log.jsonl"
    a = AuditLogger(str(path))
    assert not path.parent.exists()

    created = a.record(AuditEvent.created, cluster="prod", name="p1", kind="Pipeline")
    a.record(AuditEvent.failed, cluster="prod", action="delete", name="x", error="boom" * 200)
    with open(path, "a", encoding="utf-8") as f:
        f.write("not json\n")
        f.write("[1, 2]\n")

    records = tail_jsonl(str(path), max_lines=10)
    assert [r.event_type for r in records] == ["object.created", "object.failed"]
    assert records[0] == created
    assert (records[0].cluster, records[0].action, records[0].name, records[0].kind) == ("prod", "create", "p1", "Pipeline")
    assert records[0].actor == "egconsole"
    assert records[0].ts.endswith("Z")
    assert records[1].action == "delete"
    assert records[1].kind is None
    assert len(records[1].error or "") == 500

    first = json.loads(path.read_text(encoding="utf-8").splitlines()[0])
    assert set(first) == {"ts", "correlation_id", "actor", "event_type", "cluster", "action", "name", "kind", "error"}

    assert [r.event_type for r in tail_jsonl(str(path), max_lines=3)] == ["object.failed"]


def test_audit_actions_follow_event(tmp_path: Path) -> None:
    a = AuditLogger(str(tmp_path / "log.jsonl"), actor="cli")
    assert a.record(AuditEvent.updated, cluster="c").action == "update"
    assert a.record(AuditEvent.deleted, cluster="c").action == "delete"
    assert a.record(AuditEvent.failed, cluster="c").action == ""
    assert {r.actor for r in tail_jsonl(str(tmp_path / "log.jsonl"))} == {"cli"}


def test_tail_jsonl_missing_file(tmp_path: Path) -> None:
    assert tail_jsonl(str(tmp_path / "missing.jsonl")) == []
