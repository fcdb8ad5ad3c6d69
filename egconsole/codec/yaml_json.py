from __future__ import annotations

import base64
import json
import math
from datetime import date, datetime
from typing import Any

import yaml

from egconsole.models import WireModel


def _json_key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    if isinstance(key, (datetime, date)):
        return key.isoformat()
    return str(key)


def _jsonable(value: Any) -> Any:
    """
    Reduce what PyYAML's safe loader can produce to plain JSON values:
    timestamps become ISO strings, non-finite floats become null, mapping keys
    become strings, sets become mappings to null and binary becomes base64.
    """
    if isinstance(value, dict):
        return {_json_key(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return {_json_key(k): None for k in value}
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    return value


def load_yaml(text: str) -> Any:
    """Parse user-edited YAML. Raises yaml.YAMLError on invalid input."""
    return yaml.safe_load(text)


def yaml_to_json(text: str) -> str:
    """
    Convert user-edited YAML to the JSON body the management API expects.
    No schema checks: anything that parses is submitted as-is.
    """
    return json.dumps(_jsonable(load_yaml(text)), ensure_ascii=False, allow_nan=False)


def dump_yaml(value: Any) -> str:
    """Render an object (or a status map) as YAML for display, keeping key order."""
    if isinstance(value, WireModel):
        value = value.to_wire()
    return yaml.safe_dump(value, sort_keys=False, allow_unicode=True, default_flow_style=False)
