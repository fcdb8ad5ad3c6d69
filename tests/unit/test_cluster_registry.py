from __future__ import annotations

import json

import pytest

from egconsole.api import urls
from egconsole.clusters.registry import get_client_info, get_cluster, list_clusters, parse_cluster_registry
from egconsole.settings import Settings


def test_cluster_registry_skips_invalid_entries() -> None:
    specs = parse_cluster_registry(
        json.dumps(
            [
                {"name": "prod", "api_addresses": ["http://10.0.0.1:2381/", "http://10.0.0.2:2381"], "username": "admin", "password": "pw"},
                {"name": "", "api_addresses": ["http://x"]},
                {"name": "no-address"},
                "garbage",
                {"name": "dev", "api_addresses": "http://127.0.0.1:2381", "headers": {"X-Team": "edge"}},
            ]
        )
    )
    assert [s.name for s in specs] == ["prod", "dev"]
    assert specs[0].api_addresses == ["http://10.0.0.1:2381", "http://10.0.0.2:2381"]
    assert specs[1].headers == {"X-Team": "edge"}


def test_cluster_registry_tolerates_bad_json() -> None:
    assert parse_cluster_registry("not json") == []
    assert parse_cluster_registry(json.dumps({"name": "x"})) == []
    assert parse_cluster_registry(None) == []


def test_cluster_falls_back_to_single_address_settings() -> None:
    s = Settings(api_address="http://eg:2381")
    clusters = list_clusters(s)
    assert [c.name for c in clusters] == ["default"]
    assert get_cluster(s).api_addresses == ["http://eg:2381"]


def test_get_cluster_unknown_raises() -> None:
    s = Settings()
    with pytest.raises(KeyError):
        get_cluster(s, "nope")


def test_client_info_uses_first_address_and_auth() -> None:
    s = Settings(
        clusters_json=json.dumps(
            [{"name": "prod", "api_addresses": ["http://a:2381", "http://b:2381"], "username": "u", "password": "p", "headers": {"X-Team": "edge"}}]
        ),
        default_cluster="prod",
    )
    info = get_client_info(get_cluster(s), urls.object_item("my pipeline"))
    assert info.url == "http://a:2381/apis/v2/objects/my%20pipeline"
    assert info.auth == ("u", "p")
    assert info.headers["X-Team"] == "edge"


def test_status_url_template() -> None:
    assert urls.OBJECTS == "/apis/v2/objects"
    assert urls.status_object_item("p1") == "/apis/v2/status/objects/p1"
