from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="EGCONSOLE_", extra="ignore")

    # Single-cluster shortcut, used when no registry is configured.
    api_address: str = "http://localhost:2381"
    api_username: str | None = None
    api_password: str | None = None

    # -------- Multi-cluster support --------
    # JSON string describing the clusters the console can manage.
    #
    # Format (v1):
    # [
    #   {
    #     "name": "prod",
    #     "api_addresses": ["http://10.0.0.1:2381", "http://10.0.0.2:2381"],
    #     "username": "admin",
    #     "password": "secret",
    #     "headers": {"X-Team": "edge"}
    #   }
    # ]
    clusters_json: str | None = None
    default_cluster: str = "default"

    # Management API calls are never retried; this only bounds a single request.
    request_timeout_s: float = 15.0

    audit_log_path: str = "var/audit/egconsole_audit.jsonl"
    public_base_url: str = "http://localhost:8089"
