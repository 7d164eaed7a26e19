from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .models import DeliverySettings, Gav, SyncSettings

DEFAULT_CONFIG: dict[str, Any] = {
    "nexus": {
        "servername": "localhost",
        "port": "8081",
        "content_path": "/nexus/content/repositories",
        "username": "admin",
        "password": "admin123",
        "repository": "releases",
        "upload": False,
        # None keeps requests' default of waiting indefinitely.
        "timeout_sec": None,
    },
    "delivery": {
        "url": "http://localhost:8081/nexus/content/repositories/APDS",
        "username": "",
        "password": "",
        "group_id": "",
        "artifact_id": "",
        "version": "0.0.0",
        "packaging": "zip",
        "dry_run": False,
        "insecure_skip_verify": False,
        "timeout_sec": None,
    },
    "runtime": {
        "log_level": "INFO",
    },
}


def _deep_update(base: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_update(base[key], value)
        else:
            base[key] = value
    return base


def _validate_sections(cfg: dict[str, Any], path: Path) -> None:
    for section in DEFAULT_CONFIG:
        if not isinstance(cfg.get(section), dict):
            raise ValueError(f"Config section '{section}' in {path} must be a mapping")
    unknown = sorted(set(cfg) - set(DEFAULT_CONFIG))
    if unknown:
        raise ValueError(f"Unknown config sections in {path}: {', '.join(unknown)}")


def load_config(config_path: str | Path | None) -> dict[str, Any]:
    cfg = json.loads(json.dumps(DEFAULT_CONFIG))
    if not config_path:
        return cfg
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict):
        raise ValueError("Config root must be a mapping")
    _deep_update(cfg, payload)
    _validate_sections(cfg, path)
    return cfg


def apply_cli_overrides(cfg: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    def _drop_none(value: Any) -> Any:
        if isinstance(value, dict):
            return {k: _drop_none(v) for k, v in value.items() if v is not None}
        if isinstance(value, list):
            return [_drop_none(v) for v in value if v is not None]
        return value

    cleaned = _drop_none(overrides)
    _deep_update(cfg, cleaned)
    return cfg


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"", "0", "false", "no", "off"}:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def sync_settings(cfg: dict[str, Any]) -> SyncSettings:
    nexus = cfg.get("nexus", {})
    return SyncSettings(
        servername=str(nexus.get("servername") or "localhost"),
        port=str(nexus.get("port") or "8081"),
        content_path=str(nexus.get("content_path") or ""),
        repository=str(nexus.get("repository") or ""),
        username=str(nexus.get("username") or ""),
        password=str(nexus.get("password") or ""),
        upload=_as_bool(nexus.get("upload")),
        timeout_sec=_optional_float(nexus.get("timeout_sec")),
    )


def delivery_settings(cfg: dict[str, Any]) -> DeliverySettings:
    delivery = cfg.get("delivery", {})
    group_id = str(delivery.get("group_id") or "").strip()
    artifact_id = str(delivery.get("artifact_id") or "").strip()
    if not group_id or not artifact_id:
        raise ValueError("Both group id and artifact id are required")
    gav = Gav(
        group_id=group_id,
        artifact_id=artifact_id,
        version=str(delivery.get("version") or "0.0.0"),
        packaging=str(delivery.get("packaging") or "zip"),
    )
    return DeliverySettings(
        url=str(delivery.get("url") or ""),
        gav=gav,
        username=str(delivery.get("username") or ""),
        password=str(delivery.get("password") or ""),
        dry_run=_as_bool(delivery.get("dry_run")),
        insecure_skip_verify=_as_bool(delivery.get("insecure_skip_verify")),
        timeout_sec=_optional_float(delivery.get("timeout_sec")),
    )
