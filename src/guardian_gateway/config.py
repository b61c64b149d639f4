"""Config loader for the gateway: dict, YAML file or environment.

Example YAML:

    guardian_gateway:
      host: 127.0.0.1
      port: 3000
      encryption_key: change-me
      failure_threshold: 3
      log_level: INFO
      audit:
        backend: json            # "json" or "sqlite"
        path: db/audit-log.json
      generator:
        delay: 2.0               # seconds, mock generator only

Every key is optional.  Environment variables (``PORT``,
``ENCRYPTION_KEY``, ``GUARDIAN_*``) are read by :func:`load_from_env`.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Mapping

from .audit import AuditStore, JsonAuditStore, SqliteAuditStore
from .breaker import FAILURE_THRESHOLD, FailureGate
from .crypto import AuditCipher
from .gateway import SecureInquiry
from .generation import DEFAULT_DELAY, MockGenerator
from .redactor import Redactor

DEFAULT_PORT = 3000
DEFAULT_AUDIT_PATH = "db/audit-log.json"


def _port(raw: Any) -> int:
    try:
        port = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_PORT
    return port if port > 0 else DEFAULT_PORT


def load_config(data: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize a config dict (from YAML, env or inline)."""
    # Support nested under "guardian_gateway" key or flat
    if "guardian_gateway" in data:
        data = data["guardian_gateway"] or {}

    audit = data.get("audit") or {}
    generator = data.get("generator") or {}
    return {
        "host": data.get("host") or "127.0.0.1",
        "port": _port(data.get("port", DEFAULT_PORT)),
        "encryption_key": data.get("encryption_key") or None,
        "failure_threshold": int(data.get("failure_threshold", FAILURE_THRESHOLD)),
        "log_level": str(data.get("log_level") or "INFO").upper(),
        "audit_backend": audit.get("backend") or "json",
        "audit_path": audit.get("path") or DEFAULT_AUDIT_PATH,
        "generator_delay": float(generator.get("delay", DEFAULT_DELAY)),
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml
    with open(path) as f:
        return load_config(yaml.safe_load(f) or {})


def load_from_env(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Load config from environment variables."""
    env = os.environ if environ is None else environ
    data: dict[str, Any] = {
        "host": env.get("GUARDIAN_HOST"),
        "port": env.get("PORT") or DEFAULT_PORT,
        "encryption_key": env.get("ENCRYPTION_KEY"),
        "log_level": env.get("GUARDIAN_LOG_LEVEL"),
        "audit": {
            "backend": env.get("GUARDIAN_AUDIT_BACKEND"),
            "path": env.get("GUARDIAN_AUDIT_PATH"),
        },
        "generator": {},
    }
    if env.get("GUARDIAN_FAILURE_THRESHOLD"):
        data["failure_threshold"] = env["GUARDIAN_FAILURE_THRESHOLD"]
    if env.get("GUARDIAN_MOCK_DELAY"):
        data["generator"]["delay"] = env["GUARDIAN_MOCK_DELAY"]
    return load_config(data)


def create_store(cfg: Mapping[str, Any]) -> AuditStore:
    backend = cfg["audit_backend"]
    if backend == "json":
        return JsonAuditStore(cfg["audit_path"])
    if backend == "sqlite":
        return SqliteAuditStore(cfg["audit_path"])
    raise ValueError(f"unknown audit backend: {backend!r}")


def create_gateway(config: Mapping[str, Any]) -> SecureInquiry:
    """Create a fully wired gateway from a config dict."""
    cfg = load_config(config) if "audit_backend" not in config else config

    return SecureInquiry(
        generator=MockGenerator(delay=cfg["generator_delay"]),
        store=create_store(cfg),
        cipher=AuditCipher(cfg["encryption_key"]),
        redactor=Redactor(),
        gate=FailureGate(cfg["failure_threshold"]),
    )
