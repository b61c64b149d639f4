"""CLI interface for guardian-gateway.

Usage:
    # Redact text (stdin: raw text, stdout: sanitized text)
    echo 'Mail john@x.com, SSN 123456789' | guardian-gateway redact

    # Same, with per-category counts as JSON
    echo 'Mail john@x.com' | guardian-gateway redact --json

    # Run the HTTP gateway
    ENCRYPTION_KEY=secret guardian-gateway serve --port 3000

    # Dump the audit log, optionally decrypting originals
    ENCRYPTION_KEY=secret guardian-gateway audit --decrypt

Settings come from ``--config FILE.yaml`` when given, otherwise from the
environment (see :mod:`guardian_gateway.config`).
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import Any

from .config import create_gateway, create_store, load_from_env, load_from_yaml
from .crypto import AuditCipher
from .redactor import Redactor
from .server import serve


def _load(args: argparse.Namespace) -> dict[str, Any]:
    cfg = load_from_yaml(args.config) if args.config else load_from_env()
    if args.log_level:
        cfg["log_level"] = args.log_level.upper()
    return cfg


def cmd_redact(args: argparse.Namespace, cfg: dict[str, Any]) -> None:
    """Redact PII from text on stdin."""
    result = Redactor().redact(sys.stdin.read())
    if args.json:
        json.dump({"text": result.text, "counts": result.counts}, sys.stdout, ensure_ascii=False)
        sys.stdout.write("\n")
    else:
        sys.stdout.write(result.text)


def cmd_serve(args: argparse.Namespace, cfg: dict[str, Any]) -> None:
    """Run the HTTP gateway."""
    if args.host:
        cfg["host"] = args.host
    if args.port:
        cfg["port"] = args.port
    serve(create_gateway(cfg), host=cfg["host"], port=cfg["port"])


def cmd_audit(args: argparse.Namespace, cfg: dict[str, Any]) -> None:
    """Dump audit entries as JSON."""
    store = create_store(cfg)
    cipher = AuditCipher(cfg["encryption_key"])
    rows = []
    for entry in store.entries():
        row = entry.to_dict()
        if args.decrypt:
            row["originalMessage"] = cipher.decrypt(entry.encrypted_original)
        rows.append(row)
    json.dump(rows, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="guardian-gateway",
        description="PII-redacting gateway in front of an answer-generation service",
    )
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--log-level", default="", help="Override log level")

    sub = parser.add_subparsers(dest="command", required=True)
    p_redact = sub.add_parser("redact", help="Redact text (stdin)")
    p_redact.add_argument("--json", action="store_true", help="Emit text and counts as JSON")
    p_serve = sub.add_parser("serve", help="Run the HTTP gateway")
    p_serve.add_argument("--host", default="")
    p_serve.add_argument("--port", type=int, default=0)
    p_audit = sub.add_parser("audit", help="Dump the audit log")
    p_audit.add_argument("--decrypt", action="store_true", help="Include decrypted originals")

    args = parser.parse_args(argv)
    cfg = _load(args)
    logging.basicConfig(
        level=cfg["log_level"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    cmds = {
        "redact": cmd_redact,
        "serve": cmd_serve,
        "audit": cmd_audit,
    }
    cmds[args.command](args, cfg)


if __name__ == "__main__":
    main()
