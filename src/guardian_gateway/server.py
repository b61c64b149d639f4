"""HTTP front end for the gateway.

Endpoints:
    POST /secure-inquiry  {"identifier": "...", "message": "..."} → {"answer": "..."}
    GET  /health          liveness check

Status codes: 200 answered, 400 malformed request, 503 failure gate
open ("Service Busy"), 500 anything else.  All bodies are JSON.
"""

from __future__ import annotations
import asyncio
import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

from .breaker import CircuitOpenError
from .gateway import SecureInquiry

logger = logging.getLogger(__name__)

BUSY_MESSAGE = "Service Busy"
INTERNAL_ERROR = "Internal server error"


def _validate_field(body: dict, name: str, *aliases: str) -> str | None:
    value = body.get(name)
    for alias in aliases:
        if value is None:
            value = body.get(alias)
    if value is None:
        return f"{name} is required"
    if not isinstance(value, str):
        return f"{name} must be a string"
    if not value.strip():
        return f"{name} cannot be empty"
    return None


def validate_request(body: Any) -> str | None:
    """Return the first validation error for an inquiry body, or None."""
    if not body:
        return "Request body is required"
    if not isinstance(body, dict):
        return "Request body must be a JSON object"
    return (
        _validate_field(body, "identifier", "userId")
        or _validate_field(body, "message")
    )


class InquiryHandler(BaseHTTPRequestHandler):
    """HTTP request handler bound to one :class:`SecureInquiry`."""

    gateway: SecureInquiry

    def _read_json(self) -> Any:
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length).decode("utf-8")
        return json.loads(body) if body else None

    def _respond(self, status: int, data: Any) -> None:
        body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - " + format, self.address_string(), *args)

    def do_GET(self) -> None:
        if self.path == "/health":
            self._respond(200, {"status": "ok"})
        else:
            self._respond(404, {"error": "not found"})

    def do_POST(self) -> None:
        if self.path != "/secure-inquiry":
            self._respond(404, {"error": "not found"})
            return

        try:
            body = self._read_json()
        except (ValueError, UnicodeDecodeError):
            self._respond(400, {"error": "Request body must be valid JSON"})
            return

        error = validate_request(body)
        if error:
            self._respond(400, {"error": error})
            return

        identifier = body.get("identifier") or body.get("userId")
        try:
            result = asyncio.run(self.gateway.execute(identifier, body["message"]))
        except CircuitOpenError:
            self._respond(503, {"error": BUSY_MESSAGE})
            return
        except Exception:
            logger.exception("secure inquiry failed for %s", identifier)
            self._respond(500, {"error": INTERNAL_ERROR})
            return

        self._respond(200, {"answer": result.answer})


def make_server(gateway: SecureInquiry, host: str = "127.0.0.1", port: int = 3000) -> ThreadingHTTPServer:
    """Build (but do not start) an HTTP server for ``gateway``."""
    handler = type("BoundInquiryHandler", (InquiryHandler,), {"gateway": gateway})
    return ThreadingHTTPServer((host, port), handler)


def serve(gateway: SecureInquiry, host: str = "127.0.0.1", port: int = 3000) -> None:
    """Run the gateway until interrupted."""
    server = make_server(gateway, host, port)
    logger.info("Guardian Integration Gateway listening on http://%s:%d", host, port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("shutting down")
    finally:
        server.server_close()
