"""Secure inquiry flow: gate check, redact, generate, audit.

Usage:

    gateway = SecureInquiry(
        redactor=Redactor(),
        gate=FailureGate(),
        generator=MockGenerator(),
        store=JsonAuditStore("db/audit-log.json"),
        cipher=AuditCipher(os.environ["ENCRYPTION_KEY"]),
    )
    result = await gateway.execute("user-42", "Email me at john@acme.com")
    result.answer

Only the sanitized message ever reaches the generator.  The original is
kept, encrypted, in the audit entry written after a successful answer.
Failed and rejected calls leave no audit entry.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .audit import AuditStore
from .breaker import CircuitOpenError, FailureGate
from .crypto import AuditCipher
from .generation import Generator
from .redactor import Redactor
from .types import AuditEntry, InquiryResult

logger = logging.getLogger(__name__)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class SecureInquiry:
    """Orchestrates one inquiry against injected collaborators."""

    generator: Generator
    store: AuditStore
    cipher: AuditCipher
    redactor: Redactor = field(default_factory=Redactor)
    gate: FailureGate = field(default_factory=FailureGate)

    async def execute(self, identifier: str, message: str) -> InquiryResult:
        """Answer ``message`` on behalf of ``identifier``.

        Raises:
            CircuitOpenError: the failure gate is open; nothing was called.
            Exception: whatever the generator or audit store raised.
        """
        if self.gate.is_open():
            logger.info("rejecting inquiry from %s: failure gate open", identifier)
            raise CircuitOpenError()

        redacted = self.redactor.redact(message)
        if redacted.total:
            logger.info("redacted %s from inquiry by %s", redacted.counts, identifier)

        try:
            answer = await self.generator.generate(redacted.text)
        except Exception as e:
            self.gate.record_failure()
            logger.warning(
                "generation failed for %s (%s), %d consecutive failures",
                identifier, type(e).__name__, self.gate.get_failure_count(),
            )
            raise
        self.gate.record_success()

        entry = AuditEntry(
            identifier=identifier,
            timestamp=_utc_timestamp(),
            encrypted_original=self.cipher.encrypt(message),
            sanitized=redacted.text,
        )
        await self.store.save(entry)

        return InquiryResult(answer=answer)
