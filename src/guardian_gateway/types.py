"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class Placeholder(str, Enum):
    """Replacement tokens, one per PII category."""
    EMAIL = "<REDACTED: EMAIL>"
    CREDIT_CARD = "<REDACTED: CREDIT_CARD>"
    SSN = "<REDACTED: SSN>"


@dataclass(slots=True)
class RedactedMessage:
    """Result of redacting a message."""
    text: str                                         # sanitized text
    counts: dict[str, int] = field(default_factory=dict)  # category → spans replaced

    @property
    def total(self) -> int:
        return sum(self.counts.values())


@dataclass(frozen=True, slots=True)
class AuditEntry:
    """One audited inquiry. The original message is stored encrypted only."""
    identifier: str
    timestamp: str                 # ISO-8601, UTC
    encrypted_original: str        # "iv:ciphertext" hex
    sanitized: str

    def to_dict(self) -> dict[str, str]:
        return {
            "identifier": self.identifier,
            "timestamp": self.timestamp,
            "originalMessageEncrypted": self.encrypted_original,
            "sanitizedMessage": self.sanitized,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AuditEntry":
        return cls(
            identifier=data.get("identifier", data.get("userId", "")),
            timestamp=data.get("timestamp", ""),
            encrypted_original=data.get("originalMessageEncrypted", ""),
            sanitized=data.get("sanitizedMessage", ""),
        )


@dataclass(frozen=True, slots=True)
class InquiryResult:
    """What the gateway hands back to its caller."""
    answer: str
