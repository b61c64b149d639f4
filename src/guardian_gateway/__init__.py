"""Guardian Gateway — PII redaction and failure gating in front of an answer service."""

from .redactor import Redactor, sanitize
from .patterns import is_valid_luhn
from .breaker import FailureGate, CircuitOpenError, FAILURE_THRESHOLD
from .crypto import AuditCipher, EncryptionKeyError
from .audit import AuditStore, JsonAuditStore, SqliteAuditStore
from .generation import Generator, MockGenerator
from .gateway import SecureInquiry
from .config import create_gateway, load_config, load_from_env, load_from_yaml
from .types import AuditEntry, InquiryResult, Placeholder, RedactedMessage

__all__ = [
    "Redactor", "sanitize", "is_valid_luhn",
    "FailureGate", "CircuitOpenError", "FAILURE_THRESHOLD",
    "AuditCipher", "EncryptionKeyError",
    "AuditStore", "JsonAuditStore", "SqliteAuditStore",
    "Generator", "MockGenerator",
    "SecureInquiry",
    "create_gateway", "load_config", "load_from_env", "load_from_yaml",
    "AuditEntry", "InquiryResult", "Placeholder", "RedactedMessage",
]
__version__ = "0.1.0"
