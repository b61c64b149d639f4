"""Redactor — replaces emails, credit cards and SSNs with typed placeholders.

Usage:
    from guardian_gateway import Redactor

    redactor = Redactor()            # stateless, safe to share
    redactor.sanitize("Contact me at john@example.com please")
    # "Contact me at <REDACTED: EMAIL> please"

The passes run in a fixed order (email, credit card, SSN).  Each pass
sees only the output of the previous one; placeholders contain letters,
a colon and a space, so no later pass can match inside them.
"""

from __future__ import annotations
from typing import Any, Callable

from .patterns import redact_credit_cards, redact_emails, redact_ssns
from .types import RedactedMessage

Pass = Callable[[str], tuple[str, int]]

PASSES: tuple[tuple[str, Pass], ...] = (
    ("EMAIL", redact_emails),
    ("CREDIT_CARD", redact_credit_cards),
    ("SSN", redact_ssns),
)


class Redactor:
    """Ordered, deterministic PII redaction with no side effects."""

    __slots__ = ()

    def redact(self, message: Any) -> RedactedMessage:
        """Redact PII and report how many spans each pass replaced.

        Non-string and empty input yield an empty result rather than an
        error.
        """
        if not isinstance(message, str) or not message:
            return RedactedMessage(text="")

        counts: dict[str, int] = {}
        text = message
        for category, redact_pass in PASSES:
            text, counts[category] = redact_pass(text)
        return RedactedMessage(text=text, counts=counts)

    def sanitize(self, message: Any) -> str:
        """Return a copy of ``message`` with all PII replaced."""
        return self.redact(message).text


_default = Redactor()


def sanitize(message: Any) -> str:
    """Module-level convenience around a shared :class:`Redactor`."""
    return _default.sanitize(message)
