"""Detectors for the three structured PII categories.

Each pass is a ``text -> (text, count)`` function in the style of
``re.subn``.  The passes are chained by the Redactor in a fixed order:
emails, then credit cards, then SSNs.  Every pass runs in linear time:

  - emails use a hand-written scanner (a backtracking regex for
    ``local+@domain+.tld`` goes quadratic on long local-part runs)
  - digit runs use bounded quantifiers behind ``\\b``, so the regex
    engine does a constant amount of work per start position
"""

from __future__ import annotations
import re
import string

from .types import Placeholder

_LOCAL_CHARS = frozenset(string.ascii_letters + string.digits + "._%+-")
_DOMAIN_CHARS = frozenset(string.ascii_letters + string.digits + ".-")
_TLD_CHARS = frozenset(string.ascii_letters)
_MIN_TLD = 2

# ASCII word boundaries: a candidate may not touch [A-Za-z0-9_]
_CARD_CANDIDATE = re.compile(r"\b[0-9]{13,19}\b", re.ASCII)
_SSN = re.compile(r"\b[0-9]{9}\b", re.ASCII)

_DIGITS = frozenset(string.digits)


# ----------------------------------------------------------------------
# Email
# ----------------------------------------------------------------------

def _domain_end(text: str, start: int) -> int | None:
    """End offset of ``domain+ '.' tld{2,}`` beginning at ``start``.

    Mirrors greedy backtracking: the domain run is taken whole, then we
    back off to the right-most dot that is followed by a valid TLD.
    """
    n = len(text)
    run_end = start
    while run_end < n and text[run_end] in _DOMAIN_CHARS:
        run_end += 1

    dot = run_end - 1
    while dot > start:
        if text[dot] == ".":
            tld_end = dot + 1
            while tld_end < n and text[tld_end] in _TLD_CHARS:
                tld_end += 1
            if tld_end - dot - 1 >= _MIN_TLD:
                return tld_end
        dot -= 1
    return None


def find_emails(text: str) -> list[tuple[int, int]]:
    """Return non-overlapping ``(start, end)`` spans of email addresses."""
    spans: list[tuple[int, int]] = []
    floor = 0  # matches never start before the end of the previous one
    at = text.find("@")
    while at != -1:
        start = at
        while start > floor and text[start - 1] in _LOCAL_CHARS:
            start -= 1
        if start < at:
            end = _domain_end(text, at + 1)
            if end is not None:
                spans.append((start, end))
                floor = end
        at = text.find("@", max(at + 1, floor))
    return spans


def redact_emails(text: str) -> tuple[str, int]:
    spans = find_emails(text)
    if not spans:
        return text, 0
    parts: list[str] = []
    last = 0
    for start, end in spans:
        parts.append(text[last:start])
        parts.append(Placeholder.EMAIL.value)
        last = end
    parts.append(text[last:])
    return "".join(parts), len(spans)


# ----------------------------------------------------------------------
# Credit card
# ----------------------------------------------------------------------

def is_valid_luhn(number: str) -> bool:
    """Luhn checksum over a string of ASCII digits.

    Every second digit from the right is doubled (minus 9 when above 9);
    the number is valid when the digit sum is a multiple of 10.  Strings
    containing anything but ``0-9`` are never valid.
    """
    total = 0
    for i, ch in enumerate(reversed(number)):
        if ch not in _DIGITS:
            return False
        digit = ord(ch) - 48
        if i % 2:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def redact_credit_cards(text: str) -> tuple[str, int]:
    count = 0

    def _replace(m: re.Match) -> str:
        nonlocal count
        if is_valid_luhn(m.group()):
            count += 1
            return Placeholder.CREDIT_CARD.value
        return m.group()

    return _CARD_CANDIDATE.sub(_replace, text), count


# ----------------------------------------------------------------------
# SSN
# ----------------------------------------------------------------------

def redact_ssns(text: str) -> tuple[str, int]:
    return _SSN.subn(Placeholder.SSN.value, text)
