"""Generation-service port and the development stand-in.

Any object with ``async generate(sanitized_text) -> str`` satisfies the
port.  Implementations raise on network, timeout or provider errors; the
gateway counts those against the failure gate and re-raises them.
"""

from __future__ import annotations
import asyncio
from typing import Protocol, runtime_checkable

DEFAULT_ANSWER = "Generated Answer"
DEFAULT_DELAY = 2.0


@runtime_checkable
class Generator(Protocol):
    async def generate(self, sanitized_text: str) -> str: ...


class MockGenerator:
    """Answers every prompt with a fixed string after a short delay."""

    __slots__ = ("delay", "answer", "calls")

    def __init__(self, *, delay: float = DEFAULT_DELAY, answer: str = DEFAULT_ANSWER) -> None:
        self.delay = delay
        self.answer = answer
        self.calls = 0

    async def generate(self, sanitized_text: str) -> str:
        self.calls += 1
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        return self.answer
