"""Tests for the secure inquiry flow with in-memory collaborators."""

import sys, os, asyncio
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest

from guardian_gateway import (
    AuditCipher, AuditEntry, CircuitOpenError, FailureGate, MockGenerator,
    Placeholder, SecureInquiry,
)


class RecordingGenerator:
    def __init__(self, answer="Generated Answer"):
        self.answer = answer
        self.prompts = []

    async def generate(self, sanitized_text):
        self.prompts.append(sanitized_text)
        return self.answer


class FailingGenerator:
    def __init__(self, exc=None):
        self.exc = exc or TimeoutError("provider timed out")
        self.calls = 0

    async def generate(self, sanitized_text):
        self.calls += 1
        raise self.exc


class MemoryStore:
    def __init__(self, fail=False):
        self.rows = []
        self.fail = fail

    async def save(self, entry):
        if self.fail:
            raise OSError("disk full")
        self.rows.append(entry)

    def entries(self):
        return list(self.rows)


def _gateway(generator=None, store=None, gate=None):
    return SecureInquiry(
        generator=generator or RecordingGenerator(),
        store=store if store is not None else MemoryStore(),
        cipher=AuditCipher("test-key"),
        gate=gate or FailureGate(),
    )


# ── Happy path ───────────────────────────────────────────────────────

def test_generator_only_sees_sanitized_text():
    gen = RecordingGenerator()
    gw = _gateway(generator=gen)
    result = asyncio.run(gw.execute("u1", "Contact me at john@example.com please"))
    assert result.answer == "Generated Answer"
    assert gen.prompts == [f"Contact me at {Placeholder.EMAIL.value} please"]


def test_audit_entry_written_on_success():
    store = MemoryStore()
    gw = _gateway(store=store)
    asyncio.run(gw.execute("u1", "Email user@test.com SSN 123456789"))

    assert len(store.rows) == 1
    entry = store.rows[0]
    assert isinstance(entry, AuditEntry)
    assert entry.identifier == "u1"
    assert entry.sanitized == f"Email {Placeholder.EMAIL.value} SSN {Placeholder.SSN.value}"
    assert entry.timestamp.endswith("Z")
    assert "user@test.com" not in entry.encrypted_original
    assert gw.cipher.decrypt(entry.encrypted_original) == "Email user@test.com SSN 123456789"


def test_success_clears_prior_failures():
    gate = FailureGate()
    gate.record_failure()
    gate.record_failure()
    asyncio.run(_gateway(gate=gate).execute("u1", "hello"))
    assert gate.get_failure_count() == 0


def test_with_mock_generator():
    gw = _gateway(generator=MockGenerator(delay=0))
    assert asyncio.run(gw.execute("u1", "hi")).answer == "Generated Answer"
    assert gw.generator.calls == 1


# ── Failures ─────────────────────────────────────────────────────────

def test_generator_error_propagates_unchanged():
    exc = ConnectionError("boom")
    gate = FailureGate()
    store = MemoryStore()
    gw = _gateway(generator=FailingGenerator(exc), store=store, gate=gate)

    with pytest.raises(ConnectionError) as info:
        asyncio.run(gw.execute("u1", "hello"))
    assert info.value is exc
    assert gate.get_failure_count() == 1
    assert store.rows == []


def test_three_failures_open_the_gate_and_short_circuit():
    gen = FailingGenerator()
    gate = FailureGate()
    gw = _gateway(generator=gen, gate=gate)

    for _ in range(3):
        with pytest.raises(TimeoutError):
            asyncio.run(gw.execute("u1", "hello"))
    assert gate.is_open()

    with pytest.raises(CircuitOpenError):
        asyncio.run(gw.execute("u1", "hello"))
    assert gen.calls == 3
    assert gate.get_failure_count() == 3


def test_open_gate_skips_everything():
    gen = RecordingGenerator()
    store = MemoryStore()
    gate = FailureGate()
    for _ in range(3):
        gate.record_failure()

    with pytest.raises(CircuitOpenError):
        asyncio.run(_gateway(generator=gen, store=store, gate=gate).execute("u1", "a@b.com"))
    assert gen.prompts == []
    assert store.rows == []


def test_audit_failure_does_not_count_against_gate():
    gate = FailureGate()
    gw = _gateway(store=MemoryStore(fail=True), gate=gate)
    with pytest.raises(OSError):
        asyncio.run(gw.execute("u1", "hello"))
    assert gate.get_failure_count() == 0
