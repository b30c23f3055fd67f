from __future__ import annotations

from typing import List, Optional

from crumbtrail.memo import MISSING, GatedMemo, MemoStore, ReadinessGate


def test_memo_returns_missing_until_stored() -> None:
    store = MemoStore()

    assert store.memo("answer") is MISSING
    assert store.memo("answer", value=42) == 42
    assert store.memo("answer") == 42
    assert not MISSING


def test_memo_keeps_stored_none() -> None:
    store = MemoStore()
    store.memo("nothing", value=None)

    assert store.memo("nothing") is None


def test_memo_keys_distinguish_argument_types() -> None:
    store = MemoStore()
    store.memo("key", 0, value="zero")
    store.memo("key", False, value="false")
    store.memo("key", "", value="empty")

    assert store.memo("key", 0) == "zero"
    assert store.memo("key", False) == "false"
    assert store.memo("key", "") == "empty"
    assert store.memo("key", None) is MISSING
    assert len(store) == 3


def test_memo_accepts_unhashable_arguments() -> None:
    store = MemoStore()
    store.memo("key", {"b": [1, 2], "a": {3}}, value="hit")

    assert store.memo("key", {"a": {3}, "b": [1, 2]}) == "hit"
    assert store.memo("key", {"a": {3}, "b": (1, 2)}) is MISSING


def test_remember_computes_once() -> None:
    store = MemoStore()
    calls: List[int] = []

    def factory() -> int:
        calls.append(1)
        return len(calls)

    assert store.remember("count", factory) == 1
    assert store.remember("count", factory) == 1
    assert store.remember("count", factory, "other") == 2


def test_gated_memo_passes_through_until_ready() -> None:
    verdict: List[Optional[bool]] = [None]
    gate = ReadinessGate(lambda: verdict[0])
    memo = GatedMemo(gate)
    counter = iter(range(100))

    assert memo.remember("value", lambda: next(counter)) == 0
    assert memo.remember("value", lambda: next(counter)) == 1
    assert memo.memo("value") is MISSING
    assert len(memo) == 0

    verdict[0] = True
    assert memo.remember("value", lambda: next(counter)) == 2
    assert memo.remember("value", lambda: next(counter)) == 2


def test_gate_latches_first_definitive_answer() -> None:
    answers = iter([None, False, True])
    gate = ReadinessGate(lambda: next(answers))

    assert not gate.ready
    assert not gate.ready
    # Latched to False: readiness is not consulted again.
    assert not gate.ready


def test_gate_latched_open_stays_open() -> None:
    calls: List[int] = []

    def readiness() -> bool:
        calls.append(1)
        return True

    gate = ReadinessGate(readiness)

    assert gate.ready
    assert gate.ready
    assert len(calls) == 1
