"""Call-scoped memoization stores used across the trail engine.

Two flavours exist:

``MemoStore``
    Always active. Used for values derived from site settings that cannot
    change while the process lives, such as the canonical home URL.

``GatedMemo``
    Behaves like ``MemoStore`` once its ``ReadinessGate`` opens. Until then
    every call is a pass-through: nothing is read and nothing is stored, so a
    value computed before the ambient request is fully established can never
    leak into later calls.

Entries are keyed by an explicit caller key plus the call's argument tuple.
Arguments compare by value *and* type, so ``0``, ``False`` and ``""`` are
distinct keys. Stored ``None`` values are kept; absence is signalled with the
``MISSING`` sentinel.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Hashable, Tuple

__all__ = ["MISSING", "GatedMemo", "MemoStore", "ReadinessGate"]

LOGGER = logging.getLogger(__name__)


class _Missing:
    """Marker for "nothing memoized yet"."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def _freeze(value: Any) -> Hashable:
    """Return a hashable, type-tagged representation of ``value``."""
    if isinstance(value, Mapping):
        items = tuple(sorted((_freeze(key), _freeze(item)) for key, item in value.items()))
        return (type(value).__qualname__, items)
    if isinstance(value, (list, tuple)):
        return (type(value).__qualname__, tuple(_freeze(item) for item in value))
    if isinstance(value, (set, frozenset)):
        return (type(value).__qualname__, tuple(sorted(_freeze(item) for item in value)))
    return (type(value).__qualname__, value)


class MemoStore:
    """Unconditional get-or-set memo store."""

    def __init__(self) -> None:
        self._memo: Dict[Tuple[str, Hashable], Any] = {}

    def __len__(self) -> int:
        return len(self._memo)

    @property
    def active(self) -> bool:
        return True

    @staticmethod
    def _hash(key: str, args: Tuple[Any, ...]) -> Tuple[str, Hashable]:
        return (key, _freeze(args))

    def memo(self, key: str, *args: Any, value: Any = MISSING) -> Any:
        """Store ``value`` under ``key``/``args`` or return what was stored.

        Returns ``value`` when one is given, otherwise the stored value or
        ``MISSING`` when nothing was stored yet.
        """
        if not self.active:
            return value
        digest = self._hash(key, args)
        if value is not MISSING:
            self._memo[digest] = value
            return value
        return self._memo.get(digest, MISSING)

    def remember(self, key: str, factory: Callable[[], Any], *args: Any) -> Any:
        """Return the memoized value for ``key``/``args``, computing it once."""
        cached = self.memo(key, *args)
        if cached is not MISSING:
            return cached
        return self.memo(key, *args, value=factory())


class ReadinessGate:
    """One-way latch telling gated stores when caching becomes safe.

    ``readiness`` returns ``True`` once the ambient state is stable, ``False``
    when caching must never happen (batch contexts), and ``None`` when it
    cannot tell yet. Only definitive answers are latched.
    """

    def __init__(self, readiness: Callable[[], bool | None]) -> None:
        self._readiness = readiness
        self._ready: bool | None = None

    @property
    def ready(self) -> bool:
        if self._ready is not None:
            return self._ready
        verdict = self._readiness()
        if verdict is None:
            return False
        self._ready = bool(verdict)
        LOGGER.debug("Memo readiness latched to %s", self._ready)
        return self._ready


class GatedMemo(MemoStore):
    """Memo store that only reads and writes once its gate is open."""

    def __init__(self, gate: ReadinessGate) -> None:
        super().__init__()
        self.gate = gate

    @property
    def active(self) -> bool:
        return self.gate.ready
