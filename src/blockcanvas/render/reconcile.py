"""Generic keyed reconciliation.

Keeps a map of key -> render handle in line with a collection of items:
handles for vanished keys are released, new keys get a freshly constructed
handle, and retained keys have their existing handle updated in place.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")
H = TypeVar("H")
K = TypeVar("K", bound=Hashable)


@dataclass
class ReconcileResult(Generic[K]):
    """Keys touched by one reconciliation, grouped by outcome."""

    entered: list[K] = field(default_factory=list)
    updated: list[K] = field(default_factory=list)
    exited: list[K] = field(default_factory=list)

    @property
    def structural(self) -> bool:
        """True if any handle was created or released."""
        return bool(self.entered or self.exited)


class KeyedReconciler(Generic[K, T, H]):
    """Enter/update/exit over a persistent key -> handle map.

    Args:
        key: Extracts the identity key of an item
        enter: Builds and initialises the handle for a new item
        update: Refreshes the handle of a retained item
        exit: Releases the handle of a key no longer present

    Example:
        >>> log = []
        >>> r = KeyedReconciler(
        ...     key=lambda item: item,
        ...     enter=lambda item: f"h{item}",
        ...     update=lambda handle, item: log.append(handle),
        ...     exit=lambda handle, key: log.append(f"-{handle}"),
        ... )
        >>> r.reconcile([1, 2]).entered
        [1, 2]
        >>> result = r.reconcile([2, 3])
        >>> result.entered, result.updated, result.exited, log
        ([3], [2], [1], ['-h1', 'h2'])
    """

    def __init__(
        self,
        *,
        key: Callable[[T], K],
        enter: Callable[[T], H],
        update: Callable[[H, T], None],
        exit: Callable[[H, K], None],
    ) -> None:
        self._key = key
        self._enter = enter
        self._update = update
        self._exit = exit
        self._handles: dict[K, H] = {}

    @property
    def handles(self) -> dict[K, H]:
        """Current key -> handle map (read-only view by convention)."""
        return self._handles

    def get(self, key: K) -> H | None:
        return self._handles.get(key)

    def reconcile(self, items: Iterable[T]) -> ReconcileResult[K]:
        """Bring the handle map in line with *items*.

        Items sharing a key are collapsed to the last one.
        """
        incoming: dict[K, T] = {}
        for item in items:
            incoming[self._key(item)] = item

        result: ReconcileResult[K] = ReconcileResult()

        for key in [k for k in self._handles if k not in incoming]:
            handle = self._handles.pop(key)
            self._exit(handle, key)
            result.exited.append(key)

        for key, item in incoming.items():
            handle = self._handles.get(key)
            if handle is None:
                self._handles[key] = self._enter(item)
                result.entered.append(key)
            else:
                self._update(handle, item)
                result.updated.append(key)

        return result

    def clear(self) -> None:
        """Release every handle."""
        for key, handle in list(self._handles.items()):
            self._exit(handle, key)
        self._handles.clear()
