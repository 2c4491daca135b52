"""Keyed mutation permits.

A ``PermitArena`` hands out one re-entrant lock per key so that writers of the
same cart (or the same product's stock) run one at a time while unrelated keys
proceed in parallel. A key's lock lives only while someone holds or waits on
it, so the arena does not grow with the number of carts and products seen.
"""

import threading
from collections.abc import Hashable, Iterable, Iterator
from contextlib import ExitStack, contextmanager


class _Permit:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.holders = 0


class PermitArena:
    def __init__(self, name: str) -> None:
        self.name = name
        self._guard = threading.Lock()
        self._permits: dict[Hashable, _Permit] = {}

    def _checkout(self, key: Hashable) -> _Permit:
        with self._guard:
            permit = self._permits.get(key)
            if permit is None:
                permit = _Permit()
                self._permits[key] = permit
            permit.holders += 1
            return permit

    def _checkin(self, key: Hashable, permit: _Permit) -> None:
        with self._guard:
            permit.holders -= 1
            if permit.holders == 0:
                del self._permits[key]

    @contextmanager
    def hold(self, *key: Hashable) -> Iterator[None]:
        """Hold the permit for ``key`` for the duration of the block."""
        permit = self._checkout(key)
        try:
            with permit.lock:
                yield
        finally:
            self._checkin(key, permit)

    @contextmanager
    def hold_all(self, keys: Iterable[tuple]) -> Iterator[None]:
        """Hold several permits at once.

        Keys are acquired in sorted order so two holders of overlapping key
        sets can never wait on each other.
        """
        with ExitStack() as stack:
            for key in sorted(set(keys)):
                stack.enter_context(self.hold(*key))
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._permits)


# One writer per (tenant_id, user_id) cart
cart_permits = PermitArena("cart")

# One writer per (tenant_id, product_id) stock count
stock_permits = PermitArena("stock")
