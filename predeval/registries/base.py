from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Iterator, List, TypeVar

K = TypeVar("K")
V = TypeVar("V")


@dataclass
class Registry(Generic[K, V]):
    """Ordered name -> implementation table.

    Typical usage:
        METRICS = Registry[str, MetricFn](_name="classification metrics")

        @METRICS.register("kappa")
        def _kappa(arrays, context):
            ...

        fn = METRICS.get("kappa")

    Iteration follows registration order, which is also the order metric
    records are emitted in. Registering a name twice is an error.
    """

    _entries: Dict[K, V] = field(default_factory=dict)
    _name: str = "registry"

    def register(self, key: K) -> Callable[[V], V]:
        if key in self._entries:
            raise KeyError(f"{self._name}: {key!r} is already registered")

        def deco(value: V) -> V:
            self._entries[key] = value
            return value

        return deco

    def get(self, key: K) -> V:
        try:
            return self._entries[key]
        except KeyError:
            hint = difflib.get_close_matches(str(key), [str(k) for k in self._entries], n=1)
            suffix = f"; did you mean {hint[0]!r}?" if hint else ""
            raise KeyError(f"{self._name}: unknown key {key!r}{suffix}") from None

    def keys(self) -> List[K]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[K]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
