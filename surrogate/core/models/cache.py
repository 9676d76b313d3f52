import logging
import reprlib
import threading
from dataclasses import dataclass
from typing import Any, ClassVar, Iterable, TypeVar

from surrogate.core.errors import DecodingFailure
from surrogate.core.protocol import Proxied, Surrogate, is_serializable, registry

T = TypeVar("T")

logger = logging.getLogger("core.models.cache")


class InstanceCache(Proxied):
    """
    Heterogeneous container caching at most one instance per concrete type.

    Every value is keyed by its exact runtime type, so a lookup by type
    always yields an instance of that type. Inserting a second instance of
    a type replaces the first and hands it back.

    The cache is safe to share between threads. The key space is split
    over a fixed set of lock stripes: a `put` holds the stripe of its type
    for the whole read-modify-write, so readers of that slot never observe
    a torn replacement. Writers to different types do not contend unless
    their types land on the same stripe.

    Only values that pass `is_serializable` survive persistence; the
    others are dropped from the durable form without error.
    """
    __slots__ = ("_items", "_stripes")

    STRIPES: ClassVar[int] = 16

    def __init__(self, initial_instances: Iterable[Any] = ()) -> None:
        self._items: dict[type, Any] = {}
        self._stripes = tuple(threading.Lock() for _ in range(self.STRIPES))

        # last instance per type wins, as with repeated put()
        for instance in initial_instances:
            self.put(instance)

    def _stripe(self, cls: type) -> threading.Lock:
        return self._stripes[hash(cls) % len(self._stripes)]

    def put(self, instance: T) -> T | None:
        cls = type(instance)
        with self._stripe(cls):
            previous = self._items.get(cls)
            self._items[cls] = instance
        return previous

    def get(self, cls: type[T]) -> T | None:
        instance = self._items.get(cls)
        if instance is not None and not isinstance(instance, cls):
            raise TypeError(
                f"Slot {cls.__qualname__} holds a {type(instance).__qualname__}"
            )
        return instance

    def contains_key(self, cls: type) -> bool:
        return cls in self._items

    def values(self) -> list[Any]:
        """Snapshot of the cached instances."""
        return list(self._items.values())

    def __contains__(self, cls: object) -> bool:
        return cls in self._items

    def __len__(self) -> int:
        return len(self._items)

    @reprlib.recursive_repr("InstanceCache [...]")
    def __str__(self) -> str:
        entries = list(self._items.items())
        rendered = ", ".join(_entry(cls, value) for cls, value in entries)
        return f"InstanceCache [{len(entries)} items: {rendered}]"

    __repr__ = __str__

    def to_surrogate(self) -> "InstanceCache.SerializationProxy":
        values = self.values()
        eligible = tuple(value for value in values if is_serializable(value))

        if dropped := len(values) - len(eligible):
            logger.debug("Leaving %d non-serializable instance(s) out of %s", dropped, self)

        return InstanceCache.SerializationProxy(eligible)

    @dataclass(frozen=True, slots=True)
    class SerializationProxy(Surrogate):
        """
        Durable form of an InstanceCache: a flat sequence of the eligible
        values. Keys are not stored; each value's own type rebuilds its key.
        """
        SHAPE: ClassVar[str] = "InstanceCache.SerializationProxy"
        VERSION: ClassVar[int] = 1

        instances: tuple[Any, ...]

        def to_fields(self) -> list[Any]:
            return list(self.instances)

        @classmethod
        def from_fields(cls, fields: Any) -> "InstanceCache.SerializationProxy":
            if not isinstance(fields, list):
                raise DecodingFailure(f"{cls.SHAPE} expects a list of instances, got {fields!r}")
            return cls(tuple(fields))

        def resolve(self) -> "InstanceCache":
            return InstanceCache(self.instances)

        def __str__(self) -> str:
            rendered = ", ".join(_entry(type(value), value) for value in self.instances)
            return f"InstanceCache.SerializationProxy [{len(self.instances)} items: {rendered}]"


def _entry(cls: type, value: Any) -> str:
    return f"{cls.__name__} ({value})"


registry.register(InstanceCache, InstanceCache.SerializationProxy)
