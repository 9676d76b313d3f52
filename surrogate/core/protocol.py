import abc
import logging
from typing import Any, ClassVar

from surrogate.core.errors import DecodingFailure, ProxyRequired

logger = logging.getLogger("core.protocol")


class Serializable(abc.ABC):
    """
    Capability marker for types that declare themselves persistable.

    Types opt in by subclassing (normally through Proxied). Primitives are
    not registered here: see `is_serializable` for how they qualify.
    """
    __slots__ = ()


SCALARS: frozenset[type] = frozenset({str, int, float, bool, bytes, type(None)})
"""
Scalar types the encoding service carries natively. Matched on the exact
type: a subclass (IntEnum member, OrderedDict, str subclass) would come
back as its base type and lose its identity, so it is not eligible.
`bool` is listed on its own because exact matching does not see it as an
`int`.
"""


def is_serializable(value: Any) -> bool:
    """
    Whether `value` survives an encode/decode round trip with its exact type.

    Scalars qualify by exact type. Plain lists qualify when every item
    does; plain dicts when every key is a scalar and every value
    qualifies. Tuples do not qualify since they decode as lists.
    Self-referencing lists and dicts do not qualify. Any other value
    qualifies iff it is a Serializable.
    """
    return _eligible(value, set())


def _eligible(value: Any, active: set[int]) -> bool:
    cls = type(value)
    if cls in SCALARS:
        return True

    if cls is not list and cls is not dict:
        return isinstance(value, Serializable)

    if id(value) in active:
        return False

    active.add(id(value))
    try:
        if cls is list:
            return all(_eligible(item, active) for item in value)
        return all(
            type(key) in SCALARS and _eligible(item, active)
            for key, item in value.items()
        )
    finally:
        active.discard(id(value))


class Surrogate(abc.ABC):
    """
    Minimal, independently versioned stand-in for a live value.

    A surrogate is the only thing written to or read from durable bytes
    for its live type. It exposes its payload as a flat list of fields and
    rebuilds the live value through the live type's public construction
    entry points.
    """
    __slots__ = ()

    SHAPE: ClassVar[str]
    """
    Stable wire name of the surrogate. Never derived from the module path
    so that moving code does not break stored bytes.
    """

    VERSION: ClassVar[int] = 1
    """
    Wire schema version. Bumped whenever the field layout changes.
    """

    @abc.abstractmethod
    def to_fields(self) -> list[Any]:
        """Return the minimal durable payload of this surrogate."""

    @classmethod
    @abc.abstractmethod
    def from_fields(cls, fields: Any) -> "Surrogate":
        """
        Rebuild the surrogate from a decoded payload.

        Implementations raise DecodingFailure when the payload does not
        match the expected layout.
        """

    @abc.abstractmethod
    def resolve(self) -> Any:
        """
        Build the live value through its regular factories or
        constructor. Never bypasses validation.
        """


class Proxied(Serializable):
    """
    Live type persisted exclusively through a surrogate.

    Implementations hand out a surrogate on encode and must never be
    decoded from bytes directly: the encoding service only accepts their
    surrogate's shape as a decode target.
    """
    __slots__ = ()

    @abc.abstractmethod
    def to_surrogate(self) -> Surrogate:
        """Produce the durable surrogate. Must not mutate ``self``."""


class ShapeRegistry:
    """
    Maps wire shape names to surrogate classes and live classes to
    the surrogate that stands in for them.

    Live types are registered under their qualified class name so that a
    stream naming a live shape can be recognised and rejected.
    """

    def __init__(self) -> None:
        self._surrogates: dict[str, type[Surrogate]] = {}
        self._live_shapes: dict[str, type[Proxied]] = {}
        self._by_live: dict[type[Proxied], type[Surrogate]] = {}
        self._by_surrogate: dict[type[Surrogate], type[Proxied]] = {}

    def register(self, live: type[Proxied], surrogate: type[Surrogate]) -> None:
        shape = surrogate.SHAPE
        live_shape = live.__qualname__

        taken = self._surrogates.keys() | self._live_shapes.keys()
        if shape in taken or live_shape in taken or shape == live_shape:
            raise ValueError(
                f"Shape conflict registering {live_shape} -> {shape}"
            )

        self._surrogates[shape] = surrogate
        self._live_shapes[live_shape] = live
        self._by_live[live] = surrogate
        self._by_surrogate[surrogate] = live

    def surrogate_for(self, shape: str) -> type[Surrogate]:
        if shape in self._live_shapes:
            raise ProxyRequired(
                f"Stream names live type '{shape}'; only its surrogate "
                f"'{self._by_live[self._live_shapes[shape]].SHAPE}' may be decoded"
            )

        try:
            return self._surrogates[shape]
        except KeyError:
            raise DecodingFailure(f"Unknown surrogate shape '{shape}'") from None

    def live_for(self, surrogate: type[Surrogate]) -> type[Proxied]:
        return self._by_surrogate[surrogate]

    def is_live(self, cls: type) -> bool:
        return cls in self._by_live

    def is_surrogate(self, cls: type) -> bool:
        return cls in self._by_surrogate


registry = ShapeRegistry()
"""
Default registry. Live types register their surrogate at import time.
"""


def substitute(value: Proxied) -> Surrogate:
    """Swap a live value for its surrogate ahead of encoding."""
    replacement = value.to_surrogate()
    logger.info("replacing %s with %s on serialization", value, replacement)
    return replacement


def restore(surrogate: Surrogate) -> Any:
    """
    Swap a decoded surrogate for the live value it describes.

    Rejections raised by the live type's construction path surface as
    DecodingFailure, with the original error chained.
    """
    try:
        live = surrogate.resolve()
    except (TypeError, ValueError, ArithmeticError) as ex:
        raise DecodingFailure(f"Cannot rebuild live value from {surrogate}: {ex}") from ex

    logger.info("replacing %s with %s on deserialization", surrogate, live)
    return live
