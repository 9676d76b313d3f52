import functools
import logging
from typing import Any

import msgpack

from surrogate.core.errors import DecodingFailure, EncodingFailure, ProxyRequired, SurrogateError
from surrogate.core.ports.serializer import Codec
from surrogate.core.protocol import Proxied, ShapeRegistry, registry, restore, substitute


class MsgPackCodec(Codec):
    """
    MsgPack-based implementation of the Codec interface.

    Primitive and composite values (numbers, text, bytes, lists, maps)
    are written as plain msgpack. Proxied values are replaced by their
    surrogate, written as an extension record:

        ExtType(PROXY_EXT, msgpack([shape, version, fields]))

    Surrogate fields are packed with the same codec, so a surrogate may
    itself hold Proxied values. On decode the shape name is looked up in
    the registry; a name that belongs to a live type is rejected with
    ProxyRequired.
    """
    PROXY_EXT: int = 1

    def __init__(self, shapes: ShapeRegistry = registry) -> None:
        self._shapes = shapes
        self._logger = logging.getLogger("infra.msgpack_codec")

    def encode(self, value: Any) -> bytes:
        try:
            return self._pack(value, set())
        except SurrogateError:
            raise
        except (TypeError, ValueError, OverflowError, RecursionError) as ex:
            raise EncodingFailure(f"Cannot encode {value!r}: {ex}") from ex

    def decode(self, data: bytes, shape: type | None = None) -> Any:
        if shape is not None and self._shapes.is_live(shape):
            raise ProxyRequired(
                f"{shape.__qualname__} cannot be decoded directly; "
                f"decode {shape.__qualname__}.SerializationProxy instead"
            )

        try:
            value = self._unpack(data)
        except SurrogateError:
            raise
        except (TypeError, ValueError) as ex:
            raise DecodingFailure(f"Malformed data: {ex}") from ex

        if shape is not None:
            expected = self._shapes.live_for(shape) if self._shapes.is_surrogate(shape) else shape
            if not isinstance(value, expected):
                raise DecodingFailure(
                    f"Expected {shape.__qualname__}, decoded {type(value).__qualname__}"
                )

        return value

    def _pack(self, value: Any, active: set[int]) -> bytes:
        # strict_types: subclasses and tuples go through _default instead of
        # being written as their base type
        return msgpack.packb(
            value,
            default=functools.partial(self._default, active=active),
            use_bin_type=True,
            strict_types=True,
        )

    def _unpack(self, data: bytes) -> Any:
        return msgpack.unpackb(
            data,
            ext_hook=self._ext_hook,
            raw=False,
            strict_map_key=False,
        )

    def _default(self, obj: Any, active: set[int]) -> msgpack.ExtType:
        if not isinstance(obj, Proxied):
            raise EncodingFailure(
                f"{type(obj).__qualname__} value {obj!r} is not encodable"
            )

        # Proxied values currently being packed, to catch self-references
        if id(obj) in active:
            raise EncodingFailure(
                f"{type(obj).__qualname__} value {obj} contains itself"
            )

        active.add(id(obj))
        try:
            surrogate = substitute(obj)
            if not self._shapes.is_surrogate(type(surrogate)):
                raise EncodingFailure(
                    f"{type(obj).__qualname__} produced unregistered surrogate "
                    f"{type(surrogate).__qualname__}"
                )

            header = [surrogate.SHAPE, surrogate.VERSION, surrogate.to_fields()]
            return msgpack.ExtType(self.PROXY_EXT, self._pack(header, active))
        finally:
            active.discard(id(obj))

    def _ext_hook(self, code: int, payload: bytes) -> Any:
        if code != self.PROXY_EXT:
            raise DecodingFailure(f"Unknown extension type {code}")

        header = self._unpack(payload)
        if not isinstance(header, list) or len(header) != 3:
            raise DecodingFailure(f"Malformed surrogate header {header!r}")

        shape, version, fields = header
        if not isinstance(shape, str):
            raise DecodingFailure(f"Surrogate shape must be text, got {shape!r}")

        surrogate_cls = self._shapes.surrogate_for(shape)
        if version != surrogate_cls.VERSION:
            raise DecodingFailure(
                f"{shape} version {version!r} is not supported "
                f"(expected {surrogate_cls.VERSION})"
            )

        self._logger.debug("Decoding %s v%d", shape, version)
        return restore(surrogate_cls.from_fields(fields))
