import logging
from typing import Any, Callable

from surrogate.core.errors import SurrogateError
from surrogate.core.ports.serializer import Codec
from surrogate.core.ports.storage import ByteStore


class RoundTrip:
    """
    Encodes a value, persists the bytes, reads them back and decodes
    them again.

    Each phase (encode, write, read, decode) either completes or raises.
    A failure is re-raised with the same error class, its message
    naming the phase and the value involved, and the original error
    chained. Nothing is retried.
    """

    def __init__(self, codec: Codec, store: ByteStore, name: str = "_serialized") -> None:
        self._codec = codec
        self._store = store
        self._name = name
        self._logger = logging.getLogger("core.roundtrip")

    @property
    def name(self) -> str:
        return self._name

    def serialize(self, value: Any) -> None:
        data = self._phase("encode", value, self._codec.encode, value)
        self._phase("write", value, self._store.write, self._name, data)
        self._logger.info("-- serialized")

    def deserialize(self, shape: type | None = None) -> Any:
        data = self._phase("read", self._name, self._store.read, self._name)
        value = self._phase("decode", self._name, self._codec.decode, data, shape)
        self._logger.info("-- deserialized")
        return value

    def run(self, value: Any, shape: type | None = None) -> Any:
        self.serialize(value)
        return self.deserialize(shape)

    @staticmethod
    def _phase(phase: str, subject: Any, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return func(*args)
        except SurrogateError as ex:
            raise type(ex)(f"{phase} failed for {subject}: {ex}") from ex
