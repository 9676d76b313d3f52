from typing import Any, Protocol


class Codec(Protocol):
    """
    Defines the interface of the encoding service that turns values
    into durable bytes and back.

    Implementations must:
    - substitute every Proxied value with its surrogate on encode
    - rebuild live values from surrogates on decode
    - refuse a live type as the target of a decode (ProxyRequired)
    - raise EncodingFailure / DecodingFailure instead of leaking
      backend-specific errors
    """

    def encode(self, value: Any) -> bytes:
        """Encode a value into bytes suitable for durable storage."""

    def decode(self, data: bytes, shape: type | None = None) -> Any:
        """
        Decode bytes back into a value.

        When `shape` is given it names the expected root: a surrogate
        class (the decoded value is then the live value it rebuilds) or a
        primitive type. Passing a live Proxied type raises ProxyRequired.
        """
