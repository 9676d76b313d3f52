class SurrogateError(Exception):
    """Base class for every error raised by the serialization layer."""


class ProxyRequired(SurrogateError):
    """
    A decode targeted a live type instead of its surrogate.

    Live types are never materialized straight from bytes: the stream
    must carry the surrogate shape, which then rebuilds the live value
    through its regular factories.
    """


class EncodingFailure(SurrogateError):
    """The encoding service cannot represent a value or its surrogate."""


class DecodingFailure(SurrogateError):
    """
    Bytes do not match the expected surrogate shape, or rebuilding the
    live value from a decoded surrogate was rejected.
    """


class ResourceFailure(SurrogateError):
    """The durable byte sink/source could not be opened, written or read."""
