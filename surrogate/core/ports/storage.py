from typing import Protocol


class ByteStore(Protocol):
    """
    Minimal blocking interface for a durable byte sink/source.

    Blobs are addressed by name. Each call acquires and releases the
    underlying handle on its own, whether it succeeds or fails, so no
    handle outlives a single write or read.

    The interface does not prescribe location, format, or durability
    beyond the current session. Failures surface as ResourceFailure.
    """

    def write(self, name: str, data: bytes) -> None:
        """
        Store `data` under `name`, replacing any previous blob.
        """

    def read(self, name: str) -> bytes:
        """
        Return the blob stored under `name`.

        Raises ResourceFailure if nothing was written under that name.
        """

    def delete(self, name: str) -> None:
        """
        Remove the blob stored under `name`. Missing names are ignored.
        """

    def close(self) -> None:
        """
        Release every resource held by the store. The instance must not
        be used afterwards.
        """
