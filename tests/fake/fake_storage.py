from surrogate.core.errors import ResourceFailure
from surrogate.core.ports.storage import ByteStore


class FakeByteStore(ByteStore):
    """
    A simple in-memory byte store for testing.
    It mimics the blocking write/read/delete interface of the real stores
    and can be told to fail on the next write or read.
    """

    def __init__(self):
        self._data: dict[str, bytes] = {}
        self.write_calls = 0
        self.read_calls = 0
        self.fail_write = False
        self.fail_read = False
        self.closed = False

    def write(self, name: str, data: bytes) -> None:
        self.write_calls += 1
        if self.fail_write:
            raise ResourceFailure(f"disk full while writing '{name}'")
        self._data[name] = data

    def read(self, name: str) -> bytes:
        self.read_calls += 1
        if self.fail_read or name not in self._data:
            raise ResourceFailure(f"cannot read '{name}'")
        return self._data[name]

    def delete(self, name: str) -> None:
        self._data.pop(name, None)

    def close(self) -> None:
        self.closed = True
