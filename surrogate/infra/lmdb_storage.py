import threading

import lmdb

from surrogate.core.errors import ResourceFailure
from surrogate.core.ports.storage import ByteStore


class LMDBByteStore(ByteStore):
    """
    ByteStore implementation backed by an LMDB environment.

    Blob names map to keys of a single named database. Each call opens a
    short-lived LMDB transaction, committed (or aborted on error) before
    the call returns. LMDB errors surface as ResourceFailure.
    """
    DB_NAME: bytes = b"blobs"

    def __init__(self, path: str, map_size: int = 1 << 24) -> None:
        try:
            self._env = lmdb.open(path, map_size=map_size, max_dbs=1)
            self._db = self._env.open_db(self.DB_NAME)
        except lmdb.Error as ex:
            raise ResourceFailure(f"Cannot open LMDB environment at '{path}': {ex}") from ex

        self._path = path
        self._closed = False
        self._close_lock = threading.Lock()

    def write(self, name: str, data: bytes) -> None:
        key = self._key(name)
        try:
            with self._env.begin(db=self._db, write=True) as txn:
                txn.put(key, data)
        except lmdb.Error as ex:
            raise ResourceFailure(f"Cannot write '{name}' to '{self._path}': {ex}") from ex

    def read(self, name: str) -> bytes:
        key = self._key(name)
        try:
            with self._env.begin(db=self._db, write=False) as txn:
                data = txn.get(key)
        except lmdb.Error as ex:
            raise ResourceFailure(f"Cannot read '{name}' from '{self._path}': {ex}") from ex

        if data is None:
            raise ResourceFailure(f"No blob named '{name}' in '{self._path}'")
        return bytes(data)

    def delete(self, name: str) -> None:
        key = self._key(name)
        try:
            with self._env.begin(db=self._db, write=True) as txn:
                txn.delete(key)
        except lmdb.Error as ex:
            raise ResourceFailure(f"Cannot delete '{name}' from '{self._path}': {ex}") from ex

    def close(self) -> None:
        with self._close_lock:
            if not self._closed:
                self._env.close()
                self._closed = True

    @staticmethod
    def _key(name: str) -> bytes:
        if not name:
            raise ResourceFailure("Blob name must not be empty")
        return name.encode("utf-8")
