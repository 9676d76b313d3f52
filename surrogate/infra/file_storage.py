import logging
from pathlib import Path

from surrogate.core.errors import ResourceFailure
from surrogate.core.ports.storage import ByteStore


class FileByteStore(ByteStore):
    """
    ByteStore implementation keeping one file per blob inside a
    directory. Every write and read opens its own file handle, which is
    closed on exit from the operation whether it succeeds or fails.
    """
    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)
        self._logger = logging.getLogger("infra.file_storage")

    def write(self, name: str, data: bytes) -> None:
        path = self._path(name)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as fh:
                fh.write(data)
        except OSError as ex:
            raise ResourceFailure(f"Cannot write '{path}': {ex}") from ex

        self._logger.debug("Wrote %d bytes to %s", len(data), path)

    def read(self, name: str) -> bytes:
        path = self._path(name)
        try:
            with path.open("rb") as fh:
                data = fh.read()
        except OSError as ex:
            raise ResourceFailure(f"Cannot read '{path}': {ex}") from ex

        self._logger.debug("Read %d bytes from %s", len(data), path)
        return data

    def delete(self, name: str) -> None:
        path = self._path(name)
        try:
            path.unlink(missing_ok=True)
        except OSError as ex:
            raise ResourceFailure(f"Cannot delete '{path}': {ex}") from ex

    def close(self) -> None:
        # nothing is held between calls
        pass

    def _path(self, name: str) -> Path:
        if not name or Path(name).name != name or name in (".", ".."):
            raise ResourceFailure(f"Invalid blob name {name!r}")
        return self._directory / name
