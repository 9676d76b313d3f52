import json
from functools import lru_cache

from pydantic import ValidationError

from surrogate.bootstrap.config.settings import SurrogateConfig
from surrogate.core.ports.storage import ByteStore
from surrogate.core.roundtrip import RoundTrip
from surrogate.infra.file_storage import FileByteStore
from surrogate.infra.lmdb_storage import LMDBByteStore
from surrogate.infra.msgpack_codec import MsgPackCodec


@lru_cache
def get_config() -> SurrogateConfig:
    try:
        return SurrogateConfig()
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}")
        raise SystemExit("\n".join(msg))


@lru_cache
def get_codec() -> MsgPackCodec:
    return MsgPackCodec()


@lru_cache
def get_store() -> ByteStore:
    storage = get_config().storage

    if storage.backend == "lmdb":
        return LMDBByteStore(path=str(storage.path), map_size=storage.map_size)
    return FileByteStore(storage.path)


@lru_cache
def get_roundtrip() -> RoundTrip:
    return RoundTrip(
        codec=get_codec(),
        store=get_store(),
        name=get_config().storage.name
    )


def reset() -> None:
    """Drop every cached dependency, closing the store if one was built."""
    if get_store.cache_info().currsize:
        get_store().close()

    for factory in (get_roundtrip, get_store, get_codec, get_config):
        factory.cache_clear()
