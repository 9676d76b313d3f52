import os

import pytest

from tests.fake.fake_storage import FakeByteStore

from surrogate.bootstrap import deps
from surrogate.core.roundtrip import RoundTrip
from surrogate.infra.msgpack_codec import MsgPackCodec


@pytest.fixture
def codec():
    return MsgPackCodec()


@pytest.fixture
def store():
    return FakeByteStore()


@pytest.fixture
def roundtrip(codec, store):
    return RoundTrip(codec=codec, store=store)


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run with an empty working directory and no SURROGATE_* variables."""
    for key in list(os.environ):
        if key.startswith("SURROGATE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)

    deps.reset()
    try:
        yield tmp_path
    finally:
        deps.reset()
