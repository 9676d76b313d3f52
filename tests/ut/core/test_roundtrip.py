import logging

import pytest

from surrogate.core.errors import DecodingFailure, EncodingFailure, ProxyRequired, ResourceFailure
from surrogate.core.models.cache import InstanceCache
from surrogate.core.models.complex import ComplexNumber


class NotSerializableString:
    def __init__(self, value):
        self.value = value

    def __str__(self):
        return self.value


@pytest.mark.ut
def test_run_complex_number(roundtrip, store):
    decoded = roundtrip.run(ComplexNumber.from_coordinates(1, 0), ComplexNumber.SerializationProxy)

    assert (decoded.real, decoded.imaginary, decoded.magnitude, decoded.angle) == (1.0, 0.0, 1.0, 0.0)
    assert store.write_calls == 1
    assert store.read_calls == 1


@pytest.mark.ut
def test_run_instance_cache(roundtrip):
    cache = InstanceCache(["a string", 0, NotSerializableString("x")])
    decoded = roundtrip.run(cache)

    assert len(decoded) == 2
    assert decoded.get(str) == "a string"
    assert decoded.get(int) == 0
    assert not decoded.contains_key(NotSerializableString)


@pytest.mark.ut
def test_run_logs_phases(roundtrip, caplog):
    with caplog.at_level(logging.INFO, logger="core.roundtrip"):
        roundtrip.run(0)

    messages = [r.getMessage() for r in caplog.records if r.name == "core.roundtrip"]
    assert messages == ["-- serialized", "-- deserialized"]


@pytest.mark.ut
def test_encode_failure_names_phase_and_value(roundtrip, store):
    with pytest.raises(EncodingFailure) as exc_info:
        roundtrip.serialize(NotSerializableString("boom"))

    assert str(exc_info.value).startswith("encode failed for boom")
    assert isinstance(exc_info.value.__cause__, EncodingFailure)
    assert store.write_calls == 0


@pytest.mark.ut
def test_write_failure_is_resource_failure(roundtrip, store):
    store.fail_write = True

    with pytest.raises(ResourceFailure) as exc_info:
        roundtrip.serialize(1)

    assert str(exc_info.value).startswith("write failed for 1")


@pytest.mark.ut
def test_read_failure_is_resource_failure(roundtrip, store):
    with pytest.raises(ResourceFailure) as exc_info:
        roundtrip.deserialize()

    assert str(exc_info.value).startswith("read failed for _serialized")


@pytest.mark.ut
def test_decode_into_live_type_fails_in_decode_phase(roundtrip):
    roundtrip.serialize(ComplexNumber.from_coordinates(1, 0))

    with pytest.raises(ProxyRequired) as exc_info:
        roundtrip.deserialize(ComplexNumber)

    assert str(exc_info.value).startswith("decode failed for _serialized")


@pytest.mark.ut
def test_corrupted_bytes_fail_decoding(roundtrip, store):
    store.write(roundtrip.name, b"\xc1")

    with pytest.raises(DecodingFailure):
        roundtrip.deserialize()
