import random

from surrogate.bootstrap.deps import get_config, get_roundtrip, reset
from surrogate.core.helpers.utils import setup_logging
from surrogate.core.models.cache import InstanceCache
from surrogate.core.models.complex import ComplexNumber
from surrogate.core.roundtrip import RoundTrip


class NotSerializableString:
    """A text wrapper that does not declare itself Serializable."""

    def __init__(self, value: str) -> None:
        self.value = value

    def __str__(self) -> str:
        return self.value


def random_coordinate() -> float:
    return random.uniform(-10, 10)


def serialize_complex_numbers(roundtrip: RoundTrip) -> None:
    one = ComplexNumber.from_coordinates(1, 0)
    print(f"instance to serialize: {one}")
    one_deserialized = roundtrip.run(one, ComplexNumber.SerializationProxy)
    print(f"deserialized instance: {one_deserialized}")
    print()

    number = ComplexNumber.from_coordinates(random_coordinate(), random_coordinate())
    print(f"instance to serialize: {number}")
    number_deserialized = roundtrip.run(number, ComplexNumber.SerializationProxy)
    print(f"deserialized instance: {number_deserialized}")
    print()


def serialize_instance_cache(roundtrip: RoundTrip) -> None:
    cache = InstanceCache()
    cache.put("a string")
    cache.put(0)
    cache.put(NotSerializableString("not serializable!"))
    print(f"instance to serialize: {cache}")

    cache_deserialized = roundtrip.run(cache, InstanceCache.SerializationProxy)
    print(f"deserialized instance: {cache_deserialized}")


def main():
    config = get_config()
    setup_logging(config.logging.level)

    try:
        roundtrip = get_roundtrip()
        serialize_complex_numbers(roundtrip)
        serialize_instance_cache(roundtrip)
    finally:
        reset()


if __name__ == "__main__":
    main()
