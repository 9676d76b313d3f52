import math
from dataclasses import dataclass
from typing import Any, ClassVar

from surrogate.core.errors import DecodingFailure
from surrogate.core.protocol import Proxied, Surrogate, registry


class ComplexNumber(Proxied):
    """
    Immutable complex number.

    Both the coordinate form (real, imaginary) and the polar form
    (magnitude, angle) are kept on the instance, the polar pair being
    derived from the coordinates:

        magnitude = sqrt(real² + imaginary²)
        angle     = atan2(imaginary, real)

    Instances are only created through `from_coordinates` or `from_polar`,
    both of which compute the two forms together. The persisted form only
    carries the coordinates; decoding rebuilds the polar pair through
    `from_coordinates`.

    Two behaviours are kept as they are:
    - at the origin the angle is whatever `math.atan2(0, 0)` returns (0.0)
    - `from_polar` does not reject a negative magnitude
    """
    __slots__ = ("_real", "_imaginary", "_magnitude", "_angle")

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError(
            "ComplexNumber is created with ComplexNumber.from_coordinates() "
            "or ComplexNumber.from_polar()"
        )

    @classmethod
    def _create(
        cls,
        real: float,
        imaginary: float,
        magnitude: float,
        angle: float
    ) -> "ComplexNumber":
        instance = object.__new__(cls)
        object.__setattr__(instance, "_real", real)
        object.__setattr__(instance, "_imaginary", imaginary)
        object.__setattr__(instance, "_magnitude", magnitude)
        object.__setattr__(instance, "_angle", angle)
        return instance

    @classmethod
    def from_coordinates(cls, real: float, imaginary: float) -> "ComplexNumber":
        real = float(real)
        imaginary = float(imaginary)
        magnitude = math.hypot(real, imaginary)
        angle = math.atan2(imaginary, real)
        return cls._create(real, imaginary, magnitude, angle)

    @classmethod
    def from_polar(cls, magnitude: float, angle: float) -> "ComplexNumber":
        magnitude = float(magnitude)
        angle = float(angle)
        real = magnitude * math.cos(angle)
        imaginary = magnitude * math.sin(angle)
        return cls._create(real, imaginary, magnitude, angle)

    @property
    def real(self) -> float:
        return self._real

    @property
    def imaginary(self) -> float:
        return self._imaginary

    @property
    def magnitude(self) -> float:
        return self._magnitude

    @property
    def angle(self) -> float:
        return self._angle

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"ComplexNumber is immutable, cannot set '{name}'")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"ComplexNumber is immutable, cannot delete '{name}'")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComplexNumber):
            return NotImplemented
        return (self._real, self._imaginary) == (other._real, other._imaginary)

    def __hash__(self) -> int:
        return hash((self._real, self._imaginary))

    def __reduce__(self):
        # copy/pickle go through the factory as well
        return ComplexNumber.from_coordinates, (self._real, self._imaginary)

    def __repr__(self) -> str:
        return f"ComplexNumber.from_coordinates({self._real!r}, {self._imaginary!r})"

    def __str__(self) -> str:
        return (
            f"ComplexNumber ({self._real:.2f}/{self._imaginary:.2f}i; "
            f"{self._magnitude:.2f}@{self._angle:.2f}pi)"
        )

    def to_surrogate(self) -> "ComplexNumber.SerializationProxy":
        return ComplexNumber.SerializationProxy(self._real, self._imaginary)

    @dataclass(frozen=True, slots=True)
    class SerializationProxy(Surrogate):
        """
        Durable form of a ComplexNumber: the coordinates only.
        """
        SHAPE: ClassVar[str] = "ComplexNumber.SerializationProxy"
        VERSION: ClassVar[int] = 1

        real: float
        imaginary: float

        def to_fields(self) -> list[Any]:
            return [self.real, self.imaginary]

        @classmethod
        def from_fields(cls, fields: Any) -> "ComplexNumber.SerializationProxy":
            if not isinstance(fields, list) or len(fields) != 2:
                raise DecodingFailure(
                    f"{cls.SHAPE} expects [real, imaginary], got {fields!r}"
                )

            for value in fields:
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise DecodingFailure(
                        f"{cls.SHAPE} expects numeric coordinates, got {fields!r}"
                    )

            real, imaginary = fields
            return cls(float(real), float(imaginary))

        def resolve(self) -> "ComplexNumber":
            return ComplexNumber.from_coordinates(self.real, self.imaginary)

        def __str__(self) -> str:
            return f"ComplexNumber.SerializationProxy ({self.real:.2f}/{self.imaginary:.2f}i)"


registry.register(ComplexNumber, ComplexNumber.SerializationProxy)
