from dataclasses import dataclass
from typing import ClassVar, Iterator, Tuple, Union


@dataclass(frozen=True)
class Coords:
    """
    Class to represent a pair of coordinates (x, y) or a 2D vector.
    Instances are immutable. Math operations always return a new instance.
    The same type is used for screen-space touches and map-space points.
    """

    x: float
    "X coordinate."
    y: float
    "Y coordinate."

    ZERO: ClassVar["Coords"]
    "Zero coordinates (0, 0)."

    @property
    def coords(self) -> Tuple[float, float]:
        """
        Returns the coordinates as a tuple (x, y).
        """
        return self.x, self.y

    def distance_to(self, coords: "Coords") -> float:
        """
        Returns the Euclidean distance between the point and another one.
        """
        return float(((self.x - coords.x) ** 2 + (self.y - coords.y) ** 2) ** 0.5)

    def __add__(self, other: Union["Coords", float]) -> "Coords":
        if isinstance(other, Coords):
            return Coords(self.x + other.x, self.y + other.y)
        return Coords(self.x + other, self.y + other)

    def __sub__(self, other: Union["Coords", float]) -> "Coords":
        if isinstance(other, Coords):
            return Coords(self.x - other.x, self.y - other.y)
        return Coords(self.x - other, self.y - other)

    def __mul__(self, other: float) -> "Coords":
        return Coords(self.x * other, self.y * other)

    def __truediv__(self, other: float) -> "Coords":
        return Coords(self.x / other, self.y / other)

    def __getitem__(self, index: int) -> float:
        """
        Returns the x coordinate if index is 0, the y coordinate otherwise.
        If index is not 0 or 1, raises an IndexError.
        """
        return self.coords[index]

    def __len__(self) -> int:
        return 2

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y))

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"

    def __repr__(self) -> str:
        return str(self)


Coords.ZERO = Coords(0, 0)


@dataclass(frozen=True)
class Size:
    """
    Width and height of a viewport, in screen points.
    """

    width: float
    height: float

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @classmethod
    def parse(cls, text: str) -> "Size":
        """
        Parses a "WIDTHxHEIGHT" string such as "390x700".
        """
        width, sep, height = text.lower().partition("x")
        if not sep:
            raise ValueError(f"Expected WIDTHxHEIGHT, got {text!r}")
        return cls(float(width), float(height))


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle with its origin at the minimum corner.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def expanded(self, amount: float) -> "Rect":
        """
        Returns a new rectangle grown by `amount` on every side.
        """
        return Rect(
            self.x - amount,
            self.y - amount,
            self.width + amount * 2,
            self.height + amount * 2,
        )

    def contains(self, point: Coords) -> bool:
        """
        Half-open containment test: the minimum edges are inside, the maximum edges are not.
        """
        return self.min_x <= point.x < self.max_x and self.min_y <= point.y < self.max_y
