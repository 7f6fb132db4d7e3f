from .coords import Coords, Rect, Size

__all__ = [
    "Coords",
    "Rect",
    "Size",
]
