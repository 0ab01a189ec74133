"""Small value types persisted as comma separated integer lists."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class Size:
    width: int
    height: int


@dataclass(frozen=True)
class Rectangle:
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class Color:
    """ARGB colour, each channel in ``0..255``."""

    a: int
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in ("a", "r", "g", "b"):
            value = getattr(self, channel)
            if not 0 <= value <= 255:
                raise ValueError(f"colour channel {channel}={value} outside 0..255")
