"""Shared fixtures: an independent EWKB reader for round-trip tests."""

import struct
from collections.abc import Callable

import pytest

from spatial_writer import (
    Geometry,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)

SRID_FLAG = 0x20000000


class EWKBReader:
    """Minimal little-endian EWKB reader, written against the byte layout only."""

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def _unpack(self, fmt: str, size: int) -> tuple:
        values = struct.unpack(fmt, self.data[self.pos : self.pos + size])
        self.pos += size
        return values

    def uint32(self) -> int:
        return self._unpack("<I", 4)[0]

    def point(self) -> Point:
        x, y = self._unpack("<dd", 16)
        return Point(x=x, y=y)

    def linestring(self) -> LineString:
        return LineString(points=[self.point() for _ in range(self.uint32())])

    def polygon(self) -> Polygon:
        return Polygon(rings=[self.linestring() for _ in range(self.uint32())])

    def geometry(self) -> Geometry:
        byte_order = self._unpack("<B", 1)[0]
        assert byte_order == 1, f"unexpected byte order {byte_order}"
        type_field = self.uint32()
        srid = self.uint32() if type_field & SRID_FLAG else None
        type_code = type_field & ~SRID_FLAG

        geom: Geometry
        if type_code == 1:
            geom = self.point()
        elif type_code == 2:
            geom = self.linestring()
        elif type_code == 3:
            geom = self.polygon()
        elif type_code == 4:
            geom = MultiPoint(points=self._members())
        elif type_code == 5:
            geom = MultiLineString(lines=self._members())
        elif type_code == 6:
            geom = MultiPolygon(polygons=self._members())
        else:
            raise ValueError(f"unexpected type code {type_code}")
        geom.srid = srid
        return geom

    def _members(self) -> list:
        return [self.geometry() for _ in range(self.uint32())]


def read_ewkb(data: bytes) -> Geometry:
    reader = EWKBReader(data)
    geom = reader.geometry()
    assert reader.pos == len(data), "trailing bytes after geometry"
    return geom


@pytest.fixture
def ewkb_reader() -> Callable[[bytes], Geometry]:
    return read_ewkb


@pytest.fixture
def square() -> Polygon:
    return Polygon.from_coordinates([[(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)]])


@pytest.fixture
def square_with_hole() -> Polygon:
    return Polygon.from_coordinates(
        [
            [(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)],  # exterior
            [(2, 2), (8, 2), (8, 8), (2, 8), (2, 2)],  # hole
        ]
    )
