"""
Geometry classes for representing 2D vector data.

These classes are plain read-only containers: the encoders only use their
accessors (coordinates, ordered point/ring/member lists, SRID and type tag).
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import IntEnum

Coord2D = tuple[float, float]


class GeometryType(IntEnum):
    """OGC geometry type codes, as written in the WKB type field"""

    POINT = 1
    LINESTRING = 2
    POLYGON = 3
    MULTIPOINT = 4
    MULTILINESTRING = 5
    MULTIPOLYGON = 6
    COLLECTION = 7


@dataclass
class BoundingBox:
    """Geometry bounding box"""

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    def __iter__(self) -> Iterator[float]:
        return iter((self.xmin, self.ymin, self.xmax, self.ymax))


def _merge_bounds(boxes: Iterable[BoundingBox]) -> BoundingBox:
    boxes = list(boxes)
    return BoundingBox(
        min(b.xmin for b in boxes),
        min(b.ymin for b in boxes),
        max(b.xmax for b in boxes),
        max(b.ymax for b in boxes),
    )


def _coords_text(points: Iterable["Point"]) -> str:
    return ", ".join(f"{p.x} {p.y}" for p in points)


@dataclass
class Point:
    """A 2D point"""

    x: float
    y: float
    srid: int | None = None

    geometry_type = GeometryType.POINT

    @property
    def has_srid(self) -> bool:
        return bool(self.srid)

    @property
    def wkt(self) -> str:
        return f"POINT ({self.x} {self.y})"

    @property
    def coordinates(self) -> Coord2D:
        return (self.x, self.y)

    @property
    def bounds(self) -> BoundingBox:
        return BoundingBox(self.x, self.y, self.x, self.y)


@dataclass
class LineString:
    """A line string (polyline)"""

    points: list[Point]
    srid: int | None = None

    geometry_type = GeometryType.LINESTRING

    @classmethod
    def from_coordinates(
        cls, coords: Iterable[Coord2D], srid: int | None = None
    ) -> "LineString":
        return cls(points=[Point(x, y) for x, y in coords], srid=srid)

    @property
    def has_srid(self) -> bool:
        return bool(self.srid)

    @property
    def wkt(self) -> str:
        if not self.points:
            return "LINESTRING EMPTY"
        return f"LINESTRING ({_coords_text(self.points)})"

    @property
    def coordinates(self) -> list[Coord2D]:
        return [p.coordinates for p in self.points]

    @property
    def bounds(self) -> BoundingBox:
        return _merge_bounds(p.bounds for p in self.points)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)


@dataclass
class Polygon:
    """
    A polygon with optional holes.

    The first ring is the exterior, the rest are interior rings. Closure and
    orientation are the caller's business.
    """

    rings: list[LineString]
    srid: int | None = None

    geometry_type = GeometryType.POLYGON

    @classmethod
    def from_coordinates(
        cls, rings: Iterable[Iterable[Coord2D]], srid: int | None = None
    ) -> "Polygon":
        return cls(rings=[LineString.from_coordinates(r) for r in rings], srid=srid)

    @property
    def exterior(self) -> LineString | None:
        """The exterior ring (first ring)"""
        return self.rings[0] if self.rings else None

    @property
    def interiors(self) -> list[LineString]:
        """Interior rings (holes)"""
        return self.rings[1:]

    @property
    def has_srid(self) -> bool:
        return bool(self.srid)

    @property
    def wkt(self) -> str:
        if not self.rings:
            return "POLYGON EMPTY"
        ring_strs = [f"({_coords_text(ring.points)})" for ring in self.rings]
        return f"POLYGON ({', '.join(ring_strs)})"

    @property
    def coordinates(self) -> list[list[Coord2D]]:
        return [ring.coordinates for ring in self.rings]

    @property
    def bounds(self) -> BoundingBox:
        return _merge_bounds(ring.bounds for ring in self.rings)


@dataclass
class MultiPoint:
    """Multiple points"""

    points: list[Point]
    srid: int | None = None

    geometry_type = GeometryType.MULTIPOINT

    @classmethod
    def from_coordinates(
        cls, coords: Iterable[Coord2D], srid: int | None = None
    ) -> "MultiPoint":
        return cls(points=[Point(x, y) for x, y in coords], srid=srid)

    @property
    def has_srid(self) -> bool:
        return bool(self.srid)

    @property
    def wkt(self) -> str:
        if not self.points:
            return "MULTIPOINT EMPTY"
        coords = ", ".join(f"({p.x} {p.y})" for p in self.points)
        return f"MULTIPOINT ({coords})"

    @property
    def coordinates(self) -> list[Coord2D]:
        return [p.coordinates for p in self.points]

    @property
    def bounds(self) -> BoundingBox:
        return _merge_bounds(p.bounds for p in self.points)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)


@dataclass
class MultiLineString:
    """Multiple line strings"""

    lines: list[LineString]
    srid: int | None = None

    geometry_type = GeometryType.MULTILINESTRING

    @classmethod
    def from_coordinates(
        cls, lines: Iterable[Iterable[Coord2D]], srid: int | None = None
    ) -> "MultiLineString":
        return cls(
            lines=[LineString.from_coordinates(line) for line in lines], srid=srid
        )

    @property
    def has_srid(self) -> bool:
        return bool(self.srid)

    @property
    def wkt(self) -> str:
        if not self.lines:
            return "MULTILINESTRING EMPTY"
        line_strs = [f"({_coords_text(line.points)})" for line in self.lines]
        return f"MULTILINESTRING ({', '.join(line_strs)})"

    @property
    def coordinates(self) -> list[list[Coord2D]]:
        return [line.coordinates for line in self.lines]

    @property
    def bounds(self) -> BoundingBox:
        return _merge_bounds(line.bounds for line in self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[LineString]:
        return iter(self.lines)


@dataclass
class MultiPolygon:
    """Multiple polygons"""

    polygons: list[Polygon]
    srid: int | None = None

    geometry_type = GeometryType.MULTIPOLYGON

    @classmethod
    def from_coordinates(
        cls,
        polygons: Iterable[Iterable[Iterable[Coord2D]]],
        srid: int | None = None,
    ) -> "MultiPolygon":
        return cls(
            polygons=[Polygon.from_coordinates(rings) for rings in polygons],
            srid=srid,
        )

    @property
    def has_srid(self) -> bool:
        return bool(self.srid)

    @property
    def wkt(self) -> str:
        if not self.polygons:
            return "MULTIPOLYGON EMPTY"
        poly_strs: list[str] = []
        for poly in self.polygons:
            ring_strs = [f"({_coords_text(ring.points)})" for ring in poly.rings]
            poly_strs.append(f"({', '.join(ring_strs)})")
        return f"MULTIPOLYGON ({', '.join(poly_strs)})"

    @property
    def coordinates(self) -> list[list[list[Coord2D]]]:
        return [poly.coordinates for poly in self.polygons]

    @property
    def bounds(self) -> BoundingBox:
        return _merge_bounds(poly.bounds for poly in self.polygons)

    def __len__(self) -> int:
        return len(self.polygons)

    def __iter__(self) -> Iterator[Polygon]:
        return iter(self.polygons)


@dataclass
class GeometryCollection:
    """
    A heterogeneous collection of geometries.

    Carries the COLLECTION type tag so it can be described as text, but has
    no binary encoding: the EWKB encoder rejects it.
    """

    geometries: list["Geometry"] = field(default_factory=lambda: [])
    srid: int | None = None

    geometry_type = GeometryType.COLLECTION

    @property
    def has_srid(self) -> bool:
        return bool(self.srid)

    @property
    def wkt(self) -> str:
        if not self.geometries:
            return "GEOMETRYCOLLECTION EMPTY"
        return f"GEOMETRYCOLLECTION ({', '.join(g.wkt for g in self.geometries)})"

    @property
    def bounds(self) -> BoundingBox:
        return _merge_bounds(g.bounds for g in self.geometries)

    def __len__(self) -> int:
        return len(self.geometries)

    def __iter__(self) -> Iterator["Geometry"]:
        return iter(self.geometries)


# Type alias for any geometry
Geometry = (
    Point
    | LineString
    | Polygon
    | MultiPoint
    | MultiLineString
    | MultiPolygon
    | GeometryCollection
)


def geometry_type_name(geom: Geometry) -> str:
    """Get the geometry type name"""
    return type(geom).__name__
