"""
Output format converters for geometry data.

This module provides functions to convert geometries to various formats:
- WKT (Well-Known Text)
- EWKT (PostGIS Extended WKT, "SRID=n;" prefix)
- EWKB (PostGIS Extended WKB) as bytes or hex text
- Shapely geometries, in both directions
"""

from collections.abc import Callable

from pyproj import CRS, Transformer
from shapely.geometry import (
    GeometryCollection as ShapelyGeometryCollection,
)
from shapely.geometry import (
    LineString as ShapelyLineString,
)
from shapely.geometry import (
    MultiLineString as ShapelyMultiLineString,
)
from shapely.geometry import (
    MultiPoint as ShapelyMultiPoint,
)
from shapely.geometry import (
    MultiPolygon as ShapelyMultiPolygon,
)
from shapely.geometry import (
    Point as ShapelyPoint,
)
from shapely.geometry import (
    Polygon as ShapelyPolygon,
)
from shapely.geometry.base import BaseGeometry

from .encoder import EWKBEncoder
from .exceptions import UnsupportedSpatialInterfaceError
from .geometry import (
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)


def to_wkt(geom: Geometry) -> str:
    """
    Convert geometry to Well-Known Text (WKT) format.

    Args:
        geom: Geometry object

    Returns:
        WKT string representation

    Example:
        >>> pt = Point(x=-122.0, y=47.0)
        >>> to_wkt(pt)
        'POINT (-122.0 47.0)'
    """
    return geom.wkt


def to_ewkt(geom: Geometry) -> str:
    """
    Convert geometry to PostGIS Extended WKT.

    Geometries without an SRID produce plain WKT.

    Example:
        >>> to_ewkt(Point(x=1.0, y=2.0, srid=4326))
        'SRID=4326;POINT (1.0 2.0)'
    """
    if geom.srid:
        return f"SRID={geom.srid};{geom.wkt}"
    return geom.wkt


def to_ewkb(geom: Geometry, inherit_srid: bool = False) -> bytes:
    """
    Convert geometry to Extended Well-Known Binary (EWKB) format.

    Args:
        geom: Geometry object
        inherit_srid: Write Multi* members without an SRID using the
            container's SRID

    Returns:
        EWKB bytes, little-endian (plain WKB when there is no SRID)

    Example:
        >>> pt = Point(x=-122.0, y=47.0)
        >>> ewkb = to_ewkb(pt)
    """
    return EWKBEncoder(inherit_srid=inherit_srid).encode(geom)


def to_hex_ewkb(geom: Geometry, inherit_srid: bool = False) -> str:
    """
    Convert geometry to upper-case hex EWKB, as PostGIS prints geometries.

    Example:
        >>> to_hex_ewkb(Point(x=1.5, y=2.5))
        '0101000000000000000000F83F0000000000000440'
    """
    return to_ewkb(geom, inherit_srid=inherit_srid).hex().upper()


# Output strategies selectable by name; binary ones take inherit_srid
FORMATS: dict[str, Callable[..., str | bytes]] = {
    "wkt": to_wkt,
    "ewkt": to_ewkt,
    "ewkb": to_ewkb,
    "hex": to_hex_ewkb,
}


def write(
    geom: Geometry, fmt: str = "ewkb", inherit_srid: bool = False
) -> str | bytes:
    """
    Write a geometry using the output strategy named by ``fmt``.

    Args:
        geom: Geometry object
        fmt: One of the keys of ``FORMATS``
        inherit_srid: Passed on to the EWKB strategies

    Raises:
        ValueError: If the format name is unknown
    """
    try:
        strategy = FORMATS[fmt]
    except KeyError:
        raise ValueError(
            f"Unknown format: {fmt} (expected one of {', '.join(FORMATS)})"
        ) from None
    if strategy in (to_ewkb, to_hex_ewkb):
        return strategy(geom, inherit_srid=inherit_srid)
    return strategy(geom)


def _point_to_shapely(pt: Point) -> ShapelyPoint:
    return ShapelyPoint(pt.x, pt.y)


def _linestring_to_shapely(line: LineString) -> ShapelyLineString:
    return ShapelyLineString(line.coordinates)


def _polygon_to_shapely(poly: Polygon) -> ShapelyPolygon:
    if not poly.rings:
        return ShapelyPolygon()
    holes = [ring.coordinates for ring in poly.interiors]
    return ShapelyPolygon(poly.rings[0].coordinates, holes if holes else None)


def geometry_to_shapely(geom: Geometry) -> BaseGeometry:
    """
    Convert a library geometry to a Shapely geometry.

    The SRID is not carried over: Shapely geometries have no SRID attribute
    outside of ``shapely.set_srid``.

    Args:
        geom: Geometry object from this library

    Returns:
        Corresponding Shapely geometry object
    """
    if isinstance(geom, Point):
        return _point_to_shapely(geom)

    if isinstance(geom, LineString):
        return _linestring_to_shapely(geom)

    if isinstance(geom, Polygon):
        return _polygon_to_shapely(geom)

    if isinstance(geom, MultiPoint):
        return ShapelyMultiPoint([_point_to_shapely(pt) for pt in geom.points])

    if isinstance(geom, MultiLineString):
        return ShapelyMultiLineString(
            [_linestring_to_shapely(line) for line in geom.lines]
        )

    if isinstance(geom, MultiPolygon):
        return ShapelyMultiPolygon(
            [_polygon_to_shapely(poly) for poly in geom.polygons]
        )

    if isinstance(geom, GeometryCollection):
        return ShapelyGeometryCollection(
            [geometry_to_shapely(g) for g in geom.geometries]
        )

    raise UnsupportedSpatialInterfaceError(type(geom).__name__)


def _xy(coords) -> list[tuple[float, float]]:
    # Drop Z when present
    return [(c[0], c[1]) for c in coords]


def _linestring_from_shapely(line) -> LineString:
    return LineString.from_coordinates(_xy(line.coords))


def _polygon_from_shapely(poly: ShapelyPolygon) -> Polygon:
    if poly.is_empty:
        return Polygon(rings=[])
    rings = [_linestring_from_shapely(poly.exterior)]
    rings.extend(_linestring_from_shapely(ring) for ring in poly.interiors)
    return Polygon(rings=rings)


def geometry_from_shapely(shape: BaseGeometry, srid: int | None = None) -> Geometry:
    """
    Convert a Shapely geometry to a library geometry.

    Z coordinates are dropped. The SRID, if given, is set on the returned
    geometry only, not on its members.

    Args:
        shape: Shapely geometry
        srid: SRID for the resulting geometry

    Returns:
        Corresponding library geometry

    Raises:
        UnsupportedSpatialInterfaceError: If the Shapely geometry has no
            counterpart, such as an empty Point
    """
    if isinstance(shape, ShapelyPoint):
        if shape.is_empty:
            raise UnsupportedSpatialInterfaceError("empty Point")
        return Point(x=shape.x, y=shape.y, srid=srid)

    if isinstance(shape, ShapelyLineString):
        line = _linestring_from_shapely(shape)
        line.srid = srid
        return line

    if isinstance(shape, ShapelyPolygon):
        poly = _polygon_from_shapely(shape)
        poly.srid = srid
        return poly

    if isinstance(shape, ShapelyMultiPoint):
        return MultiPoint(
            points=[Point(x=pt.x, y=pt.y) for pt in shape.geoms], srid=srid
        )

    if isinstance(shape, ShapelyMultiLineString):
        return MultiLineString(
            lines=[_linestring_from_shapely(line) for line in shape.geoms], srid=srid
        )

    if isinstance(shape, ShapelyMultiPolygon):
        return MultiPolygon(
            polygons=[_polygon_from_shapely(poly) for poly in shape.geoms], srid=srid
        )

    if isinstance(shape, ShapelyGeometryCollection):
        return GeometryCollection(
            geometries=[geometry_from_shapely(g) for g in shape.geoms], srid=srid
        )

    raise UnsupportedSpatialInterfaceError(type(shape).__name__)


def get_transformer(
    source_crs: str | int | CRS,
    target_crs: str | int | CRS,
) -> Transformer:
    """
    Create a pyproj Transformer for coordinate reprojection.

    Args:
        source_crs: Source coordinate reference system (EPSG code, WKT, or CRS object)
        target_crs: Target coordinate reference system (EPSG code, WKT, or CRS object)

    Returns:
        A pyproj Transformer instance configured for the specified transformation.

    Example:
        >>> transformer = get_transformer(3857, 4326)
        >>> lon, lat = transformer.transform(-13410713.258, 5894992.591)
    """
    return Transformer.from_crs(source_crs, target_crs, always_xy=True)


def reproject_geometry(
    geom: Geometry,
    target_srid: int,
    source_srid: int | None = None,
) -> Geometry:
    """
    Reproject a geometry to another spatial reference system.

    The returned geometry, and every member of it, carries ``target_srid``.

    Args:
        geom: Geometry object to reproject
        target_srid: EPSG code to reproject to
        source_srid: EPSG code of the input, defaults to ``geom.srid``

    Returns:
        A new Geometry object with transformed coordinates

    Raises:
        ValueError: If neither ``source_srid`` nor ``geom.srid`` is set

    Example:
        >>> pt = Point(x=-13410713.258, y=5894992.591, srid=3857)
        >>> reprojected = reproject_geometry(pt, 4326)
        >>> round(reprojected.x, 4), round(reprojected.y, 4), reprojected.srid
        (-120.4705, 46.7108, 4326)
    """
    source = source_srid or geom.srid
    if not source:
        raise ValueError("Cannot reproject a geometry without a source SRID")
    transformer = get_transformer(source, target_srid)

    def point(pt: Point) -> Point:
        x, y = transformer.transform(pt.x, pt.y)
        return Point(x=x, y=y, srid=target_srid)

    def line(ls: LineString) -> LineString:
        return LineString(points=[point(pt) for pt in ls.points], srid=target_srid)

    def polygon(poly: Polygon) -> Polygon:
        return Polygon(rings=[line(ring) for ring in poly.rings], srid=target_srid)

    def reproject(g: Geometry) -> Geometry:
        if isinstance(g, Point):
            return point(g)
        if isinstance(g, LineString):
            return line(g)
        if isinstance(g, Polygon):
            return polygon(g)
        if isinstance(g, MultiPoint):
            return MultiPoint(points=[point(pt) for pt in g.points], srid=target_srid)
        if isinstance(g, MultiLineString):
            return MultiLineString(lines=[line(ls) for ls in g.lines], srid=target_srid)
        if isinstance(g, MultiPolygon):
            return MultiPolygon(
                polygons=[polygon(p) for p in g.polygons], srid=target_srid
            )
        if isinstance(g, GeometryCollection):
            return GeometryCollection(
                geometries=[reproject(m) for m in g.geometries], srid=target_srid
            )
        raise UnsupportedSpatialInterfaceError(type(g).__name__)

    return reproject(geom)
