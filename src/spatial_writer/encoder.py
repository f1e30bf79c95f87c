"""
Extended Well-Known Binary (EWKB) encoder.

This module writes geometries in the PostGIS EWKB format, a strict superset
of OGC WKB: a geometry without an SRID is written as plain WKB, so every
output of this module without an SRID is readable by any WKB consumer.

Key Technical Facts:
    - Byte order: always little-endian, declared by a leading 0x01 byte
    - Type field: uint32 OGC type code (Point=1 ... MultiPolygon=6)
    - SRID flag: bit 29 (0x20000000) of the type field, set only when a
      4-byte SRID follows the type field
    - Z/M flags (bits 31/30) are never set: only 2D geometries are written
    - Rings and line string points are bare coordinate arrays, while members
      of Multi* geometries are complete (E)WKB geometries with their own
      header
"""

import logging
import struct

from .exceptions import UnsupportedSpatialInterfaceError, UnsupportedSpatialTypeError
from .geometry import (
    Geometry,
    GeometryType,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)

logger = logging.getLogger(__name__)

LITTLE_ENDIAN = 1
SRID_FLAG = 0x20000000


def pack_byte(value: int) -> bytes:
    """Pack an unsigned byte"""
    return struct.pack("<B", value)


def pack_uint32(value: int) -> bytes:
    """Pack an unsigned 32-bit integer, little-endian"""
    return struct.pack("<I", value)


def pack_point(x: float, y: float) -> bytes:
    """Pack an x, y pair as two little-endian IEEE-754 doubles"""
    return struct.pack("<dd", x, y)


class EWKBEncoder:
    """
    Encoder for the EWKB geometry format.

    Geometry Structure:
        - Byte 0: Byte order (always 0x01, little-endian)
        - Bytes 1-4: Type code, OR'd with SRID_FLAG in EWKB mode
        - Bytes 5-8: SRID (EWKB mode only)
        - Remaining bytes: Geometry body

    Body by geometry kind:
        - Point: x, y as doubles
        - LineString: uint32 point count, then x, y per point
        - Polygon: uint32 ring count, then each ring as a LineString body
        - MultiPoint/MultiLineString/MultiPolygon: uint32 member count, then
          each member as a complete geometry (byte order, type, SRID, body)

    Members of Multi* geometries are written with their own SRID. With
    ``inherit_srid=True`` a member without an SRID is written with the SRID
    of its container instead. The geometries themselves are never modified.

    Example:
        >>> from spatial_writer import EWKBEncoder, Point
        >>> EWKBEncoder().encode(Point(x=1.5, y=2.5)).hex()
        '0101000000000000000000f83f0000000000000440'
    """

    TYPE_CODES: dict[GeometryType, int] = {
        GeometryType.POINT: 1,
        GeometryType.LINESTRING: 2,
        GeometryType.POLYGON: 3,
        GeometryType.MULTIPOINT: 4,
        GeometryType.MULTILINESTRING: 5,
        GeometryType.MULTIPOLYGON: 6,
        GeometryType.COLLECTION: 7,
    }

    def __init__(self, inherit_srid: bool = False):
        """
        Initialize the encoder.

        Args:
            inherit_srid: If True, members of Multi* geometries that have no
                SRID are written with their container's SRID.
        """
        self.inherit_srid = inherit_srid

    def encode(self, geom: Geometry) -> bytes:
        """
        Encode a geometry to EWKB.

        Args:
            geom: The geometry to encode

        Returns:
            WKB bytes if the geometry has no SRID (absent or 0), EWKB bytes
            with the SRID flag and field otherwise

        Raises:
            UnsupportedSpatialTypeError: If the geometry's type tag is unknown
            UnsupportedSpatialInterfaceError: If the geometry kind cannot be
                written (e.g. geometry collections)
        """
        logger.debug(
            "Encoding %s (%s mode, srid=%s)",
            type(geom).__name__,
            "EWKB" if geom.srid else "WKB",
            geom.srid,
        )
        return self._encode(geom, geom.srid)

    def _encode(self, geom: Geometry, srid: int | None) -> bytes:
        parts = [self.write_byte_order()]
        if not srid:
            # WKB mode: identical to OGC WKB
            parts.append(self.write_type(geom))
        else:
            parts.append(self.write_type_and_dimension(geom))
            parts.append(self.write_srid(srid))
        parts.append(self.write_coordinates(geom, srid))
        return b"".join(parts)

    def write_byte_order(self) -> bytes:
        return pack_byte(LITTLE_ENDIAN)

    def type_code(self, geom: Geometry) -> int:
        """Look up the WKB type code for a geometry's type tag"""
        tag = getattr(geom, "geometry_type", None)
        try:
            return self.TYPE_CODES[tag]
        except KeyError:
            raise UnsupportedSpatialTypeError(tag) from None

    def write_type(self, geom: Geometry) -> bytes:
        return pack_uint32(self.type_code(geom))

    def write_type_and_dimension(self, geom: Geometry) -> bytes:
        """Write the type code with the SRID flag set (2D only)"""
        return pack_uint32(self.type_code(geom) | SRID_FLAG)

    def write_srid(self, srid: int | None) -> bytes:
        return pack_uint32(srid or 0)

    def write_coordinates(self, geom: Geometry, srid: int | None = None) -> bytes:
        """
        Write the body of a geometry.

        Args:
            geom: The geometry to write
            srid: SRID the geometry is being written with, handed down to
                Multi* members when ``inherit_srid`` is enabled

        Raises:
            UnsupportedSpatialInterfaceError: If the geometry kind has no
                body encoding
        """
        match geom:
            case Point():
                return self.write_point(geom)
            case LineString():
                return self.write_linestring(geom)
            case Polygon():
                return self.write_polygon(geom)
            case MultiPoint():
                return self._write_members(geom.points, srid)
            case MultiLineString():
                return self._write_members(geom.lines, srid)
            case MultiPolygon():
                return self._write_members(geom.polygons, srid)
            case _:
                raise UnsupportedSpatialInterfaceError(type(geom).__name__)

    def write_point(self, point: Point) -> bytes:
        return pack_point(point.x, point.y)

    def write_linestring(self, line: LineString) -> bytes:
        """Write point count then coordinates, without a header"""
        parts = [pack_uint32(len(line.points))]
        parts.extend(self.write_point(point) for point in line.points)
        return b"".join(parts)

    def write_polygon(self, poly: Polygon) -> bytes:
        """Write ring count then each ring as a bare line string body"""
        parts = [pack_uint32(len(poly.rings))]
        parts.extend(self.write_linestring(ring) for ring in poly.rings)
        return b"".join(parts)

    def _write_members(self, members: list, container_srid: int | None) -> bytes:
        parts = [pack_uint32(len(members))]
        for member in members:
            srid = member.srid
            if not srid and self.inherit_srid:
                srid = container_srid
            parts.append(self._encode(member, srid))
        return b"".join(parts)


def encode(geom: Geometry, inherit_srid: bool = False) -> bytes:
    """
    Convenience function to encode a geometry to EWKB.

    Args:
        geom: Geometry object
        inherit_srid: Write Multi* members without an SRID using the
            container's SRID

    Returns:
        EWKB bytes (plain WKB when the geometry has no SRID)

    Example:
        >>> encode(Point(x=1.5, y=2.5, srid=4326)).hex()
        '0101000020e6100000000000000000f83f0000000000000440'
    """
    return EWKBEncoder(inherit_srid=inherit_srid).encode(geom)
