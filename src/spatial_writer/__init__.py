"""
Spatial Writer Library

Write 2D vector geometries as PostGIS Extended Well-Known Binary (EWKB).

Geometries without an SRID are written as plain OGC WKB; geometries with an
SRID get the EWKB SRID flag and field, ready to be stored in a spatial
database.

Example:
    >>> from spatial_writer import Point, MultiPoint, encode, to_hex_ewkb
    >>>
    >>> encode(Point(x=1.5, y=2.5)).hex()
    '0101000000000000000000f83f0000000000000440'
    >>> to_hex_ewkb(Point(x=1.5, y=2.5, srid=4326))
    '0101000020E6100000000000000000F83F0000000000000440'

CLI Example:
    $ spatial-writer encode "POINT (1.5 2.5)" --srid 4326
    $ spatial-writer dump parcels.gpkg --layer parcels
"""

__version__ = "0.1.0"

from .geometry import (
    Geometry,
    GeometryType,
    Point,
    LineString,
    Polygon,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    GeometryCollection,
    BoundingBox,
)

from .exceptions import (
    SpatialWriterError,
    UnsupportedSpatialTypeError,
    UnsupportedSpatialInterfaceError,
)

from .encoder import (
    EWKBEncoder,
    encode,
)

from .converters import (
    FORMATS,
    to_wkt,
    to_ewkt,
    to_ewkb,
    to_hex_ewkb,
    write,
    geometry_to_shapely,
    geometry_from_shapely,
    reproject_geometry,
)

from .reader import (
    VectorSource,
    Feature,
    LayerInfo,
    read_features,
)

__all__ = [
    # Version
    "__version__",
    # Geometry types
    "Geometry",
    "GeometryType",
    "Point",
    "LineString",
    "Polygon",
    "MultiPoint",
    "MultiLineString",
    "MultiPolygon",
    "GeometryCollection",
    "BoundingBox",
    # Exceptions
    "SpatialWriterError",
    "UnsupportedSpatialTypeError",
    "UnsupportedSpatialInterfaceError",
    # Encoder
    "EWKBEncoder",
    "encode",
    # Converters
    "FORMATS",
    "to_wkt",
    "to_ewkt",
    "to_ewkb",
    "to_hex_ewkb",
    "write",
    "geometry_to_shapely",
    "geometry_from_shapely",
    "reproject_geometry",
    # Reader
    "VectorSource",
    "Feature",
    "LayerInfo",
    "read_features",
]
