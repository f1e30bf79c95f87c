"""
Reading features from vector files.

This module provides a high-level API for reading features from any vector
format fiona/GDAL can open (GeoPackage, Shapefile, GeoJSON, ...) into this
library's geometry classes, with the layer's EPSG code set as SRID so the
geometries can be written straight to EWKB.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType
from typing import Any

import fiona
from fiona.errors import FionaError
from pyproj import CRS
from pyproj.exceptions import CRSError
from shapely.errors import GEOSException
from shapely.geometry import shape

from .converters import geometry_from_shapely
from .exceptions import SpatialWriterError
from .geometry import Geometry

logger = logging.getLogger(__name__)


@dataclass
class Feature:
    """
    A feature read from a vector layer.

    Attributes:
        geometry: The feature's geometry (Point, LineString, Polygon, etc.)
        attributes: Dictionary of attribute values keyed by field name
        fid: Feature ID
    """

    geometry: Geometry | None
    attributes: dict[str, Any]
    fid: int | str | None = None

    def __getitem__(self, key: str) -> Any:
        """Allow dict-like access to attributes"""
        return self.attributes[key]

    def get(self, key: str, default: Any = None) -> Any:
        """Get attribute with default"""
        return self.attributes.get(key, default)


@dataclass
class LayerInfo:
    """
    Information about a layer in a vector source.

    Attributes:
        name: Layer name
        geometry_type: Geometry type from the layer schema
        srid: EPSG code of the layer CRS, if it has one
        fields: List of attribute field names
        feature_count: Number of features in the layer
    """

    name: str
    geometry_type: str | None = None
    srid: int | None = None
    fields: list[str] = field(default_factory=lambda: [])
    feature_count: int = 0


def crs_to_srid(crs_wkt: str | None) -> int | None:
    """
    Find the EPSG code for a CRS definition.

    Args:
        crs_wkt: WKT of the CRS, as reported by fiona

    Returns:
        EPSG code, or None if the CRS is missing or has no EPSG equivalent
    """
    if not crs_wkt:
        return None
    try:
        return CRS.from_user_input(crs_wkt).to_epsg()
    except CRSError:
        logger.warning("Could not parse layer CRS: %s", crs_wkt[:80])
        return None


def _parse_fid(fid: Any) -> int | str | None:
    if fid is None:
        return None
    try:
        return int(fid)
    except (TypeError, ValueError):
        return fid


class VectorSource:
    """
    Reader for vector files opened through fiona.

    Example:
        >>> with VectorSource("parcels.gpkg") as src:
        ...     for layer in src.layers:
        ...         print(layer.name, layer.geometry_type, layer.srid)
        ...     for feature in src.read_layer("parcels", limit=10):
        ...         print(to_hex_ewkb(feature.geometry))

    Attributes:
        path: Path to the vector file
        layers: List of LayerInfo objects describing available layers
    """

    def __init__(self, path: str | Path):
        """
        Open a vector file.

        Args:
            path: Path to the file

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If fiona cannot read the file
        """
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"Vector file not found: {self.path}")
        self._layers: list[LayerInfo] | None = None

    def close(self):
        """Drop cached layer information"""
        self._layers = None

    def __enter__(self) -> "VectorSource":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def layers(self) -> list[LayerInfo]:
        """List all layers in the file"""
        if self._layers is None:
            self._layers = self._load_layers()
        return self._layers

    @property
    def layer_names(self) -> list[str]:
        return [layer.name for layer in self.layers]

    def get_layer(self, name: str) -> LayerInfo | None:
        """
        Get layer info by name.

        Args:
            name: Layer name (case-insensitive)

        Returns:
            LayerInfo or None if not found
        """
        for layer in self.layers:
            if layer.name.lower() == name.lower():
                return layer
        return None

    def _load_layers(self) -> list[LayerInfo]:
        try:
            names = fiona.listlayers(str(self.path))
        except FionaError as e:
            raise ValueError(f"Invalid vector file: {e}") from e

        layers: list[LayerInfo] = []
        for name in names:
            with fiona.open(str(self.path), layer=name) as src:
                layers.append(
                    LayerInfo(
                        name=name,
                        geometry_type=src.schema.get("geometry"),
                        srid=crs_to_srid(src.crs_wkt),
                        fields=list(src.schema.get("properties", {})),
                        feature_count=len(src),
                    )
                )
        return layers

    def read_layer(
        self,
        name: str | None = None,
        limit: int | None = None,
        srid: int | None = None,
    ) -> Iterator[Feature]:
        """
        Read features from a layer.

        Args:
            name: Layer name (may be omitted when the file has a single layer)
            limit: Maximum number of features to return
            srid: SRID to set on geometries instead of the layer's EPSG code

        Yields:
            Feature objects with decoded geometries

        Raises:
            ValueError: If the layer is not found, or no name is given for a
                file with several layers
        """
        layer = self._resolve_layer(name)
        layer_srid = srid if srid is not None else layer.srid

        with fiona.open(str(self.path), layer=layer.name) as src:
            for i, record in enumerate(src):
                if limit is not None and i >= limit:
                    break
                yield Feature(
                    geometry=self._convert_geometry(record, layer_srid),
                    attributes=dict(record.properties or {}),
                    fid=_parse_fid(record.id),
                )

    def _resolve_layer(self, name: str | None) -> LayerInfo:
        if name is None:
            if len(self.layers) != 1:
                raise ValueError(
                    f"Layer name required, available layers: "
                    f"{', '.join(self.layer_names)}"
                )
            return self.layers[0]
        layer = self.get_layer(name)
        if layer is None:
            raise ValueError(f"Layer not found: {name}")
        return layer

    def _convert_geometry(self, record: Any, srid: int | None) -> Geometry | None:
        if record.geometry is None:
            return None
        try:
            return geometry_from_shapely(shape(record.geometry), srid=srid)
        except (SpatialWriterError, GEOSException) as e:
            logger.warning("Skipping geometry of feature %s: %s", record.id, e)
            return None


def read_features(
    path: str | Path,
    layer: str | None = None,
    limit: int | None = None,
    srid: int | None = None,
) -> Iterator[Feature]:
    """
    Convenience function to read features from a vector file.

    Example:
        >>> for feature in read_features("points.geojson", limit=5):
        ...     print(feature.fid, to_ewkt(feature.geometry))
    """
    with VectorSource(path) as src:
        yield from src.read_layer(layer, limit=limit, srid=srid)
