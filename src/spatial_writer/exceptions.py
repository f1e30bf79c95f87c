"""Exceptions raised while writing geometries."""


class SpatialWriterError(ValueError):
    """Base class for geometries that cannot be written"""


class UnsupportedSpatialTypeError(SpatialWriterError):
    """The geometry's type tag has no WKB type code."""

    def __init__(self, geometry_type: object):
        self.geometry_type = geometry_type
        super().__init__(f"Unsupported spatial type: {geometry_type!r}")


class UnsupportedSpatialInterfaceError(SpatialWriterError):
    """The geometry's kind has no coordinate encoding rule."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unsupported spatial interface: {kind}")
