"""
Command-line interface for spatial-writer.

Usage:
    spatial-writer encode <WKT> [--srid SRID] [--format FORMAT]
    spatial-writer layers <file>
    spatial-writer dump <file> [--layer LAYER] [--format FORMAT]
"""

import json
import logging
import sys

import click
from shapely import wkt as shapely_wkt
from shapely.errors import ShapelyError

from .converters import geometry_from_shapely, write
from .exceptions import SpatialWriterError
from .reader import VectorSource

TEXT_FORMATS = ["hex", "ewkt", "wkt"]
SRID_RANGE = click.IntRange(0, 0xFFFFFFFF)

logger = logging.getLogger(__name__)


@click.group()
@click.version_option()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """
    Write 2D geometries as PostGIS EWKB.

    Geometries without an SRID are written as plain OGC WKB.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


@main.command()
@click.argument("geometry_wkt")
@click.option(
    "--srid", "-s", type=SRID_RANGE, help="SRID to write (omit for plain WKB)"
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(TEXT_FORMATS),
    default="hex",
    help="Output format (default: hex EWKB)",
)
@click.option(
    "--inherit-srid",
    is_flag=True,
    help="Write members of multi geometries with the container's SRID",
)
def encode(
    geometry_wkt: str, srid: int | None, output_format: str, inherit_srid: bool
):
    """
    Encode a WKT geometry.

    Examples:
        spatial-writer encode "POINT (1.5 2.5)"
        spatial-writer encode "MULTIPOINT ((0 0), (1 1))" --srid 4326 --inherit-srid
    """
    try:
        geom = geometry_from_shapely(shapely_wkt.loads(geometry_wkt), srid=srid)
        click.echo(write(geom, output_format, inherit_srid=inherit_srid))
    except (ShapelyError, SpatialWriterError) as e:
        click.echo(f"Error encoding geometry: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def layers(path: str, output_json: bool):
    """
    List the layers of a vector file.

    Shows geometry types, feature counts and SRIDs.
    """
    try:
        with VectorSource(path) as src:
            layer_list = src.layers
    except ValueError as e:
        click.echo(f"Error opening file: {e}", err=True)
        sys.exit(1)

    if output_json:
        data = [
            {
                "name": layer.name,
                "geometry_type": layer.geometry_type,
                "srid": layer.srid,
                "feature_count": layer.feature_count,
                "fields": layer.fields,
            }
            for layer in layer_list
        ]
        click.echo(json.dumps(data, indent=2))
        return

    if not layer_list:
        click.echo("No layers found.")
        return

    for layer in layer_list:
        click.echo(f"  {layer.name}")
        click.echo(f"    Type: {layer.geometry_type or 'Unknown'}")
        click.echo(f"    Features: {layer.feature_count:,}")
        if layer.srid:
            click.echo(f"    SRID: {layer.srid}")


@main.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--layer", "-l", help="Layer name (required if multiple layers)")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(TEXT_FORMATS),
    default="hex",
    help="Output format for geometries",
)
@click.option("--limit", "-n", type=int, help="Limit number of features")
@click.option("--srid", "-s", type=SRID_RANGE, help="Override the layer SRID")
@click.option(
    "--inherit-srid",
    is_flag=True,
    help="Write members of multi geometries with the container's SRID",
)
def dump(
    path: str,
    layer: str | None,
    output_format: str,
    limit: int | None,
    srid: int | None,
    inherit_srid: bool,
):
    """
    Dump the geometries of a layer, one feature per line.

    Each line holds the feature ID and the encoded geometry separated by a
    tab; features without a geometry, or with one that cannot be encoded,
    get an empty second column.

    Example:
        spatial-writer dump parcels.gpkg -l parcels -n 5
    """
    try:
        with VectorSource(path) as src:
            for feature in src.read_layer(layer, limit=limit, srid=srid):
                value = ""
                if feature.geometry is not None:
                    try:
                        value = write(
                            feature.geometry, output_format, inherit_srid=inherit_srid
                        )
                    except SpatialWriterError as e:
                        logger.warning(
                            "Skipping geometry of feature %s: %s", feature.fid, e
                        )
                click.echo(f"{feature.fid}\t{value}")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
