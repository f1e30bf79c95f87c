"""Tests for the command-line interface."""

import json
from pathlib import Path

import fiona
import pytest
from click.testing import CliRunner

from spatial_writer import MultiPoint, Point, to_hex_ewkb
from spatial_writer.cli import main

POINT_HEX = "0101000000000000000000F83F0000000000000440"
POINT_4326_HEX = "0101000020E6100000000000000000F83F0000000000000440"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def points_file(tmp_path: Path) -> Path:
    path = tmp_path / "points.gpkg"
    schema = {"geometry": "Point", "properties": {"name": "str"}}
    with fiona.open(
        str(path), "w", driver="GPKG", crs="EPSG:4326", schema=schema, layer="pts"
    ) as dst:
        dst.write(
            {
                "geometry": {"type": "Point", "coordinates": [1.5, 2.5]},
                "properties": {"name": "a"},
            }
        )
        dst.write({"geometry": None, "properties": {"name": "b"}})
    return path


@pytest.fixture
def mixed_file(tmp_path: Path) -> Path:
    path = tmp_path / "mixed.gpkg"
    schema = {"geometry": "Unknown", "properties": {"name": "str"}}
    point = {"type": "Point", "coordinates": [1.5, 2.5]}
    collection = {"type": "GeometryCollection", "geometries": [point]}
    with fiona.open(
        str(path), "w", driver="GPKG", crs="EPSG:4326", schema=schema, layer="mixed"
    ) as dst:
        for name, geometry in [("a", point), ("b", collection), ("c", point)]:
            dst.write({"geometry": geometry, "properties": {"name": name}})
    return path


class TestEncode:
    def test_encode_point(self, runner: CliRunner):
        result = runner.invoke(main, ["encode", "POINT (1.5 2.5)"])
        assert result.exit_code == 0
        assert result.output.strip() == POINT_HEX

    def test_encode_with_srid(self, runner: CliRunner):
        result = runner.invoke(main, ["encode", "POINT (1.5 2.5)", "--srid", "4326"])
        assert result.exit_code == 0
        assert result.output.strip() == POINT_4326_HEX

    def test_encode_ewkt(self, runner: CliRunner):
        result = runner.invoke(
            main, ["encode", "POINT (1.5 2.5)", "-s", "4326", "-f", "ewkt"]
        )
        assert result.output.strip() == "SRID=4326;POINT (1.5 2.5)"

    def test_encode_inherit_srid(self, runner: CliRunner):
        result = runner.invoke(
            main,
            ["encode", "MULTIPOINT ((1.5 2.5))", "--srid", "4326", "--inherit-srid"],
        )
        expected = to_hex_ewkb(
            MultiPoint(points=[Point(x=1.5, y=2.5)], srid=4326), inherit_srid=True
        )
        assert result.exit_code == 0
        assert result.output.strip() == expected
        assert result.output.strip().endswith(POINT_4326_HEX)

    def test_encode_collection_fails(self, runner: CliRunner):
        result = runner.invoke(main, ["encode", "GEOMETRYCOLLECTION (POINT (0 0))"])
        assert result.exit_code == 1
        assert "Unsupported spatial interface" in result.output

    def test_encode_invalid_wkt(self, runner: CliRunner):
        result = runner.invoke(main, ["encode", "POINT (1.5"])
        assert result.exit_code == 1
        assert "Error encoding geometry" in result.output

    @pytest.mark.parametrize("wkt", ["LINESTRING EMPTY", "POLYGON EMPTY"])
    def test_encode_empty_as_wkt(self, runner: CliRunner, wkt: str):
        result = runner.invoke(main, ["encode", wkt, "-f", "wkt"])
        assert result.exit_code == 0
        assert result.output.strip() == wkt

    @pytest.mark.parametrize("srid", ["-1", str(0xFFFFFFFF + 1)])
    def test_encode_srid_out_of_range(self, runner: CliRunner, srid: str):
        result = runner.invoke(main, ["encode", "POINT (1 2)", "--srid", srid])
        assert result.exit_code == 2
        assert "Invalid value for '--srid'" in result.output

    def test_encode_max_srid(self, runner: CliRunner):
        result = runner.invoke(main, ["encode", "POINT (1.5 2.5)", "-s", "4294967295"])
        assert result.exit_code == 0
        assert result.output.strip().startswith("0101000020FFFFFFFF")


class TestLayers:
    def test_layers(self, runner: CliRunner, points_file: Path):
        result = runner.invoke(main, ["layers", str(points_file)])
        assert result.exit_code == 0
        assert "pts" in result.output
        assert "SRID: 4326" in result.output

    def test_layers_json(self, runner: CliRunner, points_file: Path):
        result = runner.invoke(main, ["layers", str(points_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data[0]["name"] == "pts"
        assert data[0]["srid"] == 4326
        assert data[0]["feature_count"] == 2


class TestDump:
    def test_dump_hex(self, runner: CliRunner, points_file: Path):
        result = runner.invoke(main, ["dump", str(points_file)])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0].split("\t")[1] == POINT_4326_HEX
        # feature without geometry
        assert lines[1].endswith("\t")

    def test_dump_srid_override(self, runner: CliRunner, points_file: Path):
        result = runner.invoke(
            main, ["dump", str(points_file), "--srid", "0", "-n", "1"]
        )
        assert result.exit_code == 0
        assert result.output.splitlines() == [f"1\t{POINT_HEX}"]

    def test_dump_unknown_layer(self, runner: CliRunner, points_file: Path):
        result = runner.invoke(main, ["dump", str(points_file), "--layer", "nope"])
        assert result.exit_code == 1
        assert "Layer not found" in result.output

    def test_dump_srid_out_of_range(self, runner: CliRunner, points_file: Path):
        result = runner.invoke(main, ["dump", str(points_file), "--srid", "-5"])
        assert result.exit_code == 2
        assert "Invalid value for '--srid'" in result.output

    def test_dump_skips_collection(
        self, runner: CliRunner, mixed_file: Path, caplog: pytest.LogCaptureFixture
    ):
        result = runner.invoke(main, ["dump", str(mixed_file)])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == 3
        assert lines[0].endswith(POINT_4326_HEX)
        # the collection has no EWKB encoding
        assert lines[1].endswith("\t")
        assert lines[2].endswith(POINT_4326_HEX)
        assert "Skipping geometry of feature" in caplog.text

