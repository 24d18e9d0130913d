"""Tests for routing document I/O."""

import json
from pathlib import Path

import pytest

from polyroute.domain import (
    Connector,
    Point,
    PointObstacle,
    PolygonObstacle,
    Rectangle,
    RoutingDocument,
)
from polyroute.exceptions import DocumentFormatError, DocumentLoadError, DocumentSaveError
from polyroute.io import PathReader, PathWriter, document_to_json, json_to_document


@pytest.fixture
def document_data() -> dict:
    """A document with one connector and one of each obstacle kind."""
    return {
        "connectors": [
            {"id": "e1", "source": "a", "target": "b", "points": [[0, 0], [100, 0]]},
        ],
        "obstacles": [
            {"kind": "rectangle", "id": "n1", "x": 40, "y": -10, "width": 20, "height": 20},
            {"kind": "polygon", "points": [[0, 0], [10, 0], [5, 8]]},
            {"kind": "point", "id": "label", "center": [50, 0], "width": 20, "height": 10},
        ],
    }


@pytest.fixture
def document_file(tmp_path: Path, document_data: dict) -> Path:
    """The document fixture written to disk."""
    path = tmp_path / "diagram.json"
    path.write_text(json.dumps(document_data), encoding="utf-8")
    return path


class TestConverter:
    """Tests for JSON conversion."""

    def test_json_to_document(self, document_data: dict) -> None:
        document = json_to_document(document_data)

        assert document.connectors == [
            Connector("e1", [Point(0, 0), Point(100, 0)], source="a", target="b")
        ]
        assert document.obstacles == [
            Rectangle(40, -10, 20, 20, "n1"),
            PolygonObstacle([Point(0, 0), Point(10, 0), Point(5, 8)]),
            PointObstacle(Point(50, 0), width=20, height=10, id="label"),
        ]

    def test_document_to_json(self, document_data: dict) -> None:
        """Test that converting back yields the on-disk layout."""
        data = document_to_json(json_to_document(document_data))

        assert data["connectors"][0]["points"] == [[0, 0], [100, 0]]
        assert data["obstacles"][0]["kind"] == "rectangle"
        assert data["obstacles"][1]["points"] == [[0, 0], [10, 0], [5, 8]]
        assert data["obstacles"][2]["center"] == [50, 0]
        assert json_to_document(data) == json_to_document(document_data)

    def test_empty_document(self) -> None:
        assert json_to_document({}) == RoutingDocument()

    def test_unknown_obstacle_kind(self) -> None:
        with pytest.raises(DocumentFormatError):
            json_to_document({"obstacles": [{"kind": "circle", "x": 0, "y": 0}]})

    def test_short_polygon(self) -> None:
        with pytest.raises(DocumentFormatError):
            json_to_document({"obstacles": [{"kind": "polygon", "points": [[0, 0], [1, 1]]}]})

    def test_duplicate_connector_ids(self) -> None:
        """Test that two connectors sharing an id are rejected."""
        data = {
            "connectors": [
                {"id": "c", "points": [[0, 0], [100, 0]]},
                {"id": "c", "points": [[0, 5], [100, 5]]},
            ]
        }
        with pytest.raises(DocumentFormatError, match="Duplicate connector id: c"):
            json_to_document(data, "dup.json")

    def test_bad_point(self) -> None:
        with pytest.raises(DocumentFormatError) as exc_info:
            json_to_document({"connectors": [{"id": "e1", "points": [[0, 0, 0]]}]}, "x.json")
        assert exc_info.value.path == "x.json"


class TestPathReader:
    """Tests for PathReader."""

    def test_load(self, document_file: Path) -> None:
        reader = PathReader(document_file)
        reader.load()

        assert len(reader.connectors) == 1
        assert len(reader.obstacles) == 3
        assert [c.id for c in reader.iter_connectors()] == ["e1"]

    def test_context_manager(self, document_file: Path) -> None:
        with PathReader(document_file) as reader:
            assert reader.document.get_connector("e1") is not None

        with pytest.raises(RuntimeError):
            _ = reader.document

    def test_not_loaded(self, document_file: Path) -> None:
        with pytest.raises(RuntimeError, match="not loaded"):
            _ = PathReader(document_file).connectors

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            PathReader(tmp_path / "missing.json").load()

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(DocumentLoadError):
            PathReader(path).load()

    def test_invalid_schema(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"connectors": [{"points": []}]}), encoding="utf-8")

        with pytest.raises(DocumentFormatError):
            PathReader(path).load()


class TestPathWriter:
    """Tests for PathWriter."""

    def test_get_routed_path(self) -> None:
        assert PathWriter.get_routed_path(Path("/tmp/diagram.json")) == Path(
            "/tmp/diagram-routed.json"
        )

    def test_save(self, tmp_path: Path, document_data: dict) -> None:
        document = json_to_document(document_data)
        output = tmp_path / "out.json"

        writer = PathWriter(document, output)
        writer.update_connector(Connector("e1", [Point(0, 0), Point(0, 50), Point(100, 50)]))
        writer.save()

        saved = json.loads(output.read_text(encoding="utf-8"))
        assert saved["connectors"][0]["points"] == [[0, 0], [0, 50], [100, 50]]
        assert len(saved["obstacles"]) == 3
        assert output.read_text(encoding="utf-8").endswith("\n")

    def test_update_unknown_connector(self, document_data: dict, tmp_path: Path) -> None:
        writer = PathWriter(json_to_document(document_data), tmp_path / "out.json")
        with pytest.raises(ValueError, match="not found"):
            writer.update_connector(Connector("nope", []))

    def test_save_error(self, tmp_path: Path) -> None:
        writer = PathWriter(RoutingDocument(), tmp_path / "missing" / "out.json")
        with pytest.raises(DocumentSaveError):
            writer.save()
