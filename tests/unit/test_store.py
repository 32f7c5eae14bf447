"""Tests for the in-memory POI store."""
import json

import pytest

from poi_core.exceptions import InvalidBBoxError, InvalidElementTypeError
from poi_core.models.records import ClassifiedRecord
from poi_core.store import POIStore, normalize_element_type, parse_bbox


class TestElementTypes:
    """Tests for element type normalization."""

    @pytest.mark.parametrize("value,expected", [
        ("node", "node"), ("n", "node"), ("NODE", "node"), ("N", "node"),
        ("way", "way"), ("w", "way"), ("W", "way"),
        ("relation", "relation"), ("r", "relation"), ("R", "relation"),
    ])
    def test_aliases(self, value, expected):
        """Test accepted spellings."""
        assert normalize_element_type(value) == expected

    def test_invalid(self):
        """Test unknown types are rejected."""
        with pytest.raises(InvalidElementTypeError, match="Use node, way, or relation"):
            normalize_element_type("area")


class TestPOIStore:
    """Tests for POIStore."""

    def test_upsert_replaces(self, sample_records):
        """Test writing the same (kind, id) replaces the record."""
        store = POIStore(sample_records)
        assert len(store) == 4

        updated = ClassifiedRecord(kind="node", id=1, class_name="chemist",
                                   tags={"shop": "chemist"}, name="ACME",
                                   geometry=(13.40, 52.52))
        assert store.upsert(updated) is True
        assert len(store) == 4
        assert store.get("node", 1).class_name == "chemist"

    def test_same_id_different_kind(self, sample_records):
        """Test node and way ids do not collide."""
        store = POIStore(sample_records)
        way = ClassifiedRecord(kind="way", id=1, class_name="museum")
        assert store.upsert(way) is False
        assert len(store) == 5
        assert ("way", 1) in store

    def test_delete(self, sample_records):
        """Test deleting a record."""
        store = POIStore(sample_records)
        assert store.delete("n", 1) is True
        assert store.delete("n", 1) is False
        assert len(store) == 3

    def test_query_bbox(self, sample_records):
        """Test bbox query returns elements inside the box."""
        store = POIStore(sample_records)
        response = store.query_bbox(13.3, 52.5, 13.5, 52.6)
        ids = [(e["type"], e["id"]) for e in response["elements"]]
        assert ids == [("node", 1), ("node", 2), ("way", 100)]

    def test_query_bbox_inclusive_edges(self, sample_records):
        """Test points on the box edge are included."""
        store = POIStore(sample_records)
        response = store.query_bbox(13.40, 52.52, 13.40, 52.52)
        assert [e["id"] for e in response["elements"]] == [1]

    def test_query_bbox_limit(self, sample_records):
        """Test the limit caps the result size."""
        store = POIStore(sample_records)
        response = store.query_bbox(-180, -90, 180, 90, limit=2)
        assert len(response["elements"]) == 2

    def test_query_bbox_skips_unlocated(self):
        """Test records without geometry never match a box."""
        store = POIStore([ClassifiedRecord(kind="node", id=1, class_name="misc")])
        assert store.query_bbox(-180, -90, 180, 90) == {"elements": []}

    def test_query_bbox_inverted(self, sample_records):
        """Test an inverted box is rejected."""
        with pytest.raises(InvalidBBoxError):
            POIStore(sample_records).query_bbox(0, 10, 1, 5)

    def test_records_in_accepts_string(self, sample_records):
        """Test bbox strings are parsed."""
        store = POIStore(sample_records)
        assert [r.id for r in store.records_in("-1,51,0,52")] == [9]

    def test_parse_bbox(self):
        """Test bbox string validation."""
        assert parse_bbox("1,2,3,4").north == 4.0
        with pytest.raises(InvalidBBoxError):
            parse_bbox("1,2")

    @pytest.mark.parametrize("value", [
        "nan,0,1,1", "0,0,inf,1", "-inf,0,1,1", "0,NaN,1,1",
    ])
    def test_parse_bbox_non_finite(self, value):
        """Test NaN and infinite coordinates are rejected."""
        with pytest.raises(InvalidBBoxError, match="finite"):
            parse_bbox(value)

    def test_query_bbox_non_finite(self, sample_records):
        """Test a NaN edge is rejected instead of matching nothing."""
        with pytest.raises(InvalidBBoxError):
            POIStore(sample_records).query_bbox(float("nan"), 0, 1, 1)

    def test_get_element(self, sample_records):
        """Test by-identity lookup folds the name into the tags."""
        store = POIStore(sample_records)
        response = store.get_element("n", 2)
        assert response == {"elements": [{
            "type": "node", "id": 2, "lat": 52.51, "lon": 13.41,
            "tags": {"shop": "bakery", "name": "Bread Box"},
        }]}

    def test_get_element_missing(self, sample_records):
        """Test a missing element gives None."""
        assert POIStore(sample_records).get_element("way", 999) is None

    def test_get_element_bad_type(self, sample_records):
        """Test invalid element types are rejected."""
        with pytest.raises(InvalidElementTypeError):
            POIStore(sample_records).get_element("x", 1)

    def test_save_and_load(self, sample_records, tmp_path):
        """Test persistence through a JSON file."""
        path = tmp_path / "store.json"
        assert POIStore(sample_records).save(str(path)) == 4

        loaded = POIStore.load(str(path))
        assert len(loaded) == 4
        assert loaded.get("way", 100) == sample_records[2]

    def test_load_exporter_output(self, sample_records, tmp_path):
        """Test loading a file with a 'records' list."""
        path = tmp_path / "export.json"
        path.write_text(json.dumps({
            "records": [r.to_dict() for r in sample_records],
            "metadata": {},
        }), encoding="utf-8")
        assert len(POIStore.load(str(path))) == 4
