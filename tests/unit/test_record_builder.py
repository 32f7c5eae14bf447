"""Tests for record assembly."""
from datetime import datetime, timedelta, timezone

from poi_core.classification.record_builder import build_record, format_timestamp
from poi_core.models.elements import OSMNode


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_utc_datetime(self):
        """Test an aware UTC datetime."""
        ts = datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
        assert format_timestamp(ts) == "2021-03-04T05:06:07Z"

    def test_offset_converted_to_utc(self):
        """Test other offsets are normalized to UTC."""
        ts = datetime(2021, 3, 4, 7, 6, 7, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(ts) == "2021-03-04T05:06:07Z"

    def test_naive_taken_as_utc(self):
        """Test naive datetimes are not shifted."""
        assert format_timestamp(datetime(2021, 3, 4, 5, 6, 7)) == "2021-03-04T05:06:07Z"

    def test_subseconds_truncated(self):
        """Test microseconds are dropped."""
        ts = datetime(2021, 3, 4, 5, 6, 7, 999999, tzinfo=timezone.utc)
        assert format_timestamp(ts) == "2021-03-04T05:06:07Z"

    def test_epoch_seconds(self):
        """Test numeric epoch timestamps."""
        assert format_timestamp(86400) == "1970-01-02T00:00:00Z"

    def test_missing(self):
        """Test a missing timestamp formats as empty."""
        assert format_timestamp(None) == ""


class TestBuildRecord:
    """Tests for build_record."""

    def test_none_class_gives_none(self, sample_node):
        """Test nothing is emitted for unclassified elements."""
        assert build_record(sample_node, None) is None

    def test_fields_copied(self, sample_node):
        """Test identity, metadata and geometry are carried over."""
        record = build_record(sample_node, "pharmacy", (-0.1, 51.5))
        assert record.kind == "node"
        assert record.id == 12345
        assert record.class_name == "pharmacy"
        assert record.name == "Test Pharmacy"
        assert record.geometry == (-0.1, 51.5)
        assert record.version == 4
        assert record.timestamp == "2022-05-06T07:08:09Z"

    def test_tags_copied_not_shared(self, sample_node):
        """Test the record owns a copy of the tags."""
        record = build_record(sample_node, "pharmacy")
        sample_node.tags["amenity"] = "changed"
        assert record.tags["amenity"] == "pharmacy"

    def test_separate_name_folded_into_tags(self):
        """Test a name passed separately is merged into the tags."""
        node = OSMNode(id=1, lat=0.0, lon=0.0, tags={"amenity": "cafe"})
        record = build_record(node, "cafe", name="Corner Cafe")
        assert record.name == "Corner Cafe"
        assert record.tags["name"] == "Corner Cafe"

    def test_tag_name_kept_over_separate_name(self):
        """Test a name already in the tags is not overwritten."""
        node = OSMNode(id=1, lat=0.0, lon=0.0, tags={"name": "Tagged"})
        record = build_record(node, "misc", name="Other")
        assert record.tags["name"] == "Tagged"
        assert record.name == "Tagged"

    def test_served_name_matches_tags(self):
        """Test the stored element never reports a name it did not carry."""
        from poi_core.store import POIStore

        node = OSMNode(id=1, lat=1.0, lon=2.0,
                       tags={"name": "Tagged", "amenity": "cafe"})
        record = build_record(node, "cafe", (2.0, 1.0), name="Other")
        served = POIStore([record]).get_element("node", 1)["elements"][0]
        assert served["tags"] == {"name": "Tagged", "amenity": "cafe"}

    def test_tags_round_trip(self):
        """Test record tags equal the element tags, name included."""
        tags = {"amenity": "pharmacy", "name": "ACME", "shop": "chemist",
                "opening_hours": "Mo-Fr 08:00-18:00"}
        node = OSMNode(id=1, lat=0.0, lon=0.0, tags=dict(tags))
        record = build_record(node, "pharmacy")
        assert record.tags == tags
        assert record.tags is not node.tags

    def test_tags_round_trip_with_stripped_name(self):
        """Test a producer that strips name and passes it separately."""
        tags = {"amenity": "pharmacy", "name": "ACME", "shop": "chemist"}
        stripped = {k: v for k, v in tags.items() if k != "name"}
        node = OSMNode(id=1, lat=0.0, lon=0.0, tags=stripped)
        record = build_record(node, "pharmacy", name=tags["name"])
        assert record.tags == tags
        assert record.name == "ACME"

    def test_misc_class_emitted(self, sample_node):
        """Test misc is a regular class for record building."""
        assert build_record(sample_node, "misc").class_name == "misc"
