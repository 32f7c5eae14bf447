"""Tests for classifier configuration."""
import pytest

from poi_core.config import (
    FALLBACK_POI_KEYS, IMPORT_FILTER_KEYS, ClassifierConfig, parse_key_list
)


class TestKeySets:
    """Tests for the default key sets."""

    def test_fallback_keys(self):
        """Test the fallback key set."""
        assert FALLBACK_POI_KEYS == {"amenity", "shop", "leisure", "tourism"}

    def test_import_keys_superset(self):
        """Test the import set adds office and craft."""
        assert IMPORT_FILTER_KEYS - FALLBACK_POI_KEYS == {"office", "craft"}

    def test_parse_key_list(self):
        """Test comma-separated parsing."""
        assert parse_key_list(" amenity, shop ,,") == {"amenity", "shop"}


class TestClassifierConfig:
    """Tests for ClassifierConfig."""

    def test_defaults(self):
        """Test default values."""
        config = ClassifierConfig()
        assert config.fallback_keys == FALLBACK_POI_KEYS
        assert config.prefilter is True
        assert config.way_requires_building is True
        assert config.workers == 1
        assert config.rules_path is None
        assert config.query_limit == 1000

    def test_from_env(self):
        """Test environment variables are read."""
        config = ClassifierConfig.from_env({
            "OSMPOI_FALLBACK_KEYS": "amenity,craft",
            "OSMPOI_IMPORT_KEYS": "amenity",
            "OSMPOI_RULES": "/tmp/rules.json",
            "OSMPOI_WORKERS": "3",
        })
        assert config.fallback_keys == {"amenity", "craft"}
        assert config.import_filter_keys == {"amenity"}
        assert config.rules_path == "/tmp/rules.json"
        assert config.workers == 3

    def test_overrides_win(self):
        """Test explicit values win, None overrides are ignored."""
        config = ClassifierConfig.from_env({"OSMPOI_WORKERS": "3"},
                                           workers=2, rules_path=None)
        assert config.workers == 2
        assert config.rules_path is None

    def test_empty_env(self):
        """Test an empty environment gives defaults."""
        assert ClassifierConfig.from_env({}) == ClassifierConfig()

    @pytest.mark.parametrize("value", ["0", "-2", "many"])
    def test_invalid_workers(self, value):
        """Test invalid worker counts are rejected."""
        with pytest.raises(ValueError):
            ClassifierConfig.from_env({"OSMPOI_WORKERS": value})

    def test_frozen(self):
        """Test configs are immutable."""
        with pytest.raises(AttributeError):
            ClassifierConfig().workers = 4
